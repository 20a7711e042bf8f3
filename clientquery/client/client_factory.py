"""ClientQuery Client Factory

Factory function to create the appropriate ClientQuery client implementation
based on configuration settings.
"""

import logging
from typing import Optional

from .clientquery_client import ClientQueryClient
from ..mock.client.mock_clientquery_client import MockClientQueryClient
from .clientquery_client_inf import ClientQueryClientInterface
from .config.client_config_loader import ClientQueryClientConfig, ClientConfigurationError

logger = logging.getLogger(__name__)


def create_clientquery_client(config_path: Optional[str] = None, *,
                              config: Optional[ClientQueryClientConfig] = None) -> ClientQueryClientInterface:
    """
    Create a ClientQuery client based on configuration settings.

    Returns a MockClientQueryClient when the configuration sets
    ``client.use_mock_client``, otherwise a ClientQueryClient.

    Args:
        config_path: Path to the client configuration YAML file (optional if config provided)
        config: Pre-configured ClientQueryClientConfig object (takes precedence over config_path)

    Returns:
        ClientQueryClientInterface: Either ClientQueryClient or MockClientQueryClient

    Raises:
        ClientConfigurationError: If configuration is invalid
    """
    if config is not None:
        client_config = config
        logger.info("Using provided config object for client creation")
    else:
        client_config = ClientQueryClientConfig(config_path)
        logger.info(f"Loaded config from {client_config.config_path} for client creation")

    try:
        client_config.validate_config()
    except ClientConfigurationError as e:
        logger.error(f"Configuration error while creating client: {e}")
        raise

    if client_config.use_mock_client():
        logger.info("Creating MockClientQueryClient based on configuration setting")
        return MockClientQueryClient(config_path, config=client_config)

    logger.info("Creating ClientQueryClient based on configuration setting")
    return ClientQueryClient(config_path, config=client_config)


def create_mock_client(config_path: Optional[str] = None, *,
                       config: Optional[ClientQueryClientConfig] = None) -> MockClientQueryClient:
    """Create a mock ClientQuery client for testing."""
    logger.info("Creating MockClientQueryClient for testing")
    return MockClientQueryClient(config_path, config=config)


def create_real_client(config_path: Optional[str] = None, *,
                       config: Optional[ClientQueryClientConfig] = None) -> ClientQueryClient:
    """
    Create a real ClientQuery client (forces real client regardless of config).

    Args:
        config_path: Path to the client configuration YAML file (optional if config provided)
        config: Pre-configured ClientQueryClientConfig object (takes precedence over config_path)

    Returns:
        ClientQueryClient: Real client instance
    """
    logger.info("Creating ClientQueryClient (forced real client)")
    return ClientQueryClient(config_path, config=config)
