"""
ClientQuery Client Configuration Loader

This module provides functionality to load and validate ClientQuery client configuration
from YAML files for connecting to SharePoint ProcessQuery endpoints.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


class ClientConfigurationError(Exception):
    """Raised when there are client configuration loading or validation errors."""
    pass


class ClientQueryClientConfig:
    """
    ClientQuery client configuration loader and manager.

    Loads configuration from YAML files and provides access to configuration
    sections. Server URLs and the access token can be overridden with the
    CLIENTQUERY_ADMIN_URL, CLIENTQUERY_SITE_URL and CLIENTQUERY_ACCESS_TOKEN
    environment variables, which are also read from a .env file when present.
    """

    def __init__(self, config_path: Optional[str] = None, env_file: Optional[str] = None):
        """
        Initialize the client configuration loader.

        Args:
            config_path: Path to configuration file. If None, uses default locations or built-in defaults.
            env_file: Optional .env file with environment overrides
        """
        self.config_data: Dict[str, Any] = {}
        self.config_path: Optional[str] = None

        if env_file is not None:
            load_dotenv(env_file)
        else:
            load_dotenv()

        if config_path is not None:
            self.load_config(config_path)
        else:
            self._load_default_config()

    def load_config(self, config_path: str) -> None:
        """
        Load configuration from a specific file path.

        Args:
            config_path: Path to the YAML configuration file

        Raises:
            ClientConfigurationError: If the file cannot be loaded or parsed
        """
        config_file = Path(config_path)

        if not config_file.exists():
            raise ClientConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                self.config_data = yaml.safe_load(f) or {}

            self.config_path = str(config_file.absolute())
            logger.info(f"Loaded client configuration from: {self.config_path}")

        except yaml.YAMLError as e:
            raise ClientConfigurationError(f"Error parsing YAML configuration: {e}")
        except OSError as e:
            raise ClientConfigurationError(f"Error loading configuration file: {e}")

    def _load_default_config(self) -> None:
        """
        Load default configuration by searching standard locations or using built-in defaults.
        """
        default_paths = [
            "clientquery-config.yaml",
            "clientquery_config/clientquery-config.yaml",
            os.path.expanduser("~/.clientquery/clientquery-config.yaml"),
            "/etc/clientquery/clientquery-config.yaml"
        ]

        for path in default_paths:
            if os.path.exists(path):
                try:
                    self.load_config(path)
                    logger.info(f"Found and loaded default config from: {path}")
                    return
                except ClientConfigurationError:
                    continue

        # No config file found, use built-in defaults
        self.config_data = {
            'server': {
                'admin_url': 'https://contoso-admin.sharepoint.com',
                'site_url': 'https://contoso.sharepoint.com'
            },
            'auth': {
                'access_token': None
            },
            'client': {
                'application_name': 'ClientQuery',
                'schema_version': '15.0.0.0',
                'library_version': '16.0.0.0',
                'timeout': 30,
                'max_retries': 3,
                'retry_delay': 1,
                'use_mock_client': False
            }
        }
        self.config_path = "<built-in defaults>"
        logger.info("Using built-in default configuration")

    def get_server_config(self) -> Dict[str, Any]:
        return self.config_data.get('server', {})

    def get_auth_config(self) -> Dict[str, Any]:
        return self.config_data.get('auth', {})

    def get_client_config(self) -> Dict[str, Any]:
        return self.config_data.get('client', {})

    def get_admin_url(self) -> str:
        """
        Get the tenant admin site URL, used for tenant-wide taxonomy operations.

        Returns:
            Admin site URL string
        """
        server_config = self.get_server_config()
        return os.getenv('CLIENTQUERY_ADMIN_URL', server_config.get('admin_url', 'https://contoso-admin.sharepoint.com'))

    def get_site_url(self) -> str:
        """
        Get the default site URL.

        Returns:
            Site URL string
        """
        server_config = self.get_server_config()
        return os.getenv('CLIENTQUERY_SITE_URL', server_config.get('site_url', 'https://contoso.sharepoint.com'))

    def get_access_token(self) -> Optional[str]:
        """
        Get the OAuth bearer token sent with every request.

        Returns:
            Access token, or None when requests are sent without an Authorization header
        """
        auth_config = self.get_auth_config()
        return os.getenv('CLIENTQUERY_ACCESS_TOKEN', auth_config.get('access_token'))

    def get_application_name(self) -> str:
        return self.get_client_config().get('application_name', 'ClientQuery')

    def get_schema_version(self) -> str:
        return self.get_client_config().get('schema_version', '15.0.0.0')

    def get_library_version(self) -> str:
        return self.get_client_config().get('library_version', '16.0.0.0')

    def get_envelope_settings(self) -> Dict[str, str]:
        """
        Get the attributes of the ProcessQuery request envelope.

        Returns:
            Dictionary with application_name, schema_version and library_version
        """
        return {
            'application_name': self.get_application_name(),
            'schema_version': self.get_schema_version(),
            'library_version': self.get_library_version(),
        }

    def get_timeout(self) -> int:
        """
        Get the request timeout in seconds.

        Returns:
            Timeout in seconds
        """
        return self.get_client_config().get('timeout', 30)

    def get_max_retries(self) -> int:
        """
        Get the maximum number of retry attempts for transient transport errors.

        Returns:
            Maximum retry attempts
        """
        return self.get_client_config().get('max_retries', 3)

    def get_retry_delay(self) -> int:
        """
        Get the delay between retry attempts in seconds.

        Returns:
            Retry delay in seconds
        """
        return self.get_client_config().get('retry_delay', 1)

    def use_mock_client(self) -> bool:
        """
        Get whether to use the mock client instead of real HTTP client.

        Returns:
            True if mock client should be used, False otherwise (default: False)
        """
        return self.get_client_config().get('use_mock_client', False)

    def validate_config(self) -> None:
        """
        Validate the loaded configuration.

        Raises:
            ClientConfigurationError: If configuration is invalid
        """
        for label, url in (('Admin URL', self.get_admin_url()), ('Site URL', self.get_site_url())):
            if not url or not isinstance(url, str):
                raise ClientConfigurationError(f"{label} must be a non-empty string")
            if not url.startswith(('http://', 'https://')):
                raise ClientConfigurationError(f"{label} must start with http:// or https://")

        token = self.get_access_token()
        if token is not None and (not isinstance(token, str) or not token):
            raise ClientConfigurationError("Access token must be a non-empty string when set")

        application_name = self.get_application_name()
        if not application_name or not isinstance(application_name, str):
            raise ClientConfigurationError("Application name must be a non-empty string")

        timeout = self.get_timeout()
        if isinstance(timeout, bool) or not isinstance(timeout, int) or timeout <= 0:
            raise ClientConfigurationError("Timeout must be a positive integer")

        max_retries = self.get_max_retries()
        if isinstance(max_retries, bool) or not isinstance(max_retries, int) or max_retries < 0:
            raise ClientConfigurationError("max_retries must be a non-negative integer")

        use_mock = self.use_mock_client()
        if not isinstance(use_mock, bool):
            raise ClientConfigurationError("use_mock_client must be a boolean value")

        logger.info("Client configuration validation passed")

    def __str__(self) -> str:
        """String representation of the configuration."""
        return f"ClientQueryClientConfig(path={self.config_path}, admin_url={self.get_admin_url()})"


# Global client configuration instance
_client_config_instance: Optional[ClientQueryClientConfig] = None


def get_client_config(config_path: Optional[str] = None) -> ClientQueryClientConfig:
    """
    Get the global client configuration instance.

    Args:
        config_path: Optional path to configuration file. Only used on first call.

    Returns:
        ClientQueryClientConfig instance
    """
    global _client_config_instance

    if _client_config_instance is None:
        config = ClientQueryClientConfig(config_path)
        config.validate_config()
        _client_config_instance = config

    return _client_config_instance


def reload_client_config(config_path: Optional[str] = None) -> ClientQueryClientConfig:
    """
    Reload the global client configuration instance.

    Args:
        config_path: Optional path to configuration file

    Returns:
        New ClientQueryClientConfig instance
    """
    global _client_config_instance

    config = ClientQueryClientConfig(config_path)
    config.validate_config()
    _client_config_instance = config

    return _client_config_instance
