"""
ClientQuery Client Utilities

Shared utilities and helper functions for ClientQuery client endpoints.
"""

import re
from typing import Any, Optional

GUID_REGEX = re.compile(r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$")


class ClientQueryClientError(Exception):
    """Base exception for ClientQuery client errors."""
    pass


class TransportError(ClientQueryClientError):
    """The HTTP round trip failed (network failure, non-2xx status, auth failure)."""

    def __init__(self, message: str, status_code: Optional[int] = None, response_text: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_text = response_text


def validate_required_params(**params):
    """
    Validate that required parameters are provided.

    Args:
        **params: Parameter name-value pairs to validate

    Raises:
        ClientQueryClientError: If any required parameter is missing or None
    """
    for param_name, param_value in params.items():
        if param_value is None or param_value == "":
            raise ClientQueryClientError(f"Required parameter '{param_name}' is missing or empty")


def is_valid_guid(value: Any) -> bool:
    return isinstance(value, str) and GUID_REGEX.fullmatch(value) is not None


def validate_guid(param_name: str, value: Any) -> None:
    """
    Validate that a parameter holds a GUID in ``xxxxxxxx-xxxx-xxxx-xxxx-xxxxxxxxxxxx`` form.

    Raises:
        ClientQueryClientError: If the value is not a valid GUID
    """
    if not is_valid_guid(value):
        raise ClientQueryClientError(f"{value} in parameter {param_name} is not a valid GUID")


def validate_optional_string(param_name: str, value: Any) -> None:
    """
    Validate that an optional parameter is either None or a string.

    Raises:
        ClientQueryClientError: If the value is set but is not a string
    """
    if value is not None and not isinstance(value, str):
        raise ClientQueryClientError(f"Parameter {param_name} must be a string, got {type(value).__name__}")


def validate_string_dict(param_name: str, value: Any) -> None:
    """
    Validate that an optional parameter is a dictionary of non-empty string keys to string values.

    Raises:
        ClientQueryClientError: If the value is not such a dictionary
    """
    if value is None:
        return
    if not isinstance(value, dict):
        raise ClientQueryClientError(f"Parameter {param_name} must be a dictionary of strings")
    for key, item in value.items():
        if not isinstance(key, str) or not key:
            raise ClientQueryClientError(f"Parameter {param_name} has an invalid key: {key!r}")
        if not isinstance(item, str):
            raise ClientQueryClientError(
                f"Value of {param_name}[{key!r}] must be a string, got {type(item).__name__}")


def validate_exclusive_params(**params) -> str:
    """
    Validate that exactly one of the given parameters is set.

    Returns:
        The name of the parameter that is set

    Raises:
        ClientQueryClientError: If none or more than one is set
    """
    provided = [name for name, value in params.items() if value is not None]
    names = ', '.join(params)
    if not provided:
        raise ClientQueryClientError(f"Specify one of: {names}")
    if len(provided) > 1:
        raise ClientQueryClientError(f"Specify only one of: {names}")
    return provided[0]


def validate_web_url(value: str) -> None:
    if not isinstance(value, str) or not value.startswith(('http://', 'https://')):
        raise ClientQueryClientError(f"'{value}' is not a valid SharePoint URL")
