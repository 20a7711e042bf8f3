"""
ClientQuery Client Utilities

Shared utilities and helper functions for ClientQuery client operations.
"""

from .client_utils import (
    ClientQueryClientError, TransportError, validate_required_params, validate_guid,
    validate_exclusive_params, validate_optional_string, validate_string_dict, validate_web_url, is_valid_guid,
)

__all__ = [
    'ClientQueryClientError',
    'TransportError',
    'validate_required_params',
    'validate_guid',
    'validate_exclusive_params',
    'validate_optional_string',
    'validate_string_dict',
    'validate_web_url',
    'is_valid_guid',
]
