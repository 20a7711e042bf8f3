"""
ClientQuery Value Normalization

Converts the JSON encodings the ProcessQuery endpoint uses for dates and GUIDs
into plain values, and strips the protocol metadata fields from returned
objects.
"""

import re
from datetime import datetime, timezone
from typing import Any, Dict

from .correlator import OBJECT_IDENTITY_FIELD, OBJECT_TYPE_FIELD

DATE_VALUE_PATTERN = re.compile(r"^/Date\((-?\d+)\)/$")
GUID_VALUE_PATTERN = re.compile(r"^/Guid\(([0-9a-fA-F-]{36})\)/$")

METADATA_FIELDS = (OBJECT_TYPE_FIELD, OBJECT_IDENTITY_FIELD)

# Only these properties carry encoded values; user text is left as sent.
CONVERTED_FIELDS = ("CreatedDate", "LastModifiedDate", "Id")


def parse_date_value(value: str) -> str:
    """
    Convert ``/Date(ms)/`` to an ISO-8601 UTC timestamp with millisecond precision.

    Other strings are returned unchanged.
    """
    match = DATE_VALUE_PATTERN.match(value)
    if not match:
        return value
    millis = int(match.group(1))
    moment = datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
    return moment.strftime('%Y-%m-%dT%H:%M:%S.') + f"{millis % 1000:03d}Z"


def parse_guid_value(value: str) -> str:
    """Convert ``/Guid(x)/`` to the bare GUID. Other strings are returned unchanged."""
    match = GUID_VALUE_PATTERN.match(value)
    return match.group(1) if match else value


def normalize_value(value: Any) -> Any:
    if isinstance(value, str):
        return parse_guid_value(parse_date_value(value))
    if isinstance(value, list):
        return [normalize_value(v) for v in value]
    if isinstance(value, dict):
        return {k: normalize_value(v) for k, v in value.items()}
    return value


def normalize_object(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Drop ``_ObjectType_`` / ``_ObjectIdentity_`` and decode the date and id fields."""
    return {k: normalize_value(v) if k in CONVERTED_FIELDS else v
            for k, v in payload.items() if k not in METADATA_FIELDS}
