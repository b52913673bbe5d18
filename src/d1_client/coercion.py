"""
Type Coercion

Converts text extracted from node registry XML into Python values.
Each function passes None through unchanged so absent fields stay absent.
"""

import logging
import re
from datetime import datetime
from typing import Optional

from dateutil.parser import isoparse

from d1_client.exceptions import D1CoercionError

logger = logging.getLogger("d1.coercion")

# Coordinating Nodes emit seconds as a single digit, e.g. 2012-07-01T00:00:0.000Z
_SHORT_SECONDS = re.compile(r"T(\d{2}:\d{2}):(\d\.\d{3}Z)")

# Optional minus sign and ASCII digits, nothing else
_INTEGER = re.compile(r"-?[0-9]+")


def to_bool(text: Optional[str]) -> Optional[bool]:
    """
    Convert a boolean field.

    Only the exact string "true" is True. "True", "1" and anything else
    present is False.
    """
    if text is None:
        return None
    return text == "true"


def fix_short_seconds(text: str) -> str:
    """Zero-pad a single-digit seconds field to two digits."""
    return _SHORT_SECONDS.sub(r"T\1:0\2", text)


def to_datetime(text: Optional[str], field: str = None) -> Optional[datetime]:
    """
    Convert an ISO-8601 timestamp field.

    Args:
        text: Timestamp as returned by the service
        field: Field name, used in log messages

    Returns:
        Timezone-aware datetime, or None if absent or unparseable
    """
    if not text:
        return None
    try:
        return isoparse(fix_short_seconds(text))
    except ValueError as e:
        logger.warning(f"Ignoring unparseable date {field}='{text}': {e}")
        return None


def to_int(text: Optional[str], field: str = None) -> Optional[int]:
    """
    Convert a base-10 integer field.

    Raises:
        D1CoercionError: If the value is present but not an integer
    """
    if text is None:
        return None
    if not _INTEGER.fullmatch(text):
        raise D1CoercionError(field or "value", text, "integer")
    return int(text)
