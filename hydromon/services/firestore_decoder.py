"""
Firestore REST document decoding (typed value wrappers <-> native values)
"""
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# Only these wrapper tags are understood; anything else (booleanValue,
# mapValue, arrayValue, timestampValue, ...) is dropped from the output.
SUPPORTED_TAGS = ("stringValue", "integerValue", "doubleValue", "nullValue")

class UnsupportedValue(Exception):
    """Raised by decode_value for a wrapper it cannot resolve"""

def is_wrapped(value: Any) -> bool:
    """True when value looks like a single-tag Firestore wrapper"""
    return isinstance(value, dict) and len(value) == 1 and next(iter(value)).endswith("Value")

def decode_value(wrapper: Dict[str, Any]) -> Any:
    """Resolve one Firestore value wrapper to a native scalar"""
    if not isinstance(wrapper, dict):
        raise UnsupportedValue(f"Not a value wrapper: {wrapper!r}")

    if "stringValue" in wrapper:
        return str(wrapper["stringValue"])
    if "integerValue" in wrapper:
        # int64 travels as a string on the wire
        try:
            return int(wrapper["integerValue"])
        except (TypeError, ValueError):
            raise UnsupportedValue(f"Bad integerValue: {wrapper['integerValue']!r}")
    if "doubleValue" in wrapper:
        try:
            return float(wrapper["doubleValue"])
        except (TypeError, ValueError):
            raise UnsupportedValue(f"Bad doubleValue: {wrapper['doubleValue']!r}")
    if "nullValue" in wrapper:
        return None

    raise UnsupportedValue(f"Unsupported value tag(s): {', '.join(wrapper) or '<none>'}")

def decode_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten a Firestore `fields` mapping, skipping unsupported wrappers"""
    result: Dict[str, Any] = {}
    for key, wrapper in fields.items():
        try:
            result[key] = decode_value(wrapper)
        except UnsupportedValue as e:
            logger.debug(f"Skipping field {key}: {e}")
    return result

def decode_document(document: Any) -> Optional[Dict[str, Any]]:
    """
    Decode a Firestore document into a flat field -> value mapping.

    Returns None when the document has no `fields` container; callers drop
    those before aggregating.
    """
    if not isinstance(document, dict):
        return None
    fields = document.get("fields")
    if not isinstance(fields, dict):
        return None
    return decode_fields(fields)

def encode_value(value: Any) -> Dict[str, Any]:
    """Wrap a native scalar the way Firestore's REST API expects"""
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        # pump flags are stored as 0/1 integers
        return {"integerValue": str(int(value))}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    return {"stringValue": str(value)}

def encode_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """Build a Firestore `fields` mapping from a flat mapping"""
    return {key: encode_value(value) for key, value in data.items()}
