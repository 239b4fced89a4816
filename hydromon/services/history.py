"""
Historical data: Firestore query construction and chart-ready formatting
"""
import logging
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional, Tuple, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from hydromon.errors import MalformedBatchError
from hydromon.models.profile import STANDARD_PROFILE, ReadingProfile
from hydromon.models.reading import SensorReading
from hydromon.services.firestore_decoder import decode_document

logger = logging.getLogger(__name__)

DateLike = Union[date, str]

def _extract_document(item: Any) -> Any:
    # runQuery results wrap each hit as {"document": {...}}; listings don't
    if isinstance(item, dict) and "document" in item:
        return item["document"]
    return item

def format_historical_batch(raw_docs: Any, profile: Optional[ReadingProfile] = None) -> List[Dict[str, Any]]:
    """
    Map raw Firestore results 1:1 onto reading dicts, in the order given.

    Entries without a `fields` container are dropped; a payload that is not a
    list at all raises MalformedBatchError.
    """
    if not isinstance(raw_docs, list):
        raise MalformedBatchError(f"Expected a list of documents, got {type(raw_docs).__name__}")

    profile = profile or STANDARD_PROFILE
    formatted: List[Dict[str, Any]] = []
    dropped = 0

    for item in raw_docs:
        decoded = decode_document(_extract_document(item))
        if decoded is None:
            dropped += 1
            continue
        try:
            reading = SensorReading.from_mapping(decoded, profile)
        except ValueError as e:
            logger.warning(f"Skipping history record: {e}")
            dropped += 1
            continue
        formatted.append(reading.to_dict())

    if dropped:
        logger.warning(f"Dropped {dropped} malformed history record(s) out of {len(raw_docs)}")

    return formatted

def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])

def resolve_timezone(timezone_name: str) -> ZoneInfo:
    """ZoneInfo for an IANA name; unknown names raise ValueError"""
    try:
        return ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown timezone: {timezone_name}")

def date_range_to_epoch_bounds(start_date: DateLike, end_date: DateLike, timezone_name: str) -> Tuple[int, int]:
    """
    Local calendar dates -> inclusive UTC epoch bounds.

    The range covers start_date 00:00:00 through end_date 23:59:59 in the
    named timezone.
    """
    tz = resolve_timezone(timezone_name)

    start = _as_date(start_date)
    end = _as_date(end_date)
    if start > end:
        raise ValueError(f"start_date {start} is after end_date {end}")

    start_local = datetime.combine(start, time(0, 0, 0), tzinfo=tz)
    end_local = datetime.combine(end, time(23, 59, 59), tzinfo=tz)
    return int(start_local.timestamp()), int(end_local.timestamp())

def build_range_query(start_ts: int, end_ts: int, limit: int, collection: str = "history") -> Dict[str, Any]:
    """Firestore structuredQuery for timestamp in [start_ts, end_ts], newest first"""
    return {
        "structuredQuery": {
            "from": [{"collectionId": collection}],
            "where": {
                "compositeFilter": {
                    "op": "AND",
                    "filters": [
                        {
                            "fieldFilter": {
                                "field": {"fieldPath": "timestamp"},
                                "op": "GREATER_THAN_OR_EQUAL",
                                "value": {"integerValue": str(start_ts)},
                            }
                        },
                        {
                            "fieldFilter": {
                                "field": {"fieldPath": "timestamp"},
                                "op": "LESS_THAN_OR_EQUAL",
                                "value": {"integerValue": str(end_ts)},
                            }
                        },
                    ],
                }
            },
            "orderBy": [
                {"field": {"fieldPath": "timestamp"}, "direction": "DESCENDING"}
            ],
            "limit": limit,
        }
    }

def timestamp_span(readings: List[Dict[str, Any]]) -> Tuple[Optional[int], Optional[int]]:
    """Earliest and latest non-zero timestamps in a formatted batch"""
    stamps = [r["timestamp"] for r in readings if r.get("timestamp")]
    if not stamps:
        return None, None
    return min(stamps), max(stamps)
