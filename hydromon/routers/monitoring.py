# hydromon/routers/monitoring.py
import logging
import time
from datetime import date, datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from hydromon.config import Settings, get_settings
from hydromon.errors import FirebaseError, MalformedBatchError
from hydromon.models.profile import ReadingProfile, get_profile
from hydromon.models.reading import SensorReading, format_created_at
from hydromon.providers.firebase_provider import FirebaseProvider, provider_from_settings
from hydromon.schemas.monitoring import StatisticsResponse, TdsTargetResponse, TdsTargetUpdate
from hydromon.services.history import (
    date_range_to_epoch_bounds,
    format_historical_batch,
    resolve_timezone,
    timestamp_span,
)
from hydromon.services.sensor_status import classify_status, generate_alerts
from hydromon.services.simulator import generate_test_day
from hydromon.services.validation import is_valid_reading

logger = logging.getLogger(__name__)
# mounted under /api/v1 and, for the existing dashboard, /api (see main.py)
router = APIRouter(tags=["monitoring"])

def get_reading_profile(settings: Settings = Depends(get_settings)) -> ReadingProfile:
    """Profile of the configured device"""
    try:
        return get_profile(settings.device_profile)
    except KeyError as e:
        raise HTTPException(status_code=500, detail=str(e))

def get_firebase_provider(settings: Settings = Depends(get_settings)) -> FirebaseProvider:
    """Get configured Firebase provider instance"""
    try:
        return provider_from_settings(settings)
    except KeyError as e:
        raise HTTPException(status_code=500, detail=str(e))

def _firebase_http_error(e: FirebaseError, what: str) -> HTTPException:
    if isinstance(e, MalformedBatchError):
        return HTTPException(status_code=502, detail=f"Malformed response from Firebase while fetching {what}")
    status = e.status_code if e.status_code and e.status_code >= 400 else 502
    return HTTPException(status_code=status, detail=f"Failed to fetch {what} from Firebase: {e.message}")

async def _load_realtime(provider: FirebaseProvider) -> SensorReading:
    """Fetch, validate and default the live snapshot"""
    data = await provider.get_realtime_snapshot()

    if not data:
        logger.warning("No data found in Firebase")
        raise HTTPException(status_code=404, detail="No sensor data found in Firebase")

    if not is_valid_reading(data, provider.profile):
        logger.warning("Data validation failed")
        raise HTTPException(
            status_code=422,
            detail={
                "message": "Invalid data structure received from Firebase",
                "data": data,
                "debug": f"Core fields ({', '.join(provider.profile.required_fields)}) missing",
            },
        )

    try:
        return SensorReading.from_mapping(data, provider.profile, default_timestamp=int(time.time()))
    except ValueError as e:
        logger.warning(f"Unusable realtime snapshot: {str(e)}")
        raise HTTPException(
            status_code=422,
            detail={
                "message": "Invalid data structure received from Firebase",
                "data": data,
                "debug": str(e),
            },
        )

# ---------- Realtime ----------
@router.get("/realtime-data")
async def get_realtime_data(provider: FirebaseProvider = Depends(get_firebase_provider)):
    """Current sensor values, with defaults for missing optional fields"""
    try:
        reading = await _load_realtime(provider)
    except FirebaseError as e:
        raise _firebase_http_error(e, "realtime data")

    return {
        "success": True,
        "data": reading.to_dict(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

@router.post("/update-tds-target", response_model=TdsTargetResponse)
async def update_tds_target(
    payload: TdsTargetUpdate,
    provider: FirebaseProvider = Depends(get_firebase_provider),
):
    """Set the TDS setpoint (100 - 3000 ppm)"""
    try:
        await provider.set_tds_target(payload.tds_target)
    except FirebaseError as e:
        logger.error(f"Failed to update TDS Target: {e.message}")
        status = e.status_code if e.status_code and e.status_code >= 400 else 502
        raise HTTPException(status_code=status, detail="Failed to update TDS Target in Firebase")

    return TdsTargetResponse(
        success=True,
        message="TDS Target updated successfully",
        new_value=payload.tds_target,
    )

# ---------- History ----------
@router.get("/historical-data")
async def get_historical_data(
    limit: int = Query(100, ge=1),
    order_by: str = Query("timestamp", alias="orderBy"),
    order_direction: str = Query("DESCENDING", alias="orderDirection", pattern="^(ASCENDING|DESCENDING)$"),
    page_token: Optional[str] = Query(None, alias="pageToken"),
    provider: FirebaseProvider = Depends(get_firebase_provider),
):
    """One page of history, in the order Firestore returns it"""
    try:
        documents, next_token = await provider.list_history(limit, order_by, order_direction, page_token)
        data = format_historical_batch(documents, provider.profile)
    except FirebaseError as e:
        logger.error(f"Firestore fetch error: {e.message}")
        raise _firebase_http_error(e, "historical data")

    return {
        "success": True,
        "data": data,
        "nextPageToken": next_token,
        "total": len(data),
        "skipped": len(documents) - len(data),
    }

@router.get("/historical-data/date-range")
async def get_historical_data_by_date_range(
    start_date: date = Query(...),
    end_date: date = Query(...),
    limit: int = Query(500, ge=1, le=1000),
    settings: Settings = Depends(get_settings),
    provider: FirebaseProvider = Depends(get_firebase_provider),
):
    """History between two local calendar dates (inclusive)"""
    try:
        start_ts, end_ts = date_range_to_epoch_bounds(start_date, end_date, settings.display_timezone)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    logger.info(
        f"Date range query {start_date}..{end_date} ({settings.display_timezone}) -> "
        f"{start_ts}..{end_ts} UTC epoch"
    )

    try:
        results = await provider.query_history_range(start_ts, end_ts, limit)
        data = format_historical_batch(results, provider.profile)
    except FirebaseError as e:
        logger.error(f"Firestore date range query error: {e.message}")
        raise _firebase_http_error(e, "historical data")

    first_ts, last_ts = timestamp_span(data)
    logger.info(f"Historical data retrieved: {len(data)} records")

    return {
        "success": True,
        "data": data,
        "total": len(data),
        "skipped": len(results) - len(data),
        "date_range": {
            "start": start_date.isoformat(),
            "end": end_date.isoformat(),
            "start_timestamp": start_ts,
            "end_timestamp": end_ts,
            "first_data_time": format_created_at(first_ts) if first_ts else None,
            "last_data_time": format_created_at(last_ts) if last_ts else None,
        },
    }

# ---------- Statistics ----------
@router.get("/statistics", response_model=StatisticsResponse)
async def get_statistics(
    settings: Settings = Depends(get_settings),
    provider: FirebaseProvider = Depends(get_firebase_provider),
):
    """Current values with status, alerts and today's record count"""
    try:
        reading = await _load_realtime(provider)
    except HTTPException as e:
        raise HTTPException(status_code=e.status_code, detail="Failed to get realtime data for statistics")
    except FirebaseError as e:
        raise _firebase_http_error(e, "realtime data for statistics")

    today = datetime.now(resolve_timezone(settings.display_timezone)).date()
    start_ts, end_ts = date_range_to_epoch_bounds(today, today, settings.display_timezone)
    try:
        results = await provider.query_history_range(start_ts, end_ts, 1000)
        today_records = len(format_historical_batch(results, provider.profile))
    except FirebaseError as e:
        logger.warning(f"Could not count today's records: {e.message}")
        today_records = 0

    return {
        "success": True,
        "data": {
            "current_values": reading.to_dict(),
            "system_status": classify_status(reading, provider.profile).to_dict(),
            "today_records": today_records,
            "last_update": reading.timestamp,
            "alerts": [a.to_dict() for a in generate_alerts(reading, provider.profile)],
        },
    }

# ---------- Test data ----------
@router.get("/generate-test-data")
async def generate_test_data(
    day: Optional[date] = Query(None, alias="date"),
    settings: Settings = Depends(get_settings),
    profile: ReadingProfile = Depends(get_reading_profile),
):
    """Preview a simulated day of readings at 30-minute intervals"""
    day = day or datetime.now(resolve_timezone(settings.display_timezone)).date()
    rows = generate_test_day(day, settings.display_timezone, profile)

    return {
        "success": True,
        "message": "Test data generated successfully",
        "date": day.isoformat(),
        "total_records": len(rows),
        "sample_data": rows[:5],
        "first_timestamp": format_created_at(rows[0]["timestamp"]),
        "last_timestamp": format_created_at(rows[-1]["timestamp"]),
    }
