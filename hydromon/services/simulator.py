"""
Synthetic sensor data for demos, mock mode and the test-data preview
"""
import random
import time as _time
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

from hydromon.models.profile import ReadingProfile

TEST_DAY_STEP = timedelta(minutes=30)

def generate_random_reading(
    profile: ReadingProfile,
    now: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> Dict[str, Any]:
    """One noisy reading, like the field device pushes every second"""
    rng = rng or random.Random()
    data: Dict[str, Any] = {
        "pH": rng.randint(50, 80) / 10,
        "TDS": rng.randint(500, 1300),
    }
    if profile.temperature:
        data["Temperature"] = rng.randint(240, 300) / 10
    for channel in profile.current_channels:
        data[channel.field] = rng.randint(0, 200) / 100
    data.update({
        "timestamp": int(now if now is not None else _time.time()),
        "Pump_PH_Plus": rng.randint(0, 1),
        "Pump_PH_Minus": rng.randint(0, 1),
        "Pump_Nutrisi": rng.randint(0, 1),
        "Pump_24Jam": rng.randint(0, 1),
    })
    return data

def generate_test_day(
    day: date,
    timezone_name: str,
    profile: ReadingProfile,
    rng: Optional[random.Random] = None,
) -> List[Dict[str, Any]]:
    """A full local day of healthy readings at 30-minute intervals"""
    rng = rng or random.Random()
    tz = ZoneInfo(timezone_name)
    current = datetime.combine(day, time(0, 0, 0), tzinfo=tz)
    end = datetime.combine(day, time(23, 59, 59), tzinfo=tz)

    rows: List[Dict[str, Any]] = []
    while current <= end:
        row: Dict[str, Any] = {
            "timestamp": int(current.timestamp()),
            "pH": round(6.0 + rng.randint(-50, 50) / 100, 2),
            "TDS": rng.randint(800, 1200),
        }
        if profile.temperature:
            row["Temperature"] = round(21.0 + rng.randint(-30, 30) / 10, 1)
        for idx, channel in enumerate(profile.current_channels):
            # first line 1.0-1.5 A, second 1.2-1.5 A
            if idx == 0:
                row[channel.field] = round(1.0 + rng.randint(0, 50) / 100, 2)
            else:
                row[channel.field] = round(1.2 + rng.randint(0, 30) / 100, 2)
        row.update({
            "Pump_PH_Plus": rng.randint(0, 1),
            "Pump_PH_Minus": rng.randint(0, 1),
            "Pump_Nutrisi": rng.randint(0, 1),
            "Pump_24Jam": 1,  # circulation always on
        })
        rows.append(row)
        current += TEST_DAY_STEP

    return rows
