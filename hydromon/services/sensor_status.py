"""
Threshold-based status classification and alerting for sensor readings
"""
from typing import List, Optional

from hydromon.models.profile import STANDARD_PROFILE, ReadingProfile
from hydromon.models.reading import SensorReading
from hydromon.models.status import Alert, SystemStatus

CURRENT_ALERT_LIMIT = 1.5  # A

def _escalate(current: str, level: str) -> str:
    # critical is never downgraded
    if current == "critical":
        return current
    return level

def classify_status(reading: SensorReading, profile: Optional[ReadingProfile] = None) -> SystemStatus:
    """
    Overall system status from one reading.

    Bands (strict comparisons, boundary values fall in the better band):
    - pH: optimal 5.5 - 6.5, critical outside 5.0 - 8.0
    - TDS: optimal 800 - 1200 ppm, critical outside 500 - 1500 ppm
    - Temperature: optimal 18 - 24 °C, critical outside 15 - 30 °C
    """
    profile = profile or STANDARD_PROFILE
    status = "normal"
    issues: List[str] = []

    ph = reading.ph
    if ph < 5.0 or ph > 8.0:
        status = "critical"
        issues.append("pH level out of range")
    elif ph < 5.5 or ph > 6.5:
        status = _escalate(status, "warning")
        issues.append("pH level suboptimal")

    tds = reading.tds
    if tds < 500 or tds > 1500:
        status = "critical"
        issues.append("TDS level critical")
    elif tds < 800 or tds > 1200:
        status = _escalate(status, "warning")
        issues.append("TDS level suboptimal")

    if profile.temperature and reading.temperature is not None:
        temp = reading.temperature
        if temp < 15 or temp > 30:
            status = "critical"
            issues.append("Temperature critical")
        elif temp < 18 or temp > 24:
            status = _escalate(status, "warning")
            issues.append("Temperature suboptimal")

    return SystemStatus(
        status=status,
        issues=issues,
        pumps_active={
            "ph_plus": bool(reading.pump_ph_plus),
            "ph_minus": bool(reading.pump_ph_minus),
            "nutrisi": bool(reading.pump_nutrisi),
            "circulation": bool(reading.pump_24jam),
        },
    )

def generate_alerts(reading: SensorReading, profile: Optional[ReadingProfile] = None) -> List[Alert]:
    """
    Actionable alerts for one reading.

    These thresholds are tuned separately from classify_status: a TDS of 700
    is "suboptimal" for the status but raises no alert.
    """
    profile = profile or STANDARD_PROFILE
    alerts: List[Alert] = []

    ph = reading.ph
    if ph < 5.0:
        alerts.append(Alert("critical", "pH too low (< 5.0)", ph, "Add pH Plus solution"))
    elif ph > 8.0:
        alerts.append(Alert("critical", "pH too high (> 8.0)", ph, "Add pH Minus solution"))

    tds = reading.tds
    if tds < 500:
        alerts.append(Alert("warning", "TDS too low (< 500 ppm)", tds, "Add nutrient solution"))
    elif tds > 1500:
        alerts.append(Alert("critical", "TDS too high (> 1500 ppm)", tds, "Dilute with fresh water"))

    if profile.temperature and reading.temperature is not None:
        temp = reading.temperature
        if temp < 15:
            alerts.append(Alert("warning", "Temperature too low (< 15°C)", temp, "Check heating system"))
        elif temp > 30:
            alerts.append(Alert("critical", "Temperature too high (> 30°C)", temp, "Check cooling system"))

    for channel in profile.current_channels:
        amps = reading.current(channel.field)
        if amps > CURRENT_ALERT_LIMIT:
            alerts.append(Alert("warning", channel.message, amps, channel.recommended_action))

    return alerts
