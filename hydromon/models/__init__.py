from .profile import CurrentChannel, ReadingProfile, PROFILES, get_profile
from .reading import SensorReading
from .status import Alert, SystemStatus

__all__ = [
    "CurrentChannel",
    "ReadingProfile",
    "PROFILES",
    "get_profile",
    "SensorReading",
    "Alert",
    "SystemStatus"
]
