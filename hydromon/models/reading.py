"""
Typed sensor reading; every field's default is resolved once, at construction
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Tuple

from hydromon.models.profile import ReadingProfile
from hydromon.services.firestore_decoder import UnsupportedValue, decode_value, is_wrapped

logger = logging.getLogger(__name__)

DEFAULT_TDS_TARGET = 1000.0
CREATED_AT_FORMAT = "%Y-%m-%d %H:%M:%S"

def format_created_at(timestamp: int, tz: Optional[Any] = None) -> str:
    """
    Render an epoch as `YYYY-MM-DD HH:MM:SS` (UTC unless tz is given).

    Raises ValueError for epochs outside datetime's range (e.g. milliseconds).
    """
    try:
        moment = datetime.fromtimestamp(int(timestamp), tz=timezone.utc)
    except (ValueError, OverflowError, OSError) as e:
        raise ValueError(f"Timestamp out of range: {timestamp!r}") from e
    if tz is not None:
        moment = moment.astimezone(tz)
    return moment.strftime(CREATED_AT_FORMAT)

def _unwrap(value: Any) -> Any:
    if is_wrapped(value):
        return decode_value(value)
    return value

def _as_float(data: Mapping[str, Any], key: str, default: float) -> float:
    if key not in data:
        return default
    try:
        value = _unwrap(data[key])
        if value is None:
            return default
        return float(value)
    except (TypeError, ValueError, UnsupportedValue):
        logger.warning(f"Non-numeric value for {key}: {data[key]!r}, using {default}")
        return default

def _as_int(data: Mapping[str, Any], key: str, default: int) -> int:
    if key not in data:
        return default
    try:
        value = _unwrap(data[key])
        if value is None:
            return default
        return int(float(value))
    except (TypeError, ValueError, OverflowError, UnsupportedValue):
        logger.warning(f"Non-integer value for {key}: {data[key]!r}, using {default}")
        return default

def _as_flag(data: Mapping[str, Any], key: str) -> bool:
    if key not in data:
        return False
    try:
        value = _unwrap(data[key])
    except UnsupportedValue:
        logger.warning(f"Unreadable flag {key}: {data[key]!r}, assuming off")
        return False
    if isinstance(value, str):
        try:
            return float(value) != 0
        except ValueError:
            return value.strip().lower() == "true"
    return bool(value)

@dataclass(frozen=True)
class SensorReading:
    ph: float = 0.0
    tds: float = 0.0
    temperature: Optional[float] = None
    currents: Tuple[Tuple[str, float], ...] = ()   # (wire field, amps) pairs
    tds_target: float = DEFAULT_TDS_TARGET
    pump_ph_plus: bool = False
    pump_ph_minus: bool = False
    pump_nutrisi: bool = False
    pump_24jam: bool = False
    timestamp: int = 0

    def __post_init__(self):
        if isinstance(self.currents, Mapping):
            object.__setattr__(self, "currents", tuple(self.currents.items()))
        # rejects epochs that cannot be rendered (ValueError)
        format_created_at(self.timestamp)

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, Any],
        profile: ReadingProfile,
        default_timestamp: int = 0,
    ) -> "SensorReading":
        """
        Build a reading from wire keys (plain or Firestore-wrapped values).

        Raises ValueError when the timestamp is out of range.
        """
        temperature = None
        if profile.temperature:
            temperature = _as_float(data, "Temperature", 0.0)

        return cls(
            ph=_as_float(data, "pH", 0.0),
            tds=_as_float(data, "TDS", 0.0),
            temperature=temperature,
            currents=tuple((c.field, _as_float(data, c.field, 0.0)) for c in profile.current_channels),
            tds_target=_as_float(data, "TDS_Target", DEFAULT_TDS_TARGET),
            pump_ph_plus=_as_flag(data, "Pump_PH_Plus"),
            pump_ph_minus=_as_flag(data, "Pump_PH_Minus"),
            pump_nutrisi=_as_flag(data, "Pump_Nutrisi"),
            pump_24jam=_as_flag(data, "Pump_24Jam"),
            timestamp=_as_int(data, "timestamp", default_timestamp),
        )

    @property
    def created_at(self) -> str:
        return format_created_at(self.timestamp)

    def current(self, channel: str) -> float:
        return dict(self.currents).get(channel, 0.0)

    def to_dict(self) -> Dict[str, Any]:
        """Wire-shaped mapping, as served to the dashboard"""
        out: Dict[str, Any] = {"pH": self.ph, "TDS": self.tds}
        if self.temperature is not None:
            out["Temperature"] = self.temperature
        out.update(self.currents)
        out.update({
            "TDS_Target": self.tds_target,
            "Pump_PH_Plus": int(self.pump_ph_plus),
            "Pump_PH_Minus": int(self.pump_ph_minus),
            "Pump_Nutrisi": int(self.pump_nutrisi),
            "Pump_24Jam": int(self.pump_24jam),
            "timestamp": self.timestamp,
            "created_at": self.created_at,
        })
        return out
