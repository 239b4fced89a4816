"""
Reading profiles: which fields a device variant reports
"""
from dataclasses import dataclass
from typing import Dict, Tuple

PUMP_FIELDS = ("Pump_PH_Plus", "Pump_PH_Minus", "Pump_Nutrisi", "Pump_24Jam")

@dataclass(frozen=True)
class CurrentChannel:
    field: str                # wire name, e.g. "Current_12V"
    message: str              # alert message when the channel draws too much
    recommended_action: str

@dataclass(frozen=True)
class ReadingProfile:
    name: str
    temperature: bool = False
    current_channels: Tuple[CurrentChannel, ...] = ()

    @property
    def required_fields(self) -> Tuple[str, ...]:
        if self.temperature:
            return ("pH", "TDS", "Temperature")
        return ("pH", "TDS")

    @property
    def optional_fields(self) -> Tuple[str, ...]:
        currents = tuple(c.field for c in self.current_channels)
        return currents + ("timestamp", "TDS_Target") + PUMP_FIELDS

STANDARD_PROFILE = ReadingProfile(
    name="standard",
    temperature=False,
    current_channels=(
        CurrentChannel("Current_12V", "High current on 12V system", "Check 12V pump conditions"),
        CurrentChannel("Current_5V", "High current on 5V system", "Check 5V circulation pump"),
    ),
)

TEMPERATURE_PROFILE = ReadingProfile(
    name="temperature",
    temperature=True,
    current_channels=(
        CurrentChannel("Current_3Pompa", "High current on 3-pump line", "Check dosing pump conditions"),
        CurrentChannel("Current_24Jam", "High current on 24-hour pump line", "Check 24-hour circulation pump"),
    ),
)

PROFILES: Dict[str, ReadingProfile] = {
    STANDARD_PROFILE.name: STANDARD_PROFILE,
    TEMPERATURE_PROFILE.name: TEMPERATURE_PROFILE,
}

def get_profile(name: str) -> ReadingProfile:
    """Look up a profile by name; unknown names are a configuration error"""
    try:
        return PROFILES[name]
    except KeyError:
        raise KeyError(f"Unknown device profile '{name}' (expected one of: {', '.join(PROFILES)})")
