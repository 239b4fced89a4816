from dataclasses import dataclass, field
from typing import Any, Dict, List

@dataclass(frozen=True)
class Alert:
    type: str                 # "warning" | "critical"
    message: str
    value: float
    recommended_action: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "message": self.message,
            "value": self.value,
            "recommended_action": self.recommended_action,
        }

@dataclass(frozen=True)
class SystemStatus:
    status: str               # "normal" | "warning" | "critical"
    issues: List[str] = field(default_factory=list)
    pumps_active: Dict[str, bool] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "issues": list(self.issues),
            "pumps_active": dict(self.pumps_active),
        }
