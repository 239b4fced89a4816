from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Optional

class TdsTargetUpdate(BaseModel):
    tds_target: float = Field(..., ge=100, le=3000)

class TdsTargetResponse(BaseModel):
    success: bool
    message: str
    new_value: float

class AlertResponse(BaseModel):
    type: Literal["warning", "critical"]
    message: str
    value: float
    recommended_action: str

    class Config:
        from_attributes = True

class PumpsActive(BaseModel):
    ph_plus: bool = False
    ph_minus: bool = False
    nutrisi: bool = False
    circulation: bool = False

class SystemStatusResponse(BaseModel):
    status: Literal["normal", "warning", "critical"]
    issues: List[str] = []
    pumps_active: PumpsActive

    class Config:
        from_attributes = True

class StatisticsData(BaseModel):
    current_values: Dict[str, Any]
    system_status: SystemStatusResponse
    today_records: int
    last_update: Optional[int] = None
    alerts: List[AlertResponse] = []

class StatisticsResponse(BaseModel):
    success: bool
    data: StatisticsData
