from .monitoring import (
    TdsTargetUpdate,
    TdsTargetResponse,
    AlertResponse,
    PumpsActive,
    SystemStatusResponse,
    StatisticsData,
    StatisticsResponse,
)

__all__ = [
    "TdsTargetUpdate",
    "TdsTargetResponse",
    "AlertResponse",
    "PumpsActive",
    "SystemStatusResponse",
    "StatisticsData",
    "StatisticsResponse"
]
