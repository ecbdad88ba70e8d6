from pydantic import BaseModel
from datetime import date
from typing import Optional


class HourlyStatOut(BaseModel):
    hour: int
    avg_usage_rate: Optional[float]
    avg_used_devices: float

    class Config:
        from_attributes = True


class DailyStatsOut(BaseModel):
    common_code: str
    day: date
    record_count: int
    avg_usage_rate: Optional[float] = None
    max_usage_rate: Optional[float] = None
    avg_used_devices: float = 0.0
    max_used_devices: int = 0
    total_devices: int = 0
    hourly: list[HourlyStatOut] = []
    report: Optional[str] = None
