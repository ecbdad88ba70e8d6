from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class SnapshotOut(BaseModel):
    id: int
    shop_id: int
    timestamp: datetime
    shop_status: Optional[str]
    total_devices: int
    used_devices: int
    usage_rate: Optional[float]

    class Config:
        from_attributes = True


class PollOut(BaseModel):
    common_code: str
    snapshot_id: int
    operating: bool
    report: str
