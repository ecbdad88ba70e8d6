from pydantic import BaseModel
from typing import Optional


class ShopOut(BaseModel):
    id: int
    common_code: str
    name: Optional[str]
    address: Optional[str]

    class Config:
        from_attributes = True


class RoomOut(BaseModel):
    id: int
    code: str
    name: Optional[str]
    total_devices: int
    no_smoking: Optional[int] = None
    width: Optional[float] = None
    height: Optional[float] = None

    class Config:
        from_attributes = True
