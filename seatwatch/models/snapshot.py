# seatwatch/models/snapshot.py
"""
Shop-level occupancy snapshots. Append-only, one row per poll cycle per shop.
Written by snapshot_service, read by rollup_service.
usage_rate is NULL when the shop reported no devices (closed or empty layout).
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from seatwatch.database import Base


class Snapshot(Base):
    __tablename__ = "snapshots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    shop_id = Column(Integer, ForeignKey("shops.id"), nullable=False, index=True)
    timestamp = Column(DateTime, nullable=False, index=True)   # local time
    shop_status = Column(String(50))
    total_devices = Column(Integer, default=0, nullable=False)
    used_devices = Column(Integer, default=0, nullable=False)
    usage_rate = Column(Float)

    shop = relationship("Shop", back_populates="snapshots")
    room_snapshots = relationship("RoomSnapshot", back_populates="snapshot")

    def __repr__(self):
        return f"<Snapshot {self.id} shop={self.shop_id} used={self.used_devices}/{self.total_devices}>"
