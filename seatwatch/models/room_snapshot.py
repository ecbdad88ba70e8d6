# seatwatch/models/room_snapshot.py
"""Per-room occupancy rows attached to a Snapshot. Only written while the shop is operating."""

from sqlalchemy import Column, Integer, Float, ForeignKey
from sqlalchemy.orm import relationship
from seatwatch.database import Base


class RoomSnapshot(Base):
    __tablename__ = "room_snapshots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    snapshot_id = Column(Integer, ForeignKey("snapshots.id"), nullable=False, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False, index=True)
    total_devices = Column(Integer, nullable=False)
    used_devices = Column(Integer, nullable=False)
    usage_rate = Column(Float)

    snapshot = relationship("Snapshot", back_populates="room_snapshots")
    room = relationship("Room")

    def __repr__(self):
        return f"<RoomSnapshot snap={self.snapshot_id} room={self.room_id} used={self.used_devices}/{self.total_devices}>"
