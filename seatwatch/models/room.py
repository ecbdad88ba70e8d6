# seatwatch/models/room.py
"""
Rooms table (slowly-changing dimension).
A room is a logical group of seats identified by roomCode within a shop.
Mutable fields are overwritten on every operating poll; rows are never deleted.
"""

from sqlalchemy import Column, Integer, String, Float, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from seatwatch.database import Base


class Room(Base):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, autoincrement=True)
    shop_id = Column(Integer, ForeignKey("shops.id"), nullable=False, index=True)
    code = Column(String(100), nullable=False)
    name = Column(String(200))
    total_devices = Column(Integer, default=0, nullable=False)
    # Physical attributes, only known when the seats resolve to a PRIVATE_ROOM element
    no_smoking = Column(Integer)
    width = Column(Float)
    height = Column(Float)

    shop = relationship("Shop", back_populates="rooms")

    __table_args__ = (UniqueConstraint("shop_id", "code", name="uq_rooms_shop_code"),)

    def __repr__(self):
        return f"<Room {self.code} name={self.name} devices={self.total_devices}>"
