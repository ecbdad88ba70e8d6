# seatwatch/models/shop.py
"""
Shops table.
One row per venue, keyed by the venue API's commonCode.
Name and address are refreshed on every poll by shop_service.
"""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from seatwatch.database import Base


class Shop(Base):
    __tablename__ = "shops"

    id = Column(Integer, primary_key=True, autoincrement=True)
    common_code = Column(String(50), unique=True, nullable=False, index=True)
    name = Column(String(200))
    address = Column(String(500))

    rooms = relationship("Room", back_populates="shop")
    snapshots = relationship("Snapshot", back_populates="shop")

    def __repr__(self):
        return f"<Shop {self.common_code} name={self.name}>"
