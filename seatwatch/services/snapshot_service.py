# seatwatch/services/snapshot_service.py
"""
Snapshot writer — persists one poll cycle.

Operating shop: one Snapshot + one RoomSnapshot per room with seats, and the
Room dimension rows refreshed, all in a single transaction.
Closed shop: one Snapshot carrying the status string and zero devices.

On any DB error the session is rolled back and PersistenceError is raised, so a
Snapshot is never visible without its RoomSnapshots.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from seatwatch.config import settings
from seatwatch.models.room import Room
from seatwatch.models.room_snapshot import RoomSnapshot
from seatwatch.models.shop import Shop
from seatwatch.models.snapshot import Snapshot
from seatwatch.services.errors import PersistenceError
from seatwatch.services.layout_parser import PhysicalRoom, RoomAggregate, ShopAggregate
from seatwatch.utils.logger import get_logger

logger = get_logger(__name__)


def _upsert_room(db: Session, shop: Shop, room: RoomAggregate, name: str,
                 physical_rooms: dict[int, PhysicalRoom]) -> Room:
    record = db.query(Room).filter(Room.shop_id == shop.id, Room.code == room.room_code).first()
    if not record:
        record = Room(shop_id=shop.id, code=room.room_code)
        db.add(record)

    record.name = name
    record.total_devices = room.total_seats
    physical = physical_rooms.get(room.physical_room_id) if room.physical_room_id is not None else None
    if physical:
        record.no_smoking = physical.no_smoking
        record.width = physical.width
        record.height = physical.height

    db.flush()   # need record.id for the RoomSnapshot
    return record


def write_snapshot(db: Session, shop: Shop, aggregate: ShopAggregate, room_names: dict[str, str],
                   physical_rooms: dict[int, PhysicalRoom], captured_at: Optional[datetime] = None) -> int:
    """Persist an operating shop's snapshot. Returns the new Snapshot id."""
    try:
        snapshot = Snapshot(
            shop_id=shop.id,
            timestamp=captured_at or datetime.now(),
            shop_status=settings.OPERATING_STATUS,
            total_devices=aggregate.total_devices,
            used_devices=aggregate.used_devices,
            usage_rate=aggregate.usage_rate,
        )
        db.add(snapshot)
        db.flush()

        for room in aggregate.reportable_rooms():
            record = _upsert_room(db, shop, room, room_names.get(room.room_code, room.room_code), physical_rooms)
            db.add(RoomSnapshot(
                snapshot_id=snapshot.id,
                room_id=record.id,
                total_devices=room.total_seats,
                used_devices=room.used_seats,
                usage_rate=room.usage_rate,
            ))

        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError(f"Failed to save snapshot for {shop.common_code}: {e}") from e

    logger.info(
        f"[SNAPSHOT] {shop.common_code}: {aggregate.used_devices}/{aggregate.total_devices} devices, "
        f"{len(aggregate.reportable_rooms())} rooms (snapshot {snapshot.id})"
    )
    return snapshot.id


def write_closed_snapshot(db: Session, shop: Shop, status: str, captured_at: Optional[datetime] = None) -> int:
    """Persist a non-operating shop: status only, zero devices, no room rows."""
    try:
        snapshot = Snapshot(
            shop_id=shop.id,
            timestamp=captured_at or datetime.now(),
            shop_status=status,
            total_devices=0,
            used_devices=0,
            usage_rate=None,
        )
        db.add(snapshot)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError(f"Failed to save closed snapshot for {shop.common_code}: {e}") from e

    logger.info(f"[SNAPSHOT] {shop.common_code} not operating ({status!r}), snapshot {snapshot.id}")
    return snapshot.id
