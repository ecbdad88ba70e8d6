"""Unit tests for the snapshot writer."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import datetime
from unittest.mock import MagicMock
from sqlalchemy.exc import SQLAlchemyError
from seatwatch.models import Room, RoomSnapshot, Snapshot
from seatwatch.services.errors import PersistenceError
from seatwatch.services.layout_parser import parse_shop_layout, RoomAggregate, ShopAggregate
from seatwatch.services.snapshot_service import write_snapshot, write_closed_snapshot

CAPTURED = datetime(2026, 10, 18, 9, 30)


class TestWriteSnapshot:
    def test_writes_shop_and_room_rows(self, db, shop, layout):
        aggregate, names, physical = parse_shop_layout(layout)
        snapshot_id = write_snapshot(db, shop, aggregate, names, physical, captured_at=CAPTURED)

        snap = db.get(Snapshot, snapshot_id)
        assert snap.timestamp == CAPTURED
        assert snap.total_devices == 3
        assert snap.used_devices == 2
        assert snap.usage_rate == pytest.approx(200 / 3)

        rows = db.query(RoomSnapshot).filter(RoomSnapshot.snapshot_id == snapshot_id).all()
        assert len(rows) == 2
        by_code = {db.get(Room, r.room_id).code: r for r in rows}
        assert by_code["R1"].used_devices == 1 and by_code["R1"].total_devices == 2
        assert by_code["R1"].usage_rate == pytest.approx(50.0)
        assert by_code["R2"].usage_rate == pytest.approx(100.0)

    def test_physical_attributes_only_when_resolved(self, db, shop, layout):
        aggregate, names, physical = parse_shop_layout(layout)
        write_snapshot(db, shop, aggregate, names, physical, captured_at=CAPTURED)

        r1 = db.query(Room).filter(Room.code == "R1").one()
        r2 = db.query(Room).filter(Room.code == "R2").one()
        assert (r1.no_smoking, r1.width, r1.height) == (1, 300.0, 200.0)
        assert r1.name == "Room One"
        assert r2.width is None and r2.no_smoking is None

    def test_rooms_are_updated_in_place(self, db, shop, layout):
        aggregate, names, physical = parse_shop_layout(layout)
        write_snapshot(db, shop, aggregate, names, physical, captured_at=CAPTURED)

        layout["areas"][1]["elements"].append(
            {"id": 4, "elementCode": "SEAT", "clientInfo": {"roomCode": "R2", "roomName": "Renamed", "status": 0}}
        )
        layout["areas"][1]["elements"][0]["clientInfo"]["roomName"] = "Room Two v2"
        aggregate, names, physical = parse_shop_layout(layout)
        write_snapshot(db, shop, aggregate, names, physical, captured_at=CAPTURED)

        rooms = db.query(Room).filter(Room.code == "R2").all()
        assert len(rooms) == 1
        assert rooms[0].total_devices == 2
        assert rooms[0].name == "Room Two v2"
        assert db.query(Snapshot).count() == 2

    def test_rooms_without_seats_are_skipped(self, db, shop):
        aggregate = ShopAggregate(total_devices=1, used_devices=0, rooms={
            "R1": RoomAggregate(room_code="R1", room_name="One", total_seats=1),
            "EMPTY": RoomAggregate(room_code="EMPTY", room_name="Empty"),
        })
        snapshot_id = write_snapshot(db, shop, aggregate, {"R1": "One", "EMPTY": "Empty"}, {})

        assert db.query(RoomSnapshot).filter(RoomSnapshot.snapshot_id == snapshot_id).count() == 1
        assert db.query(Room).filter(Room.code == "EMPTY").first() is None

    def test_zero_devices_leaves_rate_undefined(self, db, shop):
        snapshot_id = write_snapshot(db, shop, ShopAggregate(), {}, {})
        assert db.get(Snapshot, snapshot_id).usage_rate is None

    def test_failure_rolls_back_everything(self, db, shop):
        # room_code None violates rooms.code NOT NULL after the Snapshot was flushed
        aggregate = ShopAggregate(total_devices=1, used_devices=1, rooms={
            "R1": RoomAggregate(room_code=None, total_seats=1, used_seats=1),
        })
        with pytest.raises(PersistenceError):
            write_snapshot(db, shop, aggregate, {}, {})

        assert db.query(Snapshot).count() == 0
        assert db.query(RoomSnapshot).count() == 0
        assert db.query(Room).count() == 0

    def test_commit_error_triggers_rollback(self):
        db = MagicMock()
        db.commit.side_effect = SQLAlchemyError("disk full")
        shop = MagicMock(id=1, common_code="0437")

        with pytest.raises(PersistenceError):
            write_snapshot(db, shop, ShopAggregate(), {}, {})
        db.rollback.assert_called_once()


class TestWriteClosedSnapshot:
    def test_closed_shop_writes_status_only(self, db, shop):
        snapshot_id = write_closed_snapshot(db, shop, "休息中", captured_at=CAPTURED)

        snap = db.get(Snapshot, snapshot_id)
        assert snap.shop_status == "休息中"
        assert (snap.total_devices, snap.used_devices, snap.usage_rate) == (0, 0, None)
        assert db.query(RoomSnapshot).count() == 0

    def test_commit_error_raises_persistence_error(self):
        db = MagicMock()
        db.commit.side_effect = SQLAlchemyError("locked")

        with pytest.raises(PersistenceError):
            write_closed_snapshot(db, MagicMock(id=1, common_code="0437"), "closed")
        db.rollback.assert_called_once()
