"""Shared fixtures: an in-memory SQLite database per test and sample layout payloads."""

import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_TO_FILE", "false")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from seatwatch.database import Base
from seatwatch.models import Shop


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def shop(db):
    record = Shop(common_code="0437", name="Test Shop", address="1 Main St")
    db.add(record)
    db.commit()
    return record


def make_layout():
    """Two areas: R1 (seats 1, 2) owned by PRIVATE_ROOM 10 in area A, R2 (seat 3) unrelated in area B."""
    return {
        "areas": [
            {
                "id": 1,
                "areaName": "A",
                "elements": [
                    {"id": 10, "elementCode": "PRIVATE_ROOM", "noSmokingFlag": 1, "width": 300.0, "height": 200.0},
                    {"id": 1, "elementCode": "SEAT",
                     "clientInfo": {"roomCode": "R1", "roomName": "Room One", "status": 1}},
                    {"id": 2, "elementCode": "SEAT",
                     "clientInfo": {"roomCode": "R1", "status": 0}},
                ],
                "relations": [{"roomId": 10, "seatIds": [1, 2]}],
            },
            {
                "id": 2,
                "areaName": "B",
                "elements": [
                    {"id": 3, "elementCode": "SEAT",
                     "clientInfo": {"roomCode": "R2", "roomName": "Room Two", "status": 1}},
                ],
                "relations": [],
            },
        ]
    }


@pytest.fixture
def layout():
    return make_layout()
