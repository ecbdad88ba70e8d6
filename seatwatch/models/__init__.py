# SeatWatch — Database Models
# Import all models here for SQLAlchemy discovery

from seatwatch.models.shop import Shop                     # noqa
from seatwatch.models.room import Room                     # noqa
from seatwatch.models.snapshot import Snapshot             # noqa
from seatwatch.models.room_snapshot import RoomSnapshot    # noqa
