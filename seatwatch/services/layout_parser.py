# seatwatch/services/layout_parser.py
"""
Turns the venue API layout payload into shop and room occupancy counts.

Payload shape (the "data" object of /surf-internet/shop/v3/get):
    {"areas": [{"elements": [...], "relations": [{"roomId": 10, "seatIds": [1, 2]}]}]}

Elements of interest:
    SEAT          carries clientInfo {roomCode, roomName, status}, status 1 = in use
    PRIVATE_ROOM  carries physical attributes (noSmokingFlag, width, height)

Relations are declared per area, so they are merged shop-wide before seats are
resolved to their owning PRIVATE_ROOM element. Everything else is ignored.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple
from seatwatch.services.errors import ParseError
from seatwatch.utils.logger import get_logger

logger = get_logger(__name__)

SEAT = "SEAT"
PRIVATE_ROOM = "PRIVATE_ROOM"
STATUS_IN_USE = 1


@dataclass
class PhysicalRoom:
    no_smoking: int = 0
    width: float = 0.0
    height: float = 0.0


@dataclass
class RoomAggregate:
    room_code: str
    room_name: str = ""
    total_seats: int = 0
    used_seats: int = 0
    physical_room_id: Optional[int] = None   # PRIVATE_ROOM element id, None if unresolved

    @property
    def usage_rate(self) -> Optional[float]:
        if self.total_seats == 0:
            return None
        return self.used_seats / self.total_seats * 100


@dataclass
class ShopAggregate:
    total_devices: int = 0
    used_devices: int = 0
    rooms: dict[str, RoomAggregate] = field(default_factory=dict)

    @property
    def usage_rate(self) -> Optional[float]:
        if self.total_devices == 0:
            return None
        return self.used_devices / self.total_devices * 100

    def reportable_rooms(self) -> list[RoomAggregate]:
        """Rooms with at least one seat, ordered by room code."""
        return [self.rooms[code] for code in sorted(self.rooms) if self.rooms[code].total_seats > 0]


def _as_list(value, where: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ParseError(f"{where} must be a list, got {type(value).__name__}")
    return value


def _require(record: dict, key: str, where: str):
    if not isinstance(record, dict):
        raise ParseError(f"{where} must be an object, got {type(record).__name__}")
    if record.get(key) is None:
        raise ParseError(f"{where} is missing '{key}'")
    return record[key]


def _areas(payload: dict) -> list:
    areas = _require(payload, "areas", "layout payload")
    return _as_list(areas, "areas")


def _collect_relations(areas: list) -> Tuple[dict[int, PhysicalRoom], dict[int, int]]:
    """Pass 1: physical attributes by room element id, and the seat -> room lookup."""
    physical_rooms: dict[int, PhysicalRoom] = {}
    room_to_seats: dict[int, list[int]] = {}

    for a_idx, area in enumerate(areas):
        elements = _as_list(_require(area, "elements", f"areas[{a_idx}]"), f"areas[{a_idx}].elements")
        for e_idx, element in enumerate(elements):
            where = f"areas[{a_idx}].elements[{e_idx}]"
            element_id = _require(element, "id", where)
            if _require(element, "elementCode", where) == PRIVATE_ROOM:
                physical_rooms[element_id] = PhysicalRoom(
                    no_smoking=element.get("noSmokingFlag") or 0,
                    width=element.get("width") or 0.0,
                    height=element.get("height") or 0.0,
                )

        for r_idx, relation in enumerate(_as_list(area.get("relations"), f"areas[{a_idx}].relations")):
            where = f"areas[{a_idx}].relations[{r_idx}]"
            room_id = _require(relation, "roomId", where)
            seat_ids = _as_list(_require(relation, "seatIds", where), f"{where}.seatIds")
            room_to_seats.setdefault(room_id, []).extend(seat_ids)

    seat_to_room: dict[int, int] = {}
    for room_id, seat_ids in room_to_seats.items():
        for seat_id in seat_ids:
            if seat_id in seat_to_room and seat_to_room[seat_id] != room_id:
                logger.warning(
                    f"Seat {seat_id} claimed by rooms {seat_to_room[seat_id]} and {room_id}; keeping the first"
                )
                continue
            seat_to_room[seat_id] = room_id

    return physical_rooms, seat_to_room


def _aggregate_seats(areas: list, seat_to_room: dict[int, int]) -> Tuple[ShopAggregate, dict[str, str]]:
    """Pass 2: shop-wide and per-room seat counts, in payload order."""
    shop = ShopAggregate()
    room_names: dict[str, str] = {}

    for a_idx, area in enumerate(areas):
        for e_idx, element in enumerate(area["elements"]):
            if element["elementCode"] != SEAT or element.get("clientInfo") is None:
                continue
            info = element["clientInfo"]
            room_code = _require(info, "roomCode", f"areas[{a_idx}].elements[{e_idx}].clientInfo")
            room_name = info.get("roomName")
            if room_name and room_code not in room_names:
                room_names[room_code] = room_name

            room = shop.rooms.get(room_code)
            if room is None:
                room = RoomAggregate(room_code=room_code, physical_room_id=seat_to_room.get(element["id"]))
                shop.rooms[room_code] = room

            shop.total_devices += 1
            room.total_seats += 1
            if info.get("status") == STATUS_IN_USE:
                shop.used_devices += 1
                room.used_seats += 1

    for code, room in shop.rooms.items():
        # Rooms whose seats never carried a name fall back to their code
        room_names.setdefault(code, code)
        room.room_name = room_names[code]

    return shop, room_names


def _check_totals(shop: ShopAggregate):
    room_total = sum(r.total_seats for r in shop.rooms.values())
    room_used = sum(r.used_seats for r in shop.rooms.values())
    if room_total != shop.total_devices or room_used != shop.used_devices:
        raise ParseError(
            f"Room totals {room_used}/{room_total} disagree with shop totals "
            f"{shop.used_devices}/{shop.total_devices}"
        )


def parse_shop_layout(payload: dict) -> Tuple[ShopAggregate, dict[str, str], dict[int, PhysicalRoom]]:
    """
    Parse a layout payload.
    Returns (shop aggregate, roomCode -> room name, PRIVATE_ROOM id -> physical attributes).
    Raises ParseError if mandatory structure is missing.
    """
    areas = _areas(payload)
    physical_rooms, seat_to_room = _collect_relations(areas)
    shop, room_names = _aggregate_seats(areas, seat_to_room)
    _check_totals(shop)

    resolved = {r.physical_room_id for r in shop.rooms.values()}
    orphaned = [room_id for room_id in physical_rooms if room_id not in resolved]
    if orphaned:
        logger.debug(f"PRIVATE_ROOM elements with no reporting seats: {orphaned}")

    logger.debug(
        f"Parsed layout: {len(areas)} areas, {len(shop.rooms)} rooms, "
        f"{shop.used_devices}/{shop.total_devices} devices in use"
    )
    return shop, room_names, physical_rooms
