"""Shops, rooms and raw snapshots — read endpoints plus a manual poll trigger."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from seatwatch.database import get_db
from seatwatch.models.room import Room
from seatwatch.models.shop import Shop
from seatwatch.models.snapshot import Snapshot
from seatwatch.schemas.shop import ShopOut, RoomOut
from seatwatch.schemas.snapshot import SnapshotOut, PollOut
from seatwatch.services.errors import FetchError, ParseError, PersistenceError
from seatwatch.services.shop_poller import poll_shop
from seatwatch.services.shop_service import get_shop

router = APIRouter()


def _shop_or_404(db: Session, common_code: str) -> Shop:
    shop = get_shop(db, common_code)
    if not shop:
        raise HTTPException(status_code=404, detail=f"Shop '{common_code}' not found")
    return shop


@router.get("/shops", response_model=list[ShopOut])
def list_shops(db: Session = Depends(get_db)):
    """All shops seen by the poller."""
    return db.query(Shop).order_by(Shop.common_code).all()


@router.get("/shops/{common_code}/rooms", response_model=list[RoomOut])
def list_rooms(common_code: str, db: Session = Depends(get_db)):
    """Latest known configuration of every room in a shop."""
    shop = _shop_or_404(db, common_code)
    return db.query(Room).filter(Room.shop_id == shop.id).order_by(Room.code).all()


@router.get("/shops/{common_code}/snapshots", response_model=list[SnapshotOut])
def list_snapshots(common_code: str, limit: int = 48, db: Session = Depends(get_db)):
    """Most recent snapshots first."""
    shop = _shop_or_404(db, common_code)
    return (
        db.query(Snapshot)
        .filter(Snapshot.shop_id == shop.id)
        .order_by(Snapshot.timestamp.desc())
        .limit(limit)
        .all()
    )


@router.post("/shops/{common_code}/poll", response_model=PollOut, summary="Poll one shop now")
async def poll_now(common_code: str, db: Session = Depends(get_db)):
    """Runs one poll cycle for a single shop and returns the rendered report. No push is sent."""
    try:
        result = await poll_shop(common_code, db)
    except (FetchError, ParseError) as e:
        raise HTTPException(status_code=502, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return PollOut(
        common_code=common_code,
        snapshot_id=result.snapshot_id,
        operating=result.operating,
        report=result.report,
    )
