# seatwatch/services/shop_service.py
"""Shop registry — find-or-create by commonCode, refreshing name/address each poll."""

from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from seatwatch.models.shop import Shop
from seatwatch.services.errors import PersistenceError
from seatwatch.services.venue_client import ShopInfo
from seatwatch.utils.logger import get_logger

logger = get_logger(__name__)


def get_shop(db: Session, common_code: str) -> Optional[Shop]:
    return db.query(Shop).filter(Shop.common_code == common_code).first()


def upsert_shop(db: Session, info: ShopInfo) -> Shop:
    try:
        shop = get_shop(db, info.common_code)
        if not shop:
            shop = Shop(common_code=info.common_code)
            db.add(shop)
            logger.info(f"[SHOP] Registered new shop {info.common_code} ({info.name})")
        shop.name = info.name
        shop.address = info.address
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError(f"Failed to save shop {info.common_code}: {e}") from e
    return shop
