# seatwatch/services/rollup_service.py
"""
Rollup of stored snapshots over a time window [start, end).

Overall stats come from one GROUP BY query (count/avg/max), the device total
from the latest snapshot in the window, and the hourly breakdown from a
GROUP BY on the hour of the (local) timestamp. Hours without snapshots are
simply absent from the breakdown.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple
from sqlalchemy import cast, extract, func, Integer
from sqlalchemy.orm import Session
from seatwatch.models.snapshot import Snapshot
from seatwatch.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class HourlyStat:
    hour: int                    # 0-23
    avg_usage_rate: Optional[float]
    avg_used_devices: float


@dataclass
class DailyStats:
    record_count: int = 0
    avg_usage_rate: Optional[float] = None
    max_usage_rate: Optional[float] = None
    avg_used_devices: float = 0.0
    max_used_devices: int = 0
    total_devices: int = 0
    hourly: list[HourlyStat] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.record_count == 0

    @classmethod
    def empty(cls) -> "DailyStats":
        return cls()


def day_window(day: date) -> Tuple[datetime, datetime]:
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def previous_day_window(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """[yesterday 00:00, today 00:00) in local time."""
    now = now or datetime.now()
    return day_window(now.date() - timedelta(days=1))


def _hour_of(db: Session):
    if db.get_bind().dialect.name == "sqlite":
        return cast(func.strftime("%H", Snapshot.timestamp), Integer)
    return cast(extract("hour", Snapshot.timestamp), Integer)


def _in_window(shop_id: int, start: datetime, end: datetime) -> tuple:
    return (
        Snapshot.shop_id == shop_id,
        Snapshot.timestamp >= start,
        Snapshot.timestamp < end,
    )


def rollup(db: Session, shop_id: int, window_start: datetime, window_end: datetime) -> DailyStats:
    window = _in_window(shop_id, window_start, window_end)

    row = db.query(
        func.count(Snapshot.id),
        func.avg(Snapshot.usage_rate),
        func.max(Snapshot.usage_rate),
        func.avg(Snapshot.used_devices),
        func.max(Snapshot.used_devices),
    ).filter(*window).one()

    record_count = row[0] or 0
    if record_count == 0:
        logger.info(f"[ROLLUP] shop={shop_id}: no snapshots in [{window_start}, {window_end})")
        return DailyStats.empty()

    latest = (
        db.query(Snapshot.total_devices)
        .filter(*window)
        .order_by(Snapshot.timestamp.desc(), Snapshot.id.desc())
        .first()
    )

    hour = _hour_of(db).label("hour")
    hourly_rows = (
        db.query(hour, func.avg(Snapshot.usage_rate), func.avg(Snapshot.used_devices))
        .filter(*window)
        .group_by(hour)
        .order_by(hour)
        .all()
    )

    stats = DailyStats(
        record_count=record_count,
        avg_usage_rate=float(row[1]) if row[1] is not None else None,
        max_usage_rate=float(row[2]) if row[2] is not None else None,
        avg_used_devices=float(row[3] or 0),
        max_used_devices=int(row[4] or 0),
        total_devices=latest[0] if latest else 0,
        hourly=[
            HourlyStat(
                hour=int(h),
                avg_usage_rate=float(rate) if rate is not None else None,
                avg_used_devices=float(used or 0),
            )
            for h, rate, used in hourly_rows
        ],
    )
    logger.info(
        f"[ROLLUP] shop={shop_id}: {stats.record_count} snapshots, "
        f"{len(stats.hourly)} hours with data"
    )
    return stats
