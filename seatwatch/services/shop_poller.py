# seatwatch/services/shop_poller.py
"""
Shop polling and daily reporting cycles.

Poll cycle (every POLL_INTERVAL_MINUTES), per shop, strictly one after another:
    shop info -> upsert Shop -> closed?  -> closed snapshot + status report
                                 open?   -> layout -> parse -> snapshot -> live report
Daily cycle (cron): roll up yesterday's snapshots per shop and push the summary.

A failure in one shop is logged and reported by push notification; the loop
carries on with the next shop. Each shop gets its own DB session.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple
from sqlalchemy.orm import Session
from seatwatch.config import settings
from seatwatch.database import SessionLocal
from seatwatch.models.shop import Shop
from seatwatch.services import report_service
from seatwatch.services.errors import SeatWatchError
from seatwatch.services.layout_parser import parse_shop_layout
from seatwatch.services.notification_service import send_notifications
from seatwatch.services.rollup_service import DailyStats, previous_day_window, rollup
from seatwatch.services.shop_service import get_shop, upsert_shop
from seatwatch.services.snapshot_service import write_closed_snapshot, write_snapshot
from seatwatch.services.venue_client import fetch_shop_info, fetch_shop_layout
from seatwatch.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class PollResult:
    shop: Shop
    snapshot_id: int
    operating: bool
    report: str


async def poll_shop(common_code: str, db: Session) -> PollResult:
    """One poll of one shop. Raises SeatWatchError subclasses on expected failures."""
    info = await fetch_shop_info(common_code)
    shop = upsert_shop(db, info)

    if not info.is_operating:
        snapshot_id = write_closed_snapshot(db, shop, info.status)
        return PollResult(shop, snapshot_id, False, report_service.format_closed_report(shop, info.status))

    payload = await fetch_shop_layout(common_code)
    aggregate, room_names, physical_rooms = parse_shop_layout(payload)
    snapshot_id = write_snapshot(db, shop, aggregate, room_names, physical_rooms)
    return PollResult(shop, snapshot_id, True, report_service.format_live_report(shop, aggregate, room_names))


async def _notify_failure(common_code: str, error: Exception):
    await send_notifications(settings.BARK_TOKENS, report_service.format_error_report(common_code, error), common_code)


async def run_poll_cycle(shop_codes: Optional[list[str]] = None) -> dict[str, bool]:
    """Poll every configured shop. Returns {commonCode: succeeded}."""
    codes = settings.SHOP_CODES if shop_codes is None else shop_codes
    if not codes:
        logger.warning("No shops configured — poll cycle skipped.")
        return {}

    logger.info(f"🔄 Poll cycle started for {len(codes)} shops")
    outcome: dict[str, bool] = {}
    for code in codes:
        db = SessionLocal()
        try:
            result = await poll_shop(code, db)
            outcome[code] = True
            if settings.NOTIFY_LIVE_REPORTS:
                await send_notifications(settings.BARK_TOKENS, result.report, result.shop.name or code)
        except SeatWatchError as e:
            outcome[code] = False
            logger.warning(f"❌ {code} — {type(e).__name__}: {e}")
            await _notify_failure(code, e)
        except Exception as e:
            outcome[code] = False
            logger.error(f"❌ {code} — unexpected error: {e}", exc_info=True)
            await _notify_failure(code, e)
        finally:
            db.close()

    ok = sum(outcome.values())
    logger.info(f"✅ Poll cycle finished: {ok}/{len(codes)} shops ok")
    return outcome


def build_daily_report(db: Session, common_code: str,
                       window: Tuple[datetime, datetime]) -> Tuple[Optional[Shop], DailyStats, Optional[str]]:
    """Roll up one shop over window. The report is None when the shop is unknown or had no snapshots."""
    shop = get_shop(db, common_code)
    if not shop:
        logger.warning(f"[DAILY] Unknown shop {common_code} — no report")
        return None, DailyStats.empty(), None

    stats = rollup(db, shop.id, *window)
    if stats.is_empty:
        logger.info(f"[DAILY] No snapshots for {shop.name or common_code} in {window[0].date()} — report suppressed")
        return shop, stats, None

    return shop, stats, report_service.format_daily_report(shop.name or common_code, stats, window[0].date())


async def run_daily_report_cycle(shop_codes: Optional[list[str]] = None,
                                 now: Optional[datetime] = None) -> dict[str, bool]:
    """Send yesterday's report for every configured shop. Returns {commonCode: report sent}."""
    codes = settings.SHOP_CODES if shop_codes is None else shop_codes
    window = previous_day_window(now)
    logger.info(f"📊 Daily report cycle for {window[0].date()} ({len(codes)} shops)")

    outcome: dict[str, bool] = {}
    for code in codes:
        db = SessionLocal()
        try:
            shop, _, report = build_daily_report(db, code, window)
            outcome[code] = report is not None
            if report is not None:
                await send_notifications(settings.BARK_TOKENS, report, shop.name or code)
        except Exception as e:
            outcome[code] = False
            logger.error(f"[DAILY] {code} — report failed: {e}", exc_info=True)
        finally:
            db.close()
    return outcome
