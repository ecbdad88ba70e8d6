"""Daily rollup of stored snapshots."""

from datetime import date, timedelta
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from seatwatch.database import get_db
from seatwatch.schemas.stats import DailyStatsOut, HourlyStatOut
from seatwatch.services.rollup_service import day_window
from seatwatch.services.shop_poller import build_daily_report

router = APIRouter()


@router.get("/shops/{common_code}/daily", response_model=DailyStatsOut, summary="Daily usage rollup")
def get_daily_stats(common_code: str, target_date: Optional[date] = None, db: Session = Depends(get_db)):
    """
    Rollup for target_date (default: yesterday). record_count == 0 means no
    snapshots were stored that day; report is then null.
    """
    day = target_date or (date.today() - timedelta(days=1))
    shop, stats, report = build_daily_report(db, common_code, day_window(day))
    if shop is None:
        raise HTTPException(status_code=404, detail=f"Shop '{common_code}' not found")

    return DailyStatsOut(
        common_code=common_code,
        day=day,
        record_count=stats.record_count,
        avg_usage_rate=stats.avg_usage_rate,
        max_usage_rate=stats.max_usage_rate,
        avg_used_devices=stats.avg_used_devices,
        max_used_devices=stats.max_used_devices,
        total_devices=stats.total_devices,
        hourly=[HourlyStatOut.model_validate(h) for h in stats.hourly],
        report=report,
    )
