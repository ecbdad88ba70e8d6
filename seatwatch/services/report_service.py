# seatwatch/services/report_service.py
"""
Plain-text report bodies for push notifications.
Pure functions: no DB access, no I/O.
"""

from datetime import date
from typing import Optional
from seatwatch.models.shop import Shop
from seatwatch.services.layout_parser import ShopAggregate
from seatwatch.services.rollup_service import DailyStats


def _pct(rate: Optional[float], fmt: str = ".2f") -> str:
    return "n/a" if rate is None else f"{rate:{fmt}}%"


def format_live_report(shop: Shop, aggregate: ShopAggregate, room_names: dict[str, str]) -> str:
    lines = [
        f"Shop: {shop.name}",
        f"Address: {shop.address}",
        f"Devices: {aggregate.total_devices}, in use: {aggregate.used_devices}",
    ]
    if aggregate.total_devices > 0:
        lines.append(f"Usage: {_pct(aggregate.usage_rate)}")
        lines.append("")

    lines.append("Rooms:")
    for room in aggregate.reportable_rooms():
        name = room_names.get(room.room_code, room.room_name)
        lines.append(f"{name}: {_pct(room.usage_rate)} ({room.used_seats}/{room.total_seats})")
    return "\n".join(lines) + "\n"


def format_closed_report(shop: Shop, status: str) -> str:
    return f"Shop: {shop.name}\nAddress: {shop.address}\nStatus: {status}"


def format_daily_report(shop_name: str, stats: DailyStats, day: Optional[date] = None) -> str:
    """Daily summary plus an hour table (rows only for hours that had snapshots)."""
    title = f"[{shop_name}] Daily report" + (f" {day.isoformat()}" if day else "")
    lines = [
        title,
        f"Total devices: {stats.total_devices}",
        f"Records: {stats.record_count}",
        f"Avg usage: {_pct(stats.avg_usage_rate)}",
        f"Peak usage: {_pct(stats.max_usage_rate)}",
        f"Avg in use: {stats.avg_used_devices:.1f}",
        f"Peak in use: {stats.max_used_devices}",
    ]

    if stats.hourly:
        by_hour = {h.hour: h for h in stats.hourly}
        lines.append("")
        lines.append("--- Hourly usage ---")
        lines.append("║ Hour  ║ Usage ║ In use ║")
        for hour in range(24):
            h = by_hour.get(hour)
            if h is None:
                continue
            rate = "  n/a" if h.avg_usage_rate is None else f"{h.avg_usage_rate:4.0f}%"
            lines.append(f"║ {hour:02d}:00 ║ {rate} ║ {h.avg_used_devices:6.0f} ║")

    return "\n".join(lines) + "\n"


def format_error_report(common_code: str, error: Exception) -> str:
    return f"Failed to get status for shop {common_code}: {error}"
