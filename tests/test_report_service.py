"""Unit tests for report formatting."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import date
from seatwatch.models import Shop
from seatwatch.services.layout_parser import parse_shop_layout, RoomAggregate, ShopAggregate
from seatwatch.services.report_service import (
    format_live_report, format_closed_report, format_daily_report, format_error_report,
)
from seatwatch.services.rollup_service import DailyStats, HourlyStat


def make_shop():
    return Shop(common_code="0437", name="Test Shop", address="1 Main St")


class TestLiveReport:
    def test_layout_report(self, layout):
        aggregate, names, _ = parse_shop_layout(layout)
        report = format_live_report(make_shop(), aggregate, names)

        assert report.startswith("Shop: Test Shop\nAddress: 1 Main St\n")
        assert "Devices: 3, in use: 2" in report
        assert "Usage: 66.67%" in report
        assert "Room One: 50.00% (1/2)" in report
        assert "Room Two: 100.00% (1/1)" in report
        assert report.index("Room One") < report.index("Room Two")

    def test_rooms_sorted_by_code_and_empty_rooms_skipped(self):
        aggregate = ShopAggregate(total_devices=2, used_devices=1, rooms={
            "Z": RoomAggregate(room_code="Z", room_name="Zed", total_seats=1, used_seats=1),
            "A": RoomAggregate(room_code="A", room_name="Ay", total_seats=1),
            "M": RoomAggregate(room_code="M", room_name="Empty"),
        })
        report = format_live_report(make_shop(), aggregate, {"Z": "Zed", "A": "Ay", "M": "Empty"})

        room_lines = report.split("Rooms:\n")[1].strip().splitlines()
        assert room_lines == ["Ay: 0.00% (0/1)", "Zed: 100.00% (1/1)"]
        assert "Empty" not in report

    def test_no_devices_omits_rate(self):
        report = format_live_report(make_shop(), ShopAggregate(), {})
        assert "Devices: 0, in use: 0" in report
        assert "Usage:" not in report


def test_closed_report():
    report = format_closed_report(make_shop(), "休息中")
    assert report == "Shop: Test Shop\nAddress: 1 Main St\nStatus: 休息中"


class TestDailyReport:
    def test_summary_and_hour_rows(self):
        stats = DailyStats(
            record_count=4,
            avg_usage_rate=42.5,
            max_usage_rate=80.0,
            avg_used_devices=8.5,
            max_used_devices=16,
            total_devices=20,
            hourly=[HourlyStat(8, 25.0, 5.0), HourlyStat(14, 60.4, 12.2)],
        )
        report = format_daily_report("Test Shop", stats, date(2026, 10, 18))

        assert report.startswith("[Test Shop] Daily report 2026-10-18\n")
        assert "Total devices: 20" in report
        assert "Records: 4" in report
        assert "Avg usage: 42.50%" in report
        assert "Peak usage: 80.00%" in report
        assert "Avg in use: 8.5" in report
        assert "Peak in use: 16" in report

        rows = [line for line in report.splitlines() if line.startswith("║ ") and ":00" in line]
        assert len(rows) == 2
        assert rows[0].startswith("║ 08:00") and "25%" in rows[0] and rows[0].rstrip(" ║").endswith("5")
        assert rows[1].startswith("║ 14:00") and "60%" in rows[1] and rows[1].rstrip(" ║").endswith("12")

    def test_no_hourly_table_without_rows(self):
        report = format_daily_report("Test Shop", DailyStats(record_count=1, total_devices=3))
        assert "Hourly" not in report
        assert "Avg usage: n/a" in report


def test_error_report():
    assert format_error_report("0437", RuntimeError("boom")) == "Failed to get status for shop 0437: boom"
