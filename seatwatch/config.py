# seatwatch/config.py
"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
List settings (SHOP_CODES, BARK_TOKENS) are given as JSON, e.g. SHOP_CODES='["0437"]'.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Database ──────────────────────────────────────────────────────────
    DATABASE_URL: str = "sqlite:///./seatwatch.db"

    # ── Venue API ─────────────────────────────────────────────────────────
    VENUE_API_BASE_URL: str = "https://vip-gateway.wywk.cn"
    OPERATING_STATUS: str = "营业中"          # shopStatus value meaning "open"
    HTTP_TIMEOUT_SECONDS: float = 10.0

    # ── Shops ─────────────────────────────────────────────────────────────
    SHOP_CODES: list[str] = []

    # ── Notifications (Bark) ──────────────────────────────────────────────
    BARK_TOKENS: list[str] = []
    BARK_BASE_URL: str = "https://api.day.app"
    NOTIFY_LIVE_REPORTS: bool = True         # push a report after every poll

    # ── Scheduling ────────────────────────────────────────────────────────
    SCHEDULER_ENABLED: bool = True
    POLL_INTERVAL_MINUTES: int = 30
    DAILY_REPORT_HOUR: int = 0
    DAILY_REPORT_MINUTE: int = 5

    # ── API server ────────────────────────────────────────────────────────
    BACKEND_HOST: str = "0.0.0.0"
    BACKEND_PORT: int = 8080

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = True

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
