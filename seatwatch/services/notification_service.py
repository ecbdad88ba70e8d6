# seatwatch/services/notification_service.py
"""
Bark push notifications.
A token is either a full Bark URL or a bare device key (prefixed with BARK_BASE_URL).
Delivery is fire-and-forget: each token is tried once, failures are logged and never raised.
"""

import httpx
from seatwatch.config import settings
from seatwatch.utils.logger import get_logger

logger = get_logger(__name__)


def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)


def _token_url(token: str) -> str:
    if "://" not in token:
        token = f"{settings.BARK_BASE_URL.rstrip('/')}/{token}"
    return token.rstrip("/")


def _mask(token: str) -> str:
    return token[-4:] if len(token) > 4 else token


async def _send_one(client: httpx.AsyncClient, token: str, message: str, group: str) -> bool:
    payload = {"title": group, "body": message, "group": group}
    try:
        response = await client.post(_token_url(token), json=payload)
    except httpx.HTTPError as e:
        logger.error(f"[BARK] Send to ...{_mask(token)} for {group} failed: {e}")
        return False

    if response.status_code != 200:
        logger.error(
            f"[BARK] Send to ...{_mask(token)} for {group} returned HTTP "
            f"{response.status_code}: {response.text[:200]}"
        )
        return False

    logger.info(f"[BARK] Sent to ...{_mask(token)} for {group}")
    return True


async def send_notifications(tokens: list[str], message: str, group: str = "") -> int:
    """Push message to every token. Returns how many deliveries succeeded."""
    if not tokens:
        logger.info("[BARK] No tokens configured — skipping notification")
        return 0

    sent = 0
    async with _client() as client:
        for token in tokens:
            if await _send_one(client, token, message, group):
                sent += 1
    return sent
