# seatwatch/services/venue_client.py
"""
Venue API client.

Endpoints (base: settings.VENUE_API_BASE_URL):
    GET  /asset-svc/shop/store/portal/baseMessage?commonCode=...   shop name, address, status
    POST /surf-internet/shop/v3/get  {"commonCode": ...}           live layout + seat occupancy

Every failure (transport, HTTP status, JSON, API error code) surfaces as FetchError.
"""

from dataclasses import dataclass
import httpx
from seatwatch.config import settings
from seatwatch.services.errors import FetchError
from seatwatch.utils.logger import get_logger

logger = get_logger(__name__)

SHOP_INFO_PATH = "/asset-svc/shop/store/portal/baseMessage"
SHOP_LAYOUT_PATH = "/surf-internet/shop/v3/get"


@dataclass
class ShopInfo:
    common_code: str
    name: str
    address: str
    status: str

    @property
    def is_operating(self) -> bool:
        return self.status == settings.OPERATING_STATUS


def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=settings.VENUE_API_BASE_URL,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )


def _decode(response: httpx.Response, what: str) -> dict:
    if response.status_code != 200:
        raise FetchError(f"{what} returned HTTP {response.status_code}")
    try:
        body = response.json()
    except ValueError as e:
        raise FetchError(f"{what} returned invalid JSON: {e}") from e
    if not isinstance(body, dict):
        raise FetchError(f"{what} returned {type(body).__name__}, expected an object")
    return body


async def fetch_shop_info(common_code: str) -> ShopInfo:
    """Basic shop record. The status decides whether a layout fetch is worthwhile."""
    try:
        async with _client() as client:
            response = await client.get(SHOP_INFO_PATH, params={"commonCode": common_code})
    except httpx.HTTPError as e:
        raise FetchError(f"Shop info request for {common_code} failed: {e}") from e

    data = _decode(response, f"Shop info for {common_code}").get("data") or {}
    info = ShopInfo(
        common_code=common_code,
        name=data.get("storeName") or "",
        address=data.get("storeAddress") or "",
        status=data.get("shopStatus") or "",
    )
    logger.debug(f"[VENUE] {common_code}: name={info.name!r} status={info.status!r}")
    return info


async def fetch_shop_layout(common_code: str) -> dict:
    """Layout payload ("data" object) with areas, elements and relations."""
    try:
        async with _client() as client:
            response = await client.post(SHOP_LAYOUT_PATH, json={"commonCode": common_code})
    except httpx.HTTPError as e:
        raise FetchError(f"Layout request for {common_code} failed: {e}") from e

    body = _decode(response, f"Layout for {common_code}")
    code = body.get("code")
    if code != 0:
        raise FetchError(f"Layout API returned error code {code} for {common_code}: {body.get('message')}")

    data = body.get("data")
    if not isinstance(data, dict):
        raise FetchError(f"Layout for {common_code} has no data object")
    return data
