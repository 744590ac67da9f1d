"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.

Settings are read from the environment:

    STOREFRONT_API_URL       backend base URL
    STOREFRONT_DATA_DIR      where carts, the buy-now item and offline orders live
    STOREFRONT_HTTP_TIMEOUT  seconds
    STOREFRONT_OFFLINE       "1" to use the local coupon catalogue and order log
    STOREFRONT_LOG_LEVEL     default level for the CLI
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator

from storefront.domain.gateway.coupon_gateway import CouponGateway
from storefront.domain.gateway.order_gateway import OrderGateway
from storefront.infrastructure.http.api_client import ApiClient
from storefront.infrastructure.http.http_coupon_gateway import HttpCouponGateway
from storefront.infrastructure.http.http_order_gateway import HttpOrderGateway
from storefront.infrastructure.offline.coupon_catalogue import InMemoryCouponGateway
from storefront.infrastructure.offline.json_order_gateway import JsonOrderGateway
from storefront.infrastructure.persistence.json_buy_now_repository import (
    JsonBuyNowRepository,
)
from storefront.infrastructure.persistence.json_cart_repository import (
    JsonCartRepository,
)

DEFAULT_API_URL = "https://mispri24.vercel.app/api"

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    api_url: str = DEFAULT_API_URL
    data_dir: Path = _DEFAULT_DATA_DIR
    http_timeout: float = 30.0
    offline: bool = False
    log_level: str = "WARNING"


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    return Settings(
        api_url=env.get("STOREFRONT_API_URL", DEFAULT_API_URL),
        data_dir=Path(env.get("STOREFRONT_DATA_DIR", str(_DEFAULT_DATA_DIR))),
        http_timeout=float(env.get("STOREFRONT_HTTP_TIMEOUT", "30")),
        offline=env.get("STOREFRONT_OFFLINE", "").strip().lower() in _TRUTHY,
        log_level=env.get("STOREFRONT_LOG_LEVEL", "WARNING").upper(),
    )


def cart_repository(settings: Settings) -> JsonCartRepository:
    return JsonCartRepository(settings.data_dir / "carts.json")


def buy_now_repository(settings: Settings) -> JsonBuyNowRepository:
    return JsonBuyNowRepository(settings.data_dir / "buy_now.json")


@dataclass(frozen=True)
class Backend:
    coupons: CouponGateway
    orders: OrderGateway


@asynccontextmanager
async def backend(settings: Settings) -> AsyncIterator[Backend]:
    """Yield the coupon and order services, closing any HTTP client on exit."""
    if settings.offline:
        catalogue = InMemoryCouponGateway()
        yield Backend(
            coupons=catalogue,
            orders=JsonOrderGateway(settings.data_dir / "orders.json", catalogue),
        )
        return

    async with ApiClient(settings.api_url, timeout=settings.http_timeout) as api:
        yield Backend(coupons=HttpCouponGateway(api), orders=HttpOrderGateway(api))
