"""JSON API endpoints for candles, indicators, symbol search, coin settings, and watchlists.

Owner identity arrives in the X-User-Id header; session handling lives in
front of this service.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from chartdesk.candles.models import Candle, CoinSettings, ZoneType, normalize_symbol
from chartdesk.exceptions import SettingsNotFoundError
from chartdesk.indicators import bollinger_bands, ema, macd, rsi, sma
from chartdesk.logging import request_context

log = structlog.get_logger(__name__)

router = APIRouter()

OWNER_HEADER = "X-User-Id"

MAX_KLINES_LIMIT = 1000

# Default parameters match the chart's overlay and pane setup
INDICATORS = {
    "sma": lambda candles: sma(candles, 20),
    "ema": lambda candles: ema(candles, 20),
    "bb": lambda candles: bollinger_bands(candles, 20, 2.0),
    "rsi": lambda candles: rsi(candles, 14),
    "macd": lambda candles: macd(candles, 12, 26, 9),
}


class CoinSettingsPayload(BaseModel):
    """Request body for creating or updating coin settings."""

    symbol: str = Field(min_length=1)
    publish_time: datetime
    zone_type: ZoneType
    zone_price: float = Field(gt=0)


class WatchlistPayload(BaseModel):
    """Request body for adding a symbol to the watchlist."""

    symbol: str = Field(min_length=1)


def _unauthorized() -> JSONResponse:
    return JSONResponse(content={"error": "Unauthorized"}, status_code=401)


def _symbol_required() -> JSONResponse:
    return JSONResponse(
        content={"error": "Symbol parameter required"}, status_code=400
    )


def _candles_to_json(candles: list[Candle]) -> list[dict]:
    return [c.to_dict() for c in candles]


def _settings_to_json(settings: CoinSettings) -> dict[str, Any]:
    return {
        "symbol": settings.symbol,
        "publish_time": datetime.fromtimestamp(
            settings.publish_time_ms / 1000, tz=timezone.utc
        ).isoformat(),
        "zone_type": settings.zone_type.value,
        "zone_price": settings.zone_price,
        "updated_at_ms": settings.updated_at_ms,
    }


def _to_ms(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


# ---------------------------------------------------------------------------
# Candles
# ---------------------------------------------------------------------------


@router.get("/klines")
async def get_klines(
    request: Request,
    symbol: str | None = None,
    timeframe: str | None = None,
    limit: Annotated[int, Query(gt=0, le=MAX_KLINES_LIMIT)] = 500,
    since: int | None = None,
) -> JSONResponse:
    """Direct, uncached candle fetch. ``since`` is milliseconds since epoch."""
    if not symbol:
        return _symbol_required()

    chart_service = request.app.state.chart_service
    timeframe = timeframe or chart_service.default_timeframe
    with request_context(symbol=symbol, timeframe=timeframe):
        candles = await chart_service.fetch_recent(
            symbol, timeframe, since_ms=since, limit=limit
        )
    return JSONResponse(
        content={
            "symbol": symbol,
            "timeframe": timeframe,
            "data": _candles_to_json(candles),
        }
    )


@router.get("/klines-cached")
async def get_klines_cached(
    request: Request,
    symbol: str | None = None,
    timeframe: str | None = None,
    refresh: bool = False,
) -> JSONResponse:
    """Review-window candles for the calling owner, served from cache when possible."""
    owner_id = request.headers.get(OWNER_HEADER)
    if not owner_id:
        return _unauthorized()
    if not symbol:
        return _symbol_required()

    chart_service = request.app.state.chart_service
    timeframe = timeframe or chart_service.default_timeframe
    with request_context(owner_id=owner_id, symbol=symbol, timeframe=timeframe):
        result = await chart_service.get_chart_candles(
            owner_id, symbol, timeframe, refresh=refresh
        )
    return JSONResponse(
        content={
            "symbol": result.symbol,
            "timeframe": result.timeframe,
            "data": _candles_to_json(result.candles),
            "cached": result.cached,
        }
    )


@router.get("/chart")
async def get_chart(
    request: Request,
    symbol: str | None = None,
    timeframe: str | None = None,
    refresh: bool = False,
    indicators: str = "",
) -> JSONResponse:
    """Candles plus requested indicator series and the owner's price zone.

    Query params:
        indicators: Comma-separated subset of sma, ema, bb, rsi, macd.

    Indicator warm-up values that cannot be computed are sent as null.
    """
    owner_id = request.headers.get(OWNER_HEADER)
    if not owner_id:
        return _unauthorized()
    if not symbol:
        return _symbol_required()

    requested = [name.strip().lower() for name in indicators.split(",") if name.strip()]
    unknown = [name for name in requested if name not in INDICATORS]
    if unknown:
        return JSONResponse(
            content={"error": f"Unknown indicators: {', '.join(unknown)}"},
            status_code=400,
        )

    chart_service = request.app.state.chart_service
    settings_store = request.app.state.settings_store
    timeframe = timeframe or chart_service.default_timeframe

    with request_context(owner_id=owner_id, symbol=symbol, timeframe=timeframe):
        result = await chart_service.get_chart_candles(
            owner_id, symbol, timeframe, refresh=refresh
        )
        coin_settings = await settings_store.get(owner_id, symbol)

    series = {
        name: [point.to_dict() for point in INDICATORS[name](result.candles)]
        for name in requested
    }
    zone = None
    if coin_settings is not None:
        zone = {
            "type": coin_settings.zone_type.value,
            "price": coin_settings.zone_price,
        }

    return JSONResponse(
        content={
            "symbol": result.symbol,
            "timeframe": result.timeframe,
            "data": _candles_to_json(result.candles),
            "cached": result.cached,
            "indicators": series,
            "zone": zone,
        }
    )


# ---------------------------------------------------------------------------
# Symbol search
# ---------------------------------------------------------------------------


@router.get("/symbols")
async def get_symbols(request: Request, q: str = "") -> JSONResponse:
    """Symbol suggestions for autocomplete."""
    symbol_directory = request.app.state.symbol_directory
    symbols, total = await symbol_directory.search(q)
    return JSONResponse(content={"symbols": symbols, "total": total})


# ---------------------------------------------------------------------------
# Coin settings
# ---------------------------------------------------------------------------


@router.get("/settings")
async def get_settings(request: Request, symbol: str | None = None) -> JSONResponse:
    """All settings for the owner, or one symbol's settings when ``symbol`` is given."""
    owner_id = request.headers.get(OWNER_HEADER)
    if not owner_id:
        return _unauthorized()

    settings_store = request.app.state.settings_store
    if not symbol:
        all_settings = await settings_store.list_for_owner(owner_id)
        return JSONResponse(content=[_settings_to_json(s) for s in all_settings])

    coin_settings = await settings_store.get(owner_id, symbol)
    if coin_settings is None:
        raise SettingsNotFoundError(owner_id, symbol)
    return JSONResponse(content=_settings_to_json(coin_settings))


@router.post("/settings")
async def save_settings(request: Request, payload: CoinSettingsPayload) -> JSONResponse:
    """Create or update settings. Cached candles for the symbol are dropped.

    The review window follows the publish time, so a cached series built
    for an older window would no longer match.
    """
    owner_id = request.headers.get(OWNER_HEADER)
    if not owner_id:
        return _unauthorized()

    settings_store = request.app.state.settings_store
    cache = request.app.state.cache

    saved = await settings_store.upsert(
        CoinSettings(
            owner_id=owner_id,
            symbol=payload.symbol,
            publish_time_ms=_to_ms(payload.publish_time),
            zone_type=payload.zone_type,
            zone_price=payload.zone_price,
        )
    )
    await cache.invalidate(owner_id, saved.symbol)
    log.info("settings_saved", owner_id=owner_id, symbol=saved.symbol)
    return JSONResponse(content=_settings_to_json(saved))


@router.delete("/settings")
async def delete_settings(request: Request, symbol: str | None = None) -> JSONResponse:
    """Delete settings for a symbol along with its cached candles."""
    owner_id = request.headers.get(OWNER_HEADER)
    if not owner_id:
        return _unauthorized()
    if not symbol:
        return _symbol_required()

    settings_store = request.app.state.settings_store
    cache = request.app.state.cache

    await settings_store.delete(owner_id, symbol)
    await cache.invalidate(owner_id, normalize_symbol(symbol))
    return JSONResponse(content={"message": "Settings deleted"})


# ---------------------------------------------------------------------------
# Watchlist
# ---------------------------------------------------------------------------


@router.get("/watchlist")
async def get_watchlist(request: Request) -> JSONResponse:
    """The owner's watched symbols, newest first."""
    owner_id = request.headers.get(OWNER_HEADER)
    if not owner_id:
        return _unauthorized()

    watchlist_store = request.app.state.watchlist_store
    items = await watchlist_store.list_for_owner(owner_id)
    return JSONResponse(content=[item.to_dict() for item in items])


@router.post("/watchlist")
async def add_to_watchlist(request: Request, payload: WatchlistPayload) -> JSONResponse:
    """Add a symbol. Adding a symbol that is already listed is a 400."""
    owner_id = request.headers.get(OWNER_HEADER)
    if not owner_id:
        return _unauthorized()

    watchlist_store = request.app.state.watchlist_store
    item = await watchlist_store.add(owner_id, payload.symbol)
    return JSONResponse(content=item.to_dict(), status_code=201)


@router.delete("/watchlist")
async def remove_from_watchlist(request: Request, symbol: str | None = None) -> JSONResponse:
    owner_id = request.headers.get(OWNER_HEADER)
    if not owner_id:
        return _unauthorized()
    if not symbol:
        return _symbol_required()

    watchlist_store = request.app.state.watchlist_store
    await watchlist_store.remove(owner_id, symbol)
    return JSONResponse(content={"message": "Removed from watchlist"})
