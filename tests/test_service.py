"""Tests for ChartDataService: cache hits, misses, forced refresh, and the no-settings path."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from chartdesk.candles.models import CoinSettings, ZoneType
from chartdesk.config import CandleSettings
from chartdesk.exceptions import UpstreamUnavailableError
from chartdesk.service import ChartDataService
from conftest import make_candles

DAY_MS = 86_400_000
PUBLISH_MS = 1_704_067_200_000


@pytest.fixture
def coin_settings() -> CoinSettings:
    return CoinSettings(
        owner_id="user-1",
        symbol="BTCUSDT",
        publish_time_ms=PUBLISH_MS,
        zone_type=ZoneType.SUPPORT,
        zone_price=42000.0,
    )


@pytest.fixture
def deps() -> dict:
    fetcher = MagicMock()
    fetcher.fetch = AsyncMock(return_value=make_candles([1.0, 2.0]))
    assembler = MagicMock()
    assembler.assemble = AsyncMock(return_value=make_candles([3.0, 4.0, 5.0]))
    cache = MagicMock()
    cache.get = AsyncMock(return_value=None)
    cache.put = AsyncMock(return_value=3)
    settings_store = MagicMock()
    settings_store.get = AsyncMock(return_value=None)
    return {
        "fetcher": fetcher,
        "assembler": assembler,
        "cache": cache,
        "settings_store": settings_store,
    }


def _service(deps: dict, candle_settings: CandleSettings) -> ChartDataService:
    return ChartDataService(
        deps["fetcher"],
        deps["assembler"],
        deps["cache"],
        deps["settings_store"],
        candle_settings,
    )


@pytest.mark.asyncio
async def test_no_settings_bypasses_cache_and_assembler(
    deps: dict, candle_settings: CandleSettings
) -> None:
    result = await _service(deps, candle_settings).get_chart_candles("user-1", "ETH/USDT", "1h")

    deps["settings_store"].get.assert_awaited_once_with("user-1", "ETHUSDT")
    deps["fetcher"].fetch.assert_awaited_once_with(
        "ETH/USDT", "1h", since_ms=None, limit=candle_settings.default_limit
    )
    deps["assembler"].assemble.assert_not_awaited()
    deps["cache"].get.assert_not_awaited()
    deps["cache"].put.assert_not_awaited()
    assert result.cached is False
    assert result.candles == make_candles([1.0, 2.0])


@pytest.mark.asyncio
async def test_cache_hit_skips_fetch(
    deps: dict, candle_settings: CandleSettings, coin_settings: CoinSettings
) -> None:
    cached = make_candles([9.0, 9.5])
    deps["settings_store"].get.return_value = coin_settings
    deps["cache"].get.return_value = cached

    result = await _service(deps, candle_settings).get_chart_candles("user-1", "BTC/USDT", "1h")

    deps["cache"].get.assert_awaited_once_with("user-1", "BTCUSDT", "1h")
    deps["assembler"].assemble.assert_not_awaited()
    deps["fetcher"].fetch.assert_not_awaited()
    assert result.cached is True
    assert result.candles == cached


@pytest.mark.asyncio
async def test_cache_miss_assembles_window_and_stores(
    deps: dict, candle_settings: CandleSettings, coin_settings: CoinSettings
) -> None:
    deps["settings_store"].get.return_value = coin_settings

    result = await _service(deps, candle_settings).get_chart_candles("user-1", "BTC/USDT", "15m")

    deps["assembler"].assemble.assert_awaited_once_with(
        "BTC/USDT", "15m", PUBLISH_MS - DAY_MS, PUBLISH_MS + 4 * DAY_MS
    )
    deps["cache"].put.assert_awaited_once_with(
        "user-1", "BTCUSDT", "15m", make_candles([3.0, 4.0, 5.0])
    )
    assert result.cached is False


@pytest.mark.asyncio
async def test_refresh_ignores_existing_cache(
    deps: dict, candle_settings: CandleSettings, coin_settings: CoinSettings
) -> None:
    deps["settings_store"].get.return_value = coin_settings
    deps["cache"].get.return_value = make_candles([9.0])

    result = await _service(deps, candle_settings).get_chart_candles(
        "user-1", "BTC/USDT", "1h", refresh=True
    )

    deps["cache"].get.assert_not_awaited()
    deps["assembler"].assemble.assert_awaited_once()
    deps["cache"].put.assert_awaited_once()
    assert result.candles == make_candles([3.0, 4.0, 5.0])


@pytest.mark.asyncio
async def test_empty_assembly_is_returned_and_not_stored(
    deps: dict, candle_settings: CandleSettings, coin_settings: CoinSettings
) -> None:
    deps["settings_store"].get.return_value = coin_settings
    deps["assembler"].assemble.return_value = []

    result = await _service(deps, candle_settings).get_chart_candles("user-1", "BTC/USDT", "1h")

    assert result.candles == []
    deps["cache"].put.assert_not_awaited()


@pytest.mark.asyncio
async def test_refresh_failure_does_not_fall_back_to_cache(
    deps: dict, candle_settings: CandleSettings, coin_settings: CoinSettings
) -> None:
    deps["settings_store"].get.return_value = coin_settings
    deps["cache"].get.return_value = make_candles([9.0])
    deps["assembler"].assemble.side_effect = UpstreamUnavailableError("down")

    with pytest.raises(UpstreamUnavailableError):
        await _service(deps, candle_settings).get_chart_candles(
            "user-1", "BTC/USDT", "1h", refresh=True
        )
    deps["cache"].put.assert_not_awaited()


@pytest.mark.asyncio
async def test_custom_window_days(deps: dict, coin_settings: CoinSettings) -> None:
    deps["settings_store"].get.return_value = coin_settings
    settings = CandleSettings(days_before_publish=2, days_after_publish=1)

    await _service(deps, settings).get_chart_candles("user-1", "BTC/USDT", "1h")

    deps["assembler"].assemble.assert_awaited_once_with(
        "BTC/USDT", "1h", PUBLISH_MS - 2 * DAY_MS, PUBLISH_MS + DAY_MS
    )


@pytest.mark.asyncio
async def test_fetch_recent_passes_since_and_limit(
    deps: dict, candle_settings: CandleSettings
) -> None:
    await _service(deps, candle_settings).fetch_recent("BTC/USDT", "5m", since_ms=123, limit=50)
    deps["fetcher"].fetch.assert_awaited_once_with("BTC/USDT", "5m", since_ms=123, limit=50)


def test_default_timeframe_comes_from_settings(deps: dict) -> None:
    service = _service(deps, CandleSettings(default_timeframe="4h"))
    assert service.default_timeframe == "4h"
