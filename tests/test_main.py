"""Tests for application wiring."""

from pathlib import Path

from fastapi.testclient import TestClient

from chartdesk.config import AppSettings, CandleSettings, DatabaseSettings
from chartdesk.data.watchlist_store import WatchlistStore
from chartdesk.main import build_app
from chartdesk.service import ChartDataService


def test_lifespan_wires_services(tmp_path: Path) -> None:
    db_path = tmp_path / "chart.db"
    app = build_app(
        AppSettings(
            database=DatabaseSettings(db_path=str(db_path)),
            candles=CandleSettings(default_timeframe="15m"),
        )
    )

    with TestClient(app):
        assert isinstance(app.state.chart_service, ChartDataService)
        assert app.state.chart_service.default_timeframe == "15m"
        assert isinstance(app.state.watchlist_store, WatchlistStore)
        assert app.state.symbol_directory is not None
        assert db_path.exists()


def test_routes_registered(tmp_path: Path) -> None:
    app = build_app(AppSettings(database=DatabaseSettings(db_path=str(tmp_path / "chart.db"))))
    paths = app.openapi()["paths"]
    assert {
        "/api/klines",
        "/api/klines-cached",
        "/api/chart",
        "/api/symbols",
        "/api/settings",
        "/api/watchlist",
    } <= set(paths)
    assert set(paths["/api/watchlist"]) == {"get", "post", "delete"}
