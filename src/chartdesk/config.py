"""Configuration system using pydantic-settings with environment variable loading."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class ExchangeSettings(BaseSettings):
    """Binance public market-data connection settings."""

    model_config = SettingsConfigDict(env_prefix="EXCHANGE_")

    enable_rate_limit: bool = True
    timeout_ms: int = 30000


class CandleSettings(BaseSettings):
    """Candle retrieval and review-window parameters.

    All fields configurable via CANDLES_ environment variable prefix.
    """

    model_config = SettingsConfigDict(env_prefix="CANDLES_")

    max_batch_size: int = 1000  # Upstream per-request row cap
    batch_delay: float = 0.1  # Seconds between sequential batches
    default_limit: int = 500  # Rows for the no-anchor recent fetch
    default_timeframe: str = "1h"
    days_before_publish: int = 1
    days_after_publish: int = 4


class DatabaseSettings(BaseSettings):
    """SQLite storage for coin settings and cached candles."""

    model_config = SettingsConfigDict(env_prefix="DATABASE_")

    db_path: str = "data/chartdesk.db"


class SymbolSettings(BaseSettings):
    """Symbol suggestion cache configuration."""

    model_config = SettingsConfigDict(env_prefix="SYMBOLS_")

    cache_ttl_seconds: float = 3600.0
    max_results: int = 20


class DashboardSettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="DASHBOARD_")

    host: str = "0.0.0.0"
    port: int = 8080


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    exchange: ExchangeSettings = ExchangeSettings()
    candles: CandleSettings = CandleSettings()
    database: DatabaseSettings = DatabaseSettings()
    symbols: SymbolSettings = SymbolSettings()
    dashboard: DashboardSettings = DashboardSettings()
