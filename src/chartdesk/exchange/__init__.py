"""Exchange client layer -- public Binance market data via ccxt."""

from chartdesk.exchange.binance_client import BinanceClient
from chartdesk.exchange.client import ExchangeClient
from chartdesk.exchange.errors import translate_exchange_error

__all__ = ["BinanceClient", "ExchangeClient", "translate_exchange_error"]
