"""Market data helpers -- symbol lookup for autocomplete."""

from chartdesk.market_data.symbol_directory import SymbolDirectory

__all__ = ["SymbolDirectory"]
