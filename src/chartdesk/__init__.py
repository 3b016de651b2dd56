"""Chartdesk: candle retrieval, caching, and indicator service for intraday chart review."""
