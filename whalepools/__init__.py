"""Whale pool indexer: crawls DEX trades, keeps a snapshot of whale traders per pool."""
__version__ = "0.1.0"
