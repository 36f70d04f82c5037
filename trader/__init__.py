"""Trader backend: market data provider and backfill jobs."""
