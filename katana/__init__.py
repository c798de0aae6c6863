"""Katana L2 RPC connector, balance aggregation and static DeFi tables."""
