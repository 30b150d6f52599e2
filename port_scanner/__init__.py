"""Concurrent TCP connect scanner for a single IPv4 target."""
