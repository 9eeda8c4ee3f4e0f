"""Upstream clients and request policy services."""
