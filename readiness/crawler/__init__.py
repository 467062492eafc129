"""Outbound page fetching."""
