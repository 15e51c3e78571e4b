"""Content freshness for polling clients."""

from .freshness import compute_freshness, latest_update, parse_timestamp

__all__ = ["compute_freshness", "latest_update", "parse_timestamp"]
