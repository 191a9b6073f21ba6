"""Aggregation outcome codes.

Explains why an aggregated context does or does not carry pending items.
"""

from enum import Enum


class ContextReason(str, Enum):
    """Why the aggregated context looks the way it does."""
    OK = "ok"
    MISSING_CONFIG = "missing_config"                        # No token or database id
    NOTION_EMPTY_OR_MISMATCH = "notion_empty_or_mismatch"    # Queried, nothing usable came back

    def __str__(self):
        return self.value
