"""
Utility functions for arangomap.

This package provides:
- Connection utilities and the Store handle
- Logging utilities for formatting and truncating log output
"""

from arangomap.core.utils.connection import (
    Store,
    connect_arango,
    ensure_database,
    connect_store,
)

from arangomap.core.utils.log_utils import (
    truncate_large_value,
    log_safe_results,
)

__all__ = [
    # Connection utilities
    "Store",
    "connect_arango",
    "ensure_database",
    "connect_store",

    # Logging utilities
    "truncate_large_value",
    "log_safe_results",
]
