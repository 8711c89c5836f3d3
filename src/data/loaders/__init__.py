# Data Loaders
from .deadlock_api import (
    DEADLOCK_API_BASE,
    DeadlockApiError,
    fetch_json,
    fetch_heroes,
    fetch_items,
)

__all__ = [
    "DEADLOCK_API_BASE",
    "DeadlockApiError",
    "fetch_json",
    "fetch_heroes",
    "fetch_items",
]
