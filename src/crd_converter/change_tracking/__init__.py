"""Change tracking exports."""

from .tracking_models import CHANGED_VALUES_KEY, UPGRADES_KEY, ChangedValue, join_field_path
from .tracking_store import TrackingStatusError, TrackingStore

__all__ = [
    "CHANGED_VALUES_KEY",
    "UPGRADES_KEY",
    "ChangedValue",
    "TrackingStatusError",
    "TrackingStore",
    "join_field_path",
]
