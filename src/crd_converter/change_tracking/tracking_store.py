"""Tracking store for values dropped by downgrades."""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from typing import Any

from .tracking_models import (
    CHANGED_VALUES_KEY,
    FIELD_PATH_KEY,
    UPGRADES_KEY,
    VALUE_KEY,
    ChangedValue,
)


class TrackingStatusError(Exception):
    """Raised when the tracking data in an object's status is malformed."""


class TrackingStore:
    """In-memory view of ``status.changedValues`` for one object.

    Downgrades ``record`` values under the version that still has the field;
    the upgrade back to that version ``take``s the whole bucket.
    """

    def __init__(self, upgrades: Mapping[str, Sequence[ChangedValue]] | None = None) -> None:
        self._upgrades: dict[str, list[ChangedValue]] = {
            version: list(values) for version, values in (upgrades or {}).items() if values
        }

    @classmethod
    def from_status(cls, status: Any) -> TrackingStore:
        """Read the tracking data carried in an object's ``status``."""
        if status is None:
            return cls()
        if not isinstance(status, Mapping):
            raise TrackingStatusError('the "status" of the object is not a JSON object')
        changed_values = status.get(CHANGED_VALUES_KEY)
        if changed_values is None:
            return cls()
        if not isinstance(changed_values, Mapping):
            raise TrackingStatusError(f'"status.{CHANGED_VALUES_KEY}" is not a JSON object')
        upgrades = changed_values.get(UPGRADES_KEY) or {}
        if not isinstance(upgrades, Mapping):
            raise TrackingStatusError(
                f'"status.{CHANGED_VALUES_KEY}.{UPGRADES_KEY}" is not a JSON object'
            )
        return cls(
            {version: _parse_bucket(version, entries) for version, entries in upgrades.items()}
        )

    def record(self, target: str, field_path: str, value: Any) -> None:
        """Remember ``value`` so that the upgrade to ``target`` can restore it."""
        bucket = self._upgrades.setdefault(target, [])
        bucket.append(ChangedValue(field_path=field_path, value=copy.deepcopy(value)))

    def take(self, target: str) -> list[ChangedValue]:
        """Remove and return every value recorded for ``target``."""
        return self._upgrades.pop(target, [])

    def is_empty(self) -> bool:
        return not self._upgrades

    def versions(self) -> tuple[str, ...]:
        return tuple(self._upgrades)

    def to_status_value(self) -> dict[str, Any]:
        return {
            UPGRADES_KEY: {
                version: [entry.to_dict() for entry in entries]
                for version, entries in self._upgrades.items()
            }
        }

    def apply_to_status(self, status: Mapping[str, Any] | None) -> dict[str, Any] | None:
        """Return ``status`` with the tracking data written back.

        Empty tracking data is removed rather than stored, and a status that
        only existed to carry it is dropped altogether.
        """
        updated = dict(status or {})
        had_changed_values = CHANGED_VALUES_KEY in updated
        updated.pop(CHANGED_VALUES_KEY, None)
        if not self.is_empty():
            updated[CHANGED_VALUES_KEY] = self.to_status_value()
            return updated
        if status is None or (had_changed_values and not updated):
            return None
        return updated


def _parse_bucket(version: Any, entries: Any) -> list[ChangedValue]:
    if not isinstance(entries, Sequence) or isinstance(entries, str):
        raise TrackingStatusError(f'tracked values for version "{version}" are not a list')
    parsed = []
    for entry in entries:
        if not isinstance(entry, Mapping) or not isinstance(entry.get(FIELD_PATH_KEY), str):
            raise TrackingStatusError(
                f'tracked value for version "{version}" requires a string "{FIELD_PATH_KEY}"'
            )
        parsed.append(ChangedValue(field_path=entry[FIELD_PATH_KEY], value=entry.get(VALUE_KEY)))
    return parsed
