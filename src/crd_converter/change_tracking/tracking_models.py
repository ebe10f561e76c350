"""Change tracking entities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

CHANGED_VALUES_KEY = "changedValues"
UPGRADES_KEY = "upgrades"
FIELD_PATH_KEY = "fieldPath"
VALUE_KEY = "value"


@dataclass(frozen=True)
class ChangedValue:
    """Value of a field that is missing from the currently materialized version."""

    field_path: str
    value: Any

    def to_dict(self) -> dict[str, Any]:
        return {FIELD_PATH_KEY: self.field_path, VALUE_KEY: self.value}


def join_field_path(parent: str, child: str | int) -> str:
    """Append ``child`` to a dotted field path."""
    return f"{parent}.{child}" if parent else str(child)
