"""Conversion path entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Direction(str, Enum):
    """Direction of a hop through the version chain."""

    UPGRADE = "upgrade"
    DOWNGRADE = "downgrade"


@dataclass(frozen=True)
class ConversionPath:
    """Ordered hops from ``source`` to the desired version.

    ``steps`` starts at the neighbor of ``source`` and ends at the desired
    version. An empty path means the object already has the desired version.
    """

    source: str
    direction: Direction | None
    steps: tuple[str, ...]

    @property
    def is_noop(self) -> bool:
        return not self.steps

    @property
    def target(self) -> str:
        return self.steps[-1] if self.steps else self.source

    def hops(self) -> list[tuple[str, str]]:
        """Return ``(from, to)`` pairs for every hop, in order."""
        pairs: list[tuple[str, str]] = []
        current = self.source
        for step in self.steps:
            pairs.append((current, step))
            current = step
        return pairs
