"""Kubernetes version name entities."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

_VERSION_PATTERN = re.compile(r"^v(?P<major>\d+)(?:(?P<level>alpha|beta)(?P<level_number>\d+))?$")


class VersionError(ValueError):
    """Raised when a version name is not a valid Kubernetes version."""


class StabilityLevel(str, Enum):
    """Pre-release level of a Kubernetes API version."""

    ALPHA = "alpha"
    BETA = "beta"
    STABLE = "stable"

    @property
    def rank(self) -> int:
        return _LEVEL_RANKS[self]


_LEVEL_RANKS = {
    StabilityLevel.ALPHA: 0,
    StabilityLevel.BETA: 1,
    StabilityLevel.STABLE: 2,
}


@dataclass(frozen=True)
class KubernetesVersion:
    """Parsed version name such as ``v1``, ``v1beta1`` or ``v2alpha3``."""

    name: str
    major: int
    level: StabilityLevel
    level_number: int

    @property
    def priority(self) -> tuple[int, int, int]:
        """Sort key following Kubernetes version priority (alpha < beta < stable)."""
        return (self.major, self.level.rank, self.level_number)

    def __lt__(self, other: KubernetesVersion) -> bool:
        return self.priority < other.priority

    def __str__(self) -> str:
        return self.name


def parse_kubernetes_version(text: str) -> KubernetesVersion:
    """Parse a Kubernetes version name."""
    if not isinstance(text, str):
        raise VersionError(f"Version must be a string, got {type(text).__name__}.")
    match = _VERSION_PATTERN.match(text)
    if match is None:
        raise VersionError(
            f"Invalid version '{text}', expected v<MAJOR> optionally followed by "
            "alpha<N> or beta<N>."
        )
    level_text = match.group("level")
    level = StabilityLevel(level_text) if level_text else StabilityLevel.STABLE
    level_number = int(match.group("level_number")) if level_text else 0
    return KubernetesVersion(
        name=text,
        major=int(match.group("major")),
        level=level,
        level_number=level_number,
    )
