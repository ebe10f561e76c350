"""Conversion path resolution service."""

from __future__ import annotations

from itertools import permutations

from crd_converter.version_registry import VersionRegistry

from .path_models import ConversionPath, Direction


class PathResolutionError(Exception):
    """Raised when a resolved path violates the version chain."""


def resolve_conversion_path(
    registry: VersionRegistry, source: str, desired: str
) -> ConversionPath:
    """Return the hops needed to convert from ``source`` to ``desired``.

    Raises:
      UnknownVersionError: If either version is not part of the registry.
    """
    source_index = registry.ordinal(source)
    desired_index = registry.ordinal(desired)
    versions = registry.all()

    if source_index == desired_index:
        return ConversionPath(source=source, direction=None, steps=())
    if source_index < desired_index:
        return ConversionPath(
            source=source,
            direction=Direction.UPGRADE,
            steps=versions[source_index + 1 : desired_index + 1],
        )
    return ConversionPath(
        source=source,
        direction=Direction.DOWNGRADE,
        steps=tuple(reversed(versions[desired_index:source_index])),
    )


def conversion_paths(registry: VersionRegistry) -> list[ConversionPath]:
    """Return the path for every ordered pair of distinct versions."""
    return [
        resolve_conversion_path(registry, source, desired)
        for source, desired in permutations(registry.all(), 2)
    ]


def verify_conversion_path(registry: VersionRegistry, path: ConversionPath) -> None:
    """Check that every hop of ``path`` connects direct neighbors.

    Raises:
      PathResolutionError: If a hop skips a version or runs against the path direction.
    """
    for current, step in path.hops():
        previous, following = registry.neighbors(current)
        expected = following if path.direction == Direction.UPGRADE else previous
        if step != expected:
            direction = path.direction.value if path.direction else "no-op"
            raise PathResolutionError(
                f'invalid {direction} hop from "{current}" to "{step}"'
            )
