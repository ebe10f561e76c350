"""Ordered version chain of one resource kind."""

from __future__ import annotations

from collections.abc import Iterable

from .version_models import VersionError, parse_kubernetes_version


class RegistryError(Exception):
    """Raised when a version chain cannot be built from its declaration."""


class UnknownVersionError(Exception):
    """Raised when a version is not part of the registry."""

    def __init__(self, version: str, known_versions: Iterable[str]) -> None:
        self.version = version
        self.known_versions = tuple(known_versions)
        super().__init__(
            f"the resource version \"{version}\" is not known "
            f"(known versions: {', '.join(self.known_versions)})"
        )


class VersionRegistry:
    """Immutable, chronologically ordered list of version names.

    Versions form a single chain: every version has at most one previous and
    one next neighbor. The registry is built once at startup and shared by
    all conversions.
    """

    __slots__ = ("_versions", "_ordinals")

    def __init__(self, versions: Iterable[str]) -> None:
        declared = tuple(versions)
        if not declared:
            raise RegistryError("A version registry requires at least one version.")

        ordinals: dict[str, int] = {}
        parsed = []
        for index, name in enumerate(declared):
            if name in ordinals:
                raise RegistryError(f"Duplicate version '{name}' in version registry.")
            try:
                parsed.append(parse_kubernetes_version(name))
            except VersionError as exc:
                raise RegistryError(str(exc)) from exc
            ordinals[name] = index

        for previous, current in zip(parsed, parsed[1:]):
            if not previous < current:
                raise RegistryError(
                    f"Versions must be declared in ascending order: '{current}' "
                    f"cannot follow '{previous}'."
                )

        self._versions = declared
        self._ordinals = ordinals

    def __repr__(self) -> str:
        return f"VersionRegistry({list(self._versions)!r})"

    def __len__(self) -> int:
        return len(self._versions)

    def __contains__(self, version: object) -> bool:
        return version in self._ordinals

    def all(self) -> tuple[str, ...]:
        return self._versions

    def contains(self, version: str) -> bool:
        return version in self._ordinals

    @property
    def earliest(self) -> str:
        return self._versions[0]

    @property
    def latest(self) -> str:
        return self._versions[-1]

    def ordinal(self, version: str) -> int:
        """Return the index of ``version`` in declaration order."""
        try:
            return self._ordinals[version]
        except KeyError:
            raise UnknownVersionError(version, self._versions) from None

    def neighbors(self, version: str) -> tuple[str | None, str | None]:
        """Return the previous and next version of ``version``."""
        index = self.ordinal(version)
        previous = self._versions[index - 1] if index > 0 else None
        following = self._versions[index + 1] if index + 1 < len(self._versions) else None
        return previous, following

    def is_before(self, version: str, other: str) -> bool:
        return self.ordinal(version) < self.ordinal(other)
