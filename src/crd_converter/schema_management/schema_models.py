"""Schema management entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from crd_converter.version_registry import UnknownVersionError, VersionRegistry


class FieldStatus(str, Enum):
    """Status of a field in one version relative to the previous version."""

    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True)
class FieldDefinition:  # pylint: disable=too-many-instance-attributes
    """Declared field of a record.

    ``added`` and ``removed`` bound the versions in which the field exists:
    the field is present in a version V when ``added <= V < removed``.
    """

    name: str
    key: str
    added: str | None = None
    removed: str | None = None
    default: Any = None
    has_default: bool = False
    record: str | None = None
    is_list: bool = False

    @property
    def is_nested(self) -> bool:
        return self.record is not None


@dataclass(frozen=True)
class RecordSchema:
    """Named group of fields, e.g. the ``spec`` of a kind or a nested struct."""

    name: str
    fields: tuple[FieldDefinition, ...]
    preserve_unknown_fields: bool = False

    @property
    def keys(self) -> frozenset[str]:
        return frozenset(item.key for item in self.fields)


@dataclass(frozen=True)
class KindDefinition:
    """Version chain and field schema of one custom resource kind."""

    kind: str
    group: str
    registry: VersionRegistry
    root_record: str
    records: Mapping[str, RecordSchema] = field(default_factory=dict)
    tracking: bool = True

    @property
    def root(self) -> RecordSchema:
        return self.records[self.root_record]

    def record(self, name: str) -> RecordSchema:
        return self.records[name]

    def api_version(self, version: str) -> str:
        """Return the ``apiVersion`` value for ``version`` (``group/version``)."""
        return f"{self.group}/{version}" if self.group else version

    def api_versions(self) -> tuple[str, ...]:
        return tuple(self.api_version(version) for version in self.registry.all())

    def version_from_api_version(self, api_version: str) -> str:
        """Return the version name carried in ``api_version``.

        Raises:
          UnknownVersionError: If the group does not match or the version is not registered.
        """
        group, _, version = api_version.rpartition("/")
        if group != self.group or version not in self.registry:
            raise UnknownVersionError(api_version, self.api_versions())
        return version
