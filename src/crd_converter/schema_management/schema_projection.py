"""Kind definition loading and per-version field projection service."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any

from crd_converter.version_registry import RegistryError, VersionRegistry

from .schema_models import FieldDefinition, FieldStatus, KindDefinition, RecordSchema

_FIELD_OPTIONS = frozenset({"name", "key", "added", "removed", "default", "record", "list"})


class SchemaError(Exception):
    """Raised for invalid kind definitions."""


def load_kind_definition(raw: Any) -> KindDefinition:
    """Build and validate a kind definition from its declarative form."""
    definition = _require_mapping(raw, "kind definition")
    kind = _require_non_empty_string(definition.get("kind"), "kind")
    group = definition.get("group", "")
    if not isinstance(group, str):
        raise SchemaError(f"{kind}: group must be a string.")
    group = group.strip()

    versions = definition.get("versions")
    if not isinstance(versions, Sequence) or isinstance(versions, str):
        raise SchemaError(f"{kind}: versions must be a list of version names.")
    try:
        registry = VersionRegistry(versions)
    except RegistryError as exc:
        raise SchemaError(f"{kind}: {exc}") from exc

    raw_records = _require_mapping(definition.get("records"), f"{kind}: records")
    records = {
        name: _parse_record(kind, name, value, registry) for name, value in raw_records.items()
    }
    root_record = _require_non_empty_string(definition.get("spec"), f"{kind}: spec")
    if root_record not in records:
        raise SchemaError(f"{kind}: spec record '{root_record}' is not defined.")
    _check_record_references(kind, records)

    tracking = definition.get("tracking", True)
    if not isinstance(tracking, bool):
        raise SchemaError(f"{kind}: tracking must be a boolean.")

    return KindDefinition(
        kind=kind,
        group=group,
        registry=registry,
        root_record=root_record,
        records=MappingProxyType(records),
        tracking=tracking,
    )


def field_status(
    definition: FieldDefinition, version: str, registry: VersionRegistry
) -> FieldStatus | None:
    """Return the status of a field in ``version``, or None when it does not exist there."""
    index = registry.ordinal(version)
    added_index = registry.ordinal(definition.added) if definition.added else 0
    removed_index = registry.ordinal(definition.removed) if definition.removed else len(registry)

    if index == removed_index:
        return FieldStatus.REMOVED
    if index < added_index or index > removed_index:
        return None
    if index == added_index and index > 0:
        return FieldStatus.ADDED
    return FieldStatus.UNCHANGED


def is_present(definition: FieldDefinition, version: str, registry: VersionRegistry) -> bool:
    status = field_status(definition, version, registry)
    return status in (FieldStatus.UNCHANGED, FieldStatus.ADDED)


def fields_for_version(
    record: RecordSchema, version: str, registry: VersionRegistry
) -> list[FieldDefinition]:
    """Return the fields of ``record`` that exist in ``version``."""
    return [item for item in record.fields if is_present(item, version, registry)]


def describe_version_schema(
    kind: KindDefinition, version: str
) -> dict[str, list[tuple[str, FieldStatus]]]:
    """Return ``record -> [(key, status)]`` for every record in ``version``."""
    described: dict[str, list[tuple[str, FieldStatus]]] = {}
    for name, record in kind.records.items():
        entries = []
        for item in record.fields:
            status = field_status(item, version, kind.registry)
            if status is not None:
                entries.append((item.key, status))
        described[name] = entries
    return described


def _parse_record(
    kind: str, name: str, value: Any, registry: VersionRegistry
) -> RecordSchema:
    label = f"{kind}: record '{name}'"
    section = _require_mapping(value, label)
    raw_fields = section.get("fields", [])
    if not isinstance(raw_fields, Sequence) or isinstance(raw_fields, str):
        raise SchemaError(f"{label}: fields must be a list.")

    fields: list[FieldDefinition] = []
    seen_names: set[str] = set()
    by_key: dict[str, list[FieldDefinition]] = {}
    for raw_field in raw_fields:
        parsed = _parse_field(label, raw_field, registry)
        if parsed.name in seen_names:
            raise SchemaError(f"{label}: duplicate field name '{parsed.name}'.")
        same_key = by_key.setdefault(parsed.key, [])
        if any(_lifetimes_overlap(parsed, other, registry) for other in same_key):
            raise SchemaError(f"{label}: duplicate field key '{parsed.key}'.")
        seen_names.add(parsed.name)
        same_key.append(parsed)
        fields.append(parsed)

    preserve_unknown_fields = section.get("preserve_unknown_fields", False)
    if not isinstance(preserve_unknown_fields, bool):
        raise SchemaError(f"{label}: preserve_unknown_fields must be a boolean.")
    return RecordSchema(
        name=name,
        fields=tuple(fields),
        preserve_unknown_fields=preserve_unknown_fields,
    )


def _parse_field(label: str, value: Any, registry: VersionRegistry) -> FieldDefinition:
    if isinstance(value, str):
        value = {"name": value}
    section = _require_mapping(value, f"{label} field")
    name = _require_non_empty_string(section.get("name"), f"{label} field name")
    field_label = f"{label} field '{name}'"
    unknown_options = sorted(set(section) - _FIELD_OPTIONS)
    if unknown_options:
        raise SchemaError(f"{field_label}: unknown options {', '.join(unknown_options)}.")

    key = section.get("key", name)
    key = _require_non_empty_string(key, f"{field_label} key")
    added = _optional_version(section.get("added"), registry, f"{field_label} added")
    removed = _optional_version(section.get("removed"), registry, f"{field_label} removed")
    if added and removed and registry.ordinal(removed) <= registry.ordinal(added):
        raise SchemaError(f"{field_label}: removed version must come after added version.")
    if removed and registry.ordinal(removed) == 0:
        raise SchemaError(f"{field_label}: cannot be removed in the first version.")

    record = section.get("record")
    if record is not None:
        record = _require_non_empty_string(record, f"{field_label} record")
    is_list = section.get("list", False)
    if not isinstance(is_list, bool):
        raise SchemaError(f"{field_label}: list must be a boolean.")
    if is_list and record is None:
        raise SchemaError(f"{field_label}: list fields must reference a record.")

    has_default = "default" in section
    default = section.get("default")
    if has_default and record is not None and default is not None:
        expected = list if is_list else Mapping
        if not isinstance(default, expected):
            raise SchemaError(f"{field_label}: default does not match the nested record shape.")

    return FieldDefinition(
        name=name,
        key=key,
        added=added,
        removed=removed,
        default=default,
        has_default=has_default,
        record=record,
        is_list=is_list,
    )


def _lifetime(definition: FieldDefinition, registry: VersionRegistry) -> tuple[int, int]:
    start = registry.ordinal(definition.added) if definition.added else 0
    end = registry.ordinal(definition.removed) if definition.removed else len(registry)
    return start, end


def _lifetimes_overlap(
    first: FieldDefinition, second: FieldDefinition, registry: VersionRegistry
) -> bool:
    # A key may be reused once the field holding it has been removed.
    first_start, first_end = _lifetime(first, registry)
    second_start, second_end = _lifetime(second, registry)
    return first_start < second_end and second_start < first_end


def _optional_version(value: Any, registry: VersionRegistry, label: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str) or value not in registry:
        raise SchemaError(f"{label} '{value}' is not a declared version.")
    return value


def _check_record_references(kind: str, records: Mapping[str, RecordSchema]) -> None:
    for record in records.values():
        for item in record.fields:
            if item.record is not None and item.record not in records:
                raise SchemaError(
                    f"{kind}: field '{item.name}' of record '{record.name}' references "
                    f"unknown record '{item.record}'."
                )
    for name in records:
        _check_not_recursive(kind, name, records, trail=())


def _check_not_recursive(
    kind: str, name: str, records: Mapping[str, RecordSchema], trail: tuple[str, ...]
) -> None:
    if name in trail:
        cycle = " -> ".join((*trail, name))
        raise SchemaError(f"{kind}: recursive record reference {cycle}.")
    for item in records[name].fields:
        if item.record is not None:
            _check_not_recursive(kind, item.record, records, (*trail, name))


def _require_mapping(value: Any, label: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise SchemaError(f"{label} must be a mapping.")
    return value


def _require_non_empty_string(value: Any, label: str) -> str:
    if not isinstance(value, str):
        raise SchemaError(f"{label} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise SchemaError(f"{label} must not be empty.")
    return stripped
