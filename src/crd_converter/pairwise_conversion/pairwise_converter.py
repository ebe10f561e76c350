"""Field-level conversion between adjacent versions."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from crd_converter.change_tracking import TrackingStore, join_field_path
from crd_converter.conversion_paths import ConversionPath, Direction
from crd_converter.schema_management import FieldDefinition, KindDefinition, RecordSchema
from crd_converter.schema_management.schema_projection import is_present

logger = logging.getLogger(__name__)


class ObjectShapeError(Exception):
    """Raised when an object does not have the shape its schema declares."""


@dataclass
class _Hop:
    """State shared by every record visited during one hop."""

    kind: KindDefinition
    direction: Direction
    source: str
    target: str
    store: TrackingStore | None
    restored: dict[str, Any]


def convert_spec(  # pylint: disable=too-many-arguments
    kind: KindDefinition,
    spec: Mapping[str, Any],
    direction: Direction,
    source: str,
    target: str,
    store: TrackingStore | None,
) -> dict[str, Any]:
    """Convert a ``spec`` from ``source`` to the adjacent version ``target``.

    Upgrades restore values previously recorded for ``target`` in ``store``
    and fall back to declared defaults. Downgrades record values of fields
    that do not exist in ``target`` under ``source``. Without a store, values
    are dropped and defaults applied.

    Raises:
      ObjectShapeError: If a nested record or list does not match the schema.
    """
    restored: dict[str, Any] = {}
    if direction == Direction.UPGRADE and store is not None:
        for changed in store.take(target):
            restored[changed.field_path] = changed.value

    hop = _Hop(
        kind=kind,
        direction=direction,
        source=source,
        target=target,
        store=store,
        restored=restored,
    )
    converted = _convert_record(kind.root, spec, "", hop)

    if hop.restored:
        logger.debug(
            "Discarding tracked values without a matching field",
            extra={"kind": kind.kind, "version": target, "field_paths": sorted(hop.restored)},
        )
    return converted


def convert_object(
    kind: KindDefinition, obj: Mapping[str, Any], path: ConversionPath
) -> dict[str, Any]:
    """Convert a whole object along ``path`` and return a new object.

    ``metadata`` and user-defined ``status`` fields are copied; the tracking
    data in ``status`` is updated when the kind enables tracking.
    """
    converted = copy.deepcopy(dict(obj))
    if path.is_noop or path.direction is None:
        return converted

    spec = converted.get("spec")
    if spec is None:
        raise ObjectShapeError('the object sent for conversion has no "spec" field')
    if not isinstance(spec, Mapping):
        raise ObjectShapeError(
            'the "spec" field of the object sent for conversion is not an object'
        )

    store = TrackingStore.from_status(converted.get("status")) if kind.tracking else None
    for source, target in path.hops():
        spec = convert_spec(kind, spec, path.direction, source, target, store)

    converted["spec"] = spec
    converted["apiVersion"] = kind.api_version(path.target)
    if store is not None:
        status = store.apply_to_status(converted.get("status"))
        if status is None:
            converted.pop("status", None)
        else:
            converted["status"] = status
    return converted


def _convert_record(
    record: RecordSchema, value: Mapping[str, Any], parent: str, hop: _Hop
) -> dict[str, Any]:
    registry = hop.kind.registry
    result: dict[str, Any] = {}

    for definition in record.fields:
        field_path = join_field_path(parent, definition.key)
        in_source = is_present(definition, hop.source, registry)
        in_target = is_present(definition, hop.target, registry)

        if in_source and in_target:
            if definition.key in value:
                result[definition.key] = _convert_value(
                    definition, value[definition.key], field_path, hop
                )
        elif in_target:
            _materialize_field(definition, field_path, result, hop)
        elif in_source and definition.key in value:
            _drop_field(definition, value[definition.key], field_path, hop)

    if record.preserve_unknown_fields:
        for key, item in value.items():
            if key not in record.keys:
                result[key] = copy.deepcopy(item)
    return result


def _materialize_field(
    definition: FieldDefinition, field_path: str, result: dict[str, Any], hop: _Hop
) -> None:
    # Only upgrades can restore: downgrades re-introducing a removed field are not tracked.
    if hop.direction == Direction.UPGRADE and field_path in hop.restored:
        result[definition.key] = hop.restored.pop(field_path)
    elif definition.has_default:
        result[definition.key] = copy.deepcopy(definition.default)


def _drop_field(definition: FieldDefinition, item: Any, field_path: str, hop: _Hop) -> None:
    # Upgrades dropping a removed field lose it; reverse tracking is unsupported.
    if hop.direction == Direction.DOWNGRADE and hop.store is not None:
        hop.store.record(hop.source, field_path, item)
    logger.debug(
        "Dropping field during %s",
        hop.direction.value,
        extra={"kind": hop.kind.kind, "field_path": field_path, "version": hop.target},
    )


def _convert_value(definition: FieldDefinition, item: Any, field_path: str, hop: _Hop) -> Any:
    if definition.record is None or item is None:
        return copy.deepcopy(item)

    nested = hop.kind.record(definition.record)
    if definition.is_list:
        if not isinstance(item, list):
            raise ObjectShapeError(f'field "{field_path}" must be a list')
        return [
            _convert_list_entry(nested, entry, join_field_path(field_path, index), hop)
            for index, entry in enumerate(item)
        ]
    if not isinstance(item, Mapping):
        raise ObjectShapeError(f'field "{field_path}" must be an object')
    return _convert_record(nested, item, field_path, hop)


def _convert_list_entry(record: RecordSchema, entry: Any, field_path: str, hop: _Hop) -> Any:
    if entry is None:
        return None
    if not isinstance(entry, Mapping):
        raise ObjectShapeError(f'field "{field_path}" must be an object')
    return _convert_record(record, entry, field_path, hop)
