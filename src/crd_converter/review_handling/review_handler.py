"""ConversionReview handling service."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

from crd_converter.change_tracking import TrackingStatusError
from crd_converter.conversion_paths import (
    ConversionPath,
    PathResolutionError,
    resolve_conversion_path,
    verify_conversion_path,
)
from crd_converter.pairwise_conversion import ObjectShapeError, convert_object
from crd_converter.schema_management import KindDefinition
from crd_converter.version_registry import UnknownVersionError

from .conversion_errors import (
    BAD_REQUEST,
    ConversionFailure,
    InvalidConversionReviewError,
    ObjectConversionError,
    ObjectParseError,
    ObjectSerializationError,
    join_errors,
)
from .review_contracts import (
    DEFAULT_REVIEW_API_VERSION,
    failure_review,
    parse_conversion_review,
    success_review,
)

logger = logging.getLogger(__name__)

_OBJECT_ERRORS = (
    ObjectParseError,
    ObjectShapeError,
    ObjectSerializationError,
    PathResolutionError,
    TrackingStatusError,
)


@dataclass(frozen=True)
class _ObjectOutcome:
    """Result of converting one object of a batch."""

    converted: dict[str, Any] | None = None
    error: ObjectConversionError | None = None


class ConversionReviewHandler:
    """Converts the objects of a ConversionReview for one resource kind.

    The handler holds only read-only state and can serve concurrent requests.
    """

    def __init__(self, kind_definition: KindDefinition, *, parallelism: int = 1) -> None:
        self._kind = kind_definition
        self._parallelism = max(1, parallelism)

    @property
    def kind(self) -> str:
        return self._kind.kind

    @property
    def kind_definition(self) -> KindDefinition:
        return self._kind

    @property
    def parallelism(self) -> int:
        return self._parallelism

    def handle(self, payload: bytes | str | Mapping[str, Any]) -> dict[str, Any]:
        """Answer a ConversionReview; failures are reported inside the review."""
        try:
            request = parse_conversion_review(payload)
        except InvalidConversionReviewError as exc:
            logger.warning("Received invalid conversion review: %s", exc)
            return failure_review(
                exc.api_version or DEFAULT_REVIEW_API_VERSION,
                exc.uid or "",
                str(exc),
                BAD_REQUEST,
            )

        try:
            converted_objects = self.convert_objects(request.objects, request.desired_api_version)
        except ConversionFailure as exc:
            logger.warning(
                "Failed to convert objects of kind %s: %s",
                self._kind.kind,
                exc.message,
                extra={"uid": request.uid, "code": exc.code},
            )
            return failure_review(request.api_version, request.uid, exc.message, exc.code)

        logger.debug(
            "Successfully converted objects",
            extra={
                "kind": self._kind.kind,
                "converted_object_count": len(converted_objects),
                "desired_api_version": request.desired_api_version,
            },
        )
        return success_review(request.api_version, request.uid, converted_objects)

    def convert_objects(
        self, objects: Sequence[Any], desired_api_version: str
    ) -> list[dict[str, Any]]:
        """Convert every object to ``desired_api_version``, all or nothing.

        Raises:
          ConversionFailure: If the desired version is unknown or any object fails.
        """
        try:
            desired = self._kind.version_from_api_version(desired_api_version)
        except UnknownVersionError as exc:
            message = (
                f'failed to parse desired resource version "{desired_api_version}": {exc}'
            )
            raise ConversionFailure(message, BAD_REQUEST) from exc

        if self._parallelism > 1 and len(objects) > 1:
            workers = min(self._parallelism, len(objects))
            with ThreadPoolExecutor(max_workers=workers) as executor:
                outcomes = list(
                    executor.map(
                        lambda item: self._convert_one(item[0], item[1], desired),
                        enumerate(objects),
                    )
                )
        else:
            outcomes = [
                self._convert_one(index, obj, desired) for index, obj in enumerate(objects)
            ]

        errors = [outcome.error for outcome in outcomes if outcome.error is not None]
        if errors:
            raise ConversionFailure.from_object_errors(errors)
        return [outcome.converted for outcome in outcomes if outcome.converted is not None]

    def _convert_one(self, index: int, obj: Any, desired: str) -> _ObjectOutcome:
        try:
            current = self._identify_version(obj)
            path = self._resolve_path(current, desired)
            converted = _reserialize(convert_object(self._kind, obj, path), self._kind.kind)
        except _OBJECT_ERRORS as exc:
            error = ObjectConversionError(index=index, error=exc)
            logger.debug("Object %d failed to convert: %s", index, join_errors(exc))
            return _ObjectOutcome(error=error)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.exception("Unexpected error while converting object %d", index)
            return _ObjectOutcome(error=ObjectConversionError(index=index, error=exc))

        logger.debug(
            "Successfully converted object",
            extra={
                "kind": self._kind.kind,
                "api_version": self._kind.api_version(current),
                "desired_api_version": self._kind.api_version(desired),
                "steps": len(path.steps),
            },
        )
        return _ObjectOutcome(converted=converted)

    def _identify_version(self, obj: Any) -> str:
        if not isinstance(obj, Mapping):
            raise ObjectParseError("the object sent for conversion is not a JSON object")

        kind = _require_string_field(obj, "kind")
        # A wrong kind would otherwise write tracking data into a foreign status.
        if kind != self._kind.kind:
            raise ObjectParseError(
                f'I was asked to convert the kind "{kind}", but I can only convert '
                f'objects of kind "{self._kind.kind}"'
            )

        api_version = _require_string_field(obj, "apiVersion")
        try:
            return self._kind.version_from_api_version(api_version)
        except UnknownVersionError as exc:
            raise ObjectParseError(
                f'failed to parse current resource version "{api_version}"'
            ) from exc

    def _resolve_path(self, current: str, desired: str) -> ConversionPath:
        registry = self._kind.registry
        try:
            path = resolve_conversion_path(registry, current, desired)
        except UnknownVersionError as exc:
            raise PathResolutionError(
                f'no conversion path from "{current}" to "{desired}"'
            ) from exc
        verify_conversion_path(registry, path)
        return path


def _require_string_field(obj: Mapping[str, Any], field_name: str) -> str:
    if field_name not in obj:
        raise ObjectParseError(f'the object sent for conversion has no "{field_name}" field')
    value = obj[field_name]
    if not isinstance(value, str):
        raise ObjectParseError(
            f'the "{field_name}" field of the object sent for conversion is not a string'
        )
    return value


def _reserialize(converted: dict[str, Any], kind: str) -> dict[str, Any]:
    try:
        return json.loads(json.dumps(converted, allow_nan=False))
    except (TypeError, ValueError) as exc:
        raise ObjectSerializationError(f'failed to serialize object of kind "{kind}"') from exc
