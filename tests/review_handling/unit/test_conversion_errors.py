"""Conversion error mapping tests."""

from __future__ import annotations

from crd_converter.change_tracking import TrackingStatusError
from crd_converter.conversion_paths import PathResolutionError
from crd_converter.pairwise_conversion import ObjectShapeError
from crd_converter.review_handling import (
    ConversionFailure,
    InvalidConversionReviewError,
    ObjectConversionError,
    ObjectParseError,
    ObjectSerializationError,
    http_status_code,
    join_errors,
)
from crd_converter.version_registry import UnknownVersionError


def test_client_errors_map_to_bad_request() -> None:
    for error in (
        InvalidConversionReviewError("bad"),
        ObjectParseError("bad"),
        ObjectShapeError("bad"),
        TrackingStatusError("bad"),
        UnknownVersionError("v9", ["v1"]),
    ):
        assert http_status_code(error) == 400


def test_internal_errors_map_to_server_error() -> None:
    for error in (
        ObjectSerializationError("bad"),
        PathResolutionError("bad"),
        RuntimeError("bad"),
    ):
        assert http_status_code(error) == 500


def test_join_errors_follows_cause_chain() -> None:
    try:
        try:
            raise ValueError("inner")
        except ValueError as exc:
            raise ObjectParseError("outer") from exc
    except ObjectParseError as exc:
        assert join_errors(exc) == "outer: inner"


def test_object_conversion_error_prefixes_index() -> None:
    error = ObjectConversionError(
        index=2, error=ObjectShapeError('field "tls" must be an object')
    )

    assert error.message == 'object 2: field "tls" must be an object'
    assert error.code == 400


def test_failure_from_object_errors_joins_messages_and_takes_highest_code() -> None:
    failure = ConversionFailure.from_object_errors(
        [
            ObjectConversionError(index=0, error=ObjectParseError("unknown kind")),
            ObjectConversionError(index=3, error=ObjectSerializationError("not serializable")),
        ]
    )

    assert failure.message == "object 0: unknown kind; object 3: not serializable"
    assert failure.code == 500
    assert str(failure) == failure.message
