"""Conversion error taxonomy and status code mapping."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from crd_converter.change_tracking import TrackingStatusError
from crd_converter.pairwise_conversion import ObjectShapeError
from crd_converter.version_registry import UnknownVersionError

BAD_REQUEST = 400
INTERNAL_SERVER_ERROR = 500

_CLIENT_ERRORS = (UnknownVersionError, ObjectShapeError, TrackingStatusError)


class InvalidConversionReviewError(Exception):
    """Raised when the ConversionReview envelope itself cannot be parsed.

    ``uid`` and ``api_version`` are kept when they could be read, so the
    failure response can still be correlated with the request.
    """

    def __init__(
        self, message: str, *, uid: str | None = None, api_version: str | None = None
    ) -> None:
        super().__init__(message)
        self.uid = uid
        self.api_version = api_version


class ObjectParseError(Exception):
    """Raised when an object's kind or apiVersion cannot be identified."""


class ObjectSerializationError(Exception):
    """Raised when a converted object cannot be serialized back to JSON."""


@dataclass(frozen=True)
class ObjectConversionError:
    """Failure of one object in a batch."""

    index: int
    error: Exception

    @property
    def code(self) -> int:
        return http_status_code(self.error)

    @property
    def message(self) -> str:
        return f"object {self.index}: {join_errors(self.error)}"


class ConversionFailure(Exception):
    """Raised when a batch cannot be converted as a whole."""

    def __init__(self, message: str, code: int) -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    @classmethod
    def from_object_errors(cls, errors: Sequence[ObjectConversionError]) -> ConversionFailure:
        message = "; ".join(error.message for error in errors)
        code = max(error.code for error in errors)
        return cls(message, code)


def http_status_code(error: BaseException) -> int:
    """Map an error to the HTTP-style status code reported to the API server.

    Malformed input maps to 400; serialization and path resolution failures
    as well as anything unexpected are internal errors.
    """
    if isinstance(error, (InvalidConversionReviewError, ObjectParseError, *_CLIENT_ERRORS)):
        return BAD_REQUEST
    return INTERNAL_SERVER_ERROR


def join_errors(error: BaseException) -> str:
    """Join the messages of an error and its causes, outermost first."""
    messages: list[str] = []
    current: BaseException | None = error
    while current is not None:
        text = str(current)
        if text and text not in messages:
            messages.append(text)
        current = current.__cause__
    return ": ".join(messages)
