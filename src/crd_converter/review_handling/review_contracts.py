"""ConversionReview wire contracts."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .conversion_errors import InvalidConversionReviewError

CONVERSION_REVIEW_KIND = "ConversionReview"
DEFAULT_REVIEW_API_VERSION = "apiextensions.k8s.io/v1"
STATUS_SUCCESS = "Success"
STATUS_FAILURE = "Failure"


@dataclass(frozen=True)
class ConversionRequest:
    """Parsed ``request`` section of a ConversionReview."""

    api_version: str
    uid: str
    desired_api_version: str
    objects: tuple[Any, ...]


def parse_conversion_review(payload: bytes | str | Mapping[str, Any]) -> ConversionRequest:
    """Parse a ConversionReview document into a conversion request.

    Raises:
      InvalidConversionReviewError: If the review envelope is malformed.
    """
    review = _decode(payload)
    api_version = review.get("apiVersion")
    if not isinstance(api_version, str) or not api_version:
        raise InvalidConversionReviewError('the ConversionReview has no "apiVersion"')
    if review.get("kind") != CONVERSION_REVIEW_KIND:
        raise InvalidConversionReviewError(
            f'expected kind "{CONVERSION_REVIEW_KIND}", got {review.get("kind")!r}',
            api_version=api_version,
        )

    request = review.get("request")
    if not isinstance(request, Mapping):
        raise InvalidConversionReviewError(
            'the ConversionReview has no "request"', api_version=api_version
        )
    uid = request.get("uid")
    if not isinstance(uid, str) or not uid:
        raise InvalidConversionReviewError(
            'the conversion request has no "uid"', api_version=api_version
        )
    desired_api_version = request.get("desiredAPIVersion")
    if not isinstance(desired_api_version, str) or not desired_api_version:
        raise InvalidConversionReviewError(
            'the conversion request has no "desiredAPIVersion"',
            uid=uid,
            api_version=api_version,
        )
    objects = request.get("objects")
    if not isinstance(objects, Sequence) or isinstance(objects, (str, bytes)):
        raise InvalidConversionReviewError(
            'the "objects" of the conversion request must be a list',
            uid=uid,
            api_version=api_version,
        )

    return ConversionRequest(
        api_version=api_version,
        uid=uid,
        desired_api_version=desired_api_version,
        objects=tuple(objects),
    )


def success_review(api_version: str, uid: str, converted_objects: Sequence[Any]) -> dict[str, Any]:
    return {
        "apiVersion": api_version,
        "kind": CONVERSION_REVIEW_KIND,
        "response": {
            "uid": uid,
            "result": {"status": STATUS_SUCCESS},
            "convertedObjects": list(converted_objects),
        },
    }


def failure_review(api_version: str, uid: str, message: str, code: int) -> dict[str, Any]:
    return {
        "apiVersion": api_version,
        "kind": CONVERSION_REVIEW_KIND,
        "response": {
            "uid": uid,
            "result": {
                "status": STATUS_FAILURE,
                "message": message,
                "reason": message,
                "code": code,
            },
            "convertedObjects": [],
        },
    }


def _decode(payload: bytes | str | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(payload, Mapping):
        return payload
    try:
        review = json.loads(payload)
    except ValueError as exc:
        raise InvalidConversionReviewError(f"failed to parse ConversionReview: {exc}") from exc
    except RecursionError as exc:
        raise InvalidConversionReviewError(
            "failed to parse ConversionReview: the document is nested too deeply"
        ) from exc
    if not isinstance(review, Mapping):
        raise InvalidConversionReviewError("the ConversionReview must be a JSON object")
    return review
