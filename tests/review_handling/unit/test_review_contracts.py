"""ConversionReview contract tests."""

from __future__ import annotations

import json
from typing import Any

import pytest
from crd_converter.review_handling import (
    InvalidConversionReviewError,
    failure_review,
    parse_conversion_review,
    success_review,
)


def _review(**request_overrides: Any) -> dict[str, Any]:
    request: dict[str, Any] = {
        "uid": "705ab4f5",
        "desiredAPIVersion": "networking.example.com/v1",
        "objects": [{"kind": "Gateway"}],
    }
    request.update(request_overrides)
    return {
        "apiVersion": "apiextensions.k8s.io/v1",
        "kind": "ConversionReview",
        "request": request,
    }


def test_parses_review_from_bytes() -> None:
    request = parse_conversion_review(json.dumps(_review()).encode("utf-8"))

    assert request.api_version == "apiextensions.k8s.io/v1"
    assert request.uid == "705ab4f5"
    assert request.desired_api_version == "networking.example.com/v1"
    assert request.objects == ({"kind": "Gateway"},)


def test_parses_review_from_mapping_and_text() -> None:
    from_mapping = parse_conversion_review(_review(objects=[]))
    from_text = parse_conversion_review(json.dumps(_review(objects=[])))

    assert from_mapping == from_text
    assert from_mapping.objects == ()


def test_rejects_undecodable_payload() -> None:
    with pytest.raises(InvalidConversionReviewError, match="failed to parse ConversionReview"):
        parse_conversion_review(b"{not json")


def test_rejects_non_object_payload() -> None:
    with pytest.raises(InvalidConversionReviewError, match="must be a JSON object"):
        parse_conversion_review(b"[]")


def test_rejects_wrong_review_kind() -> None:
    review = _review()
    review["kind"] = "AdmissionReview"

    with pytest.raises(InvalidConversionReviewError, match="expected kind") as exc_info:
        parse_conversion_review(review)

    assert exc_info.value.api_version == "apiextensions.k8s.io/v1"
    assert exc_info.value.uid is None


def test_rejects_missing_request() -> None:
    review = _review()
    del review["request"]

    with pytest.raises(InvalidConversionReviewError, match='has no "request"'):
        parse_conversion_review(review)


def test_rejects_missing_uid() -> None:
    with pytest.raises(InvalidConversionReviewError, match='has no "uid"'):
        parse_conversion_review(_review(uid=""))


def test_missing_desired_version_keeps_uid_for_correlation() -> None:
    with pytest.raises(InvalidConversionReviewError, match="desiredAPIVersion") as exc_info:
        parse_conversion_review(_review(desiredAPIVersion=None))

    assert exc_info.value.uid == "705ab4f5"


def test_rejects_objects_that_are_not_a_list() -> None:
    with pytest.raises(InvalidConversionReviewError, match="must be a list"):
        parse_conversion_review(_review(objects="Gateway"))


def test_success_review_shape() -> None:
    review = success_review("apiextensions.k8s.io/v1", "uid-1", [{"kind": "Gateway"}])

    assert review == {
        "apiVersion": "apiextensions.k8s.io/v1",
        "kind": "ConversionReview",
        "response": {
            "uid": "uid-1",
            "result": {"status": "Success"},
            "convertedObjects": [{"kind": "Gateway"}],
        },
    }


def test_failure_review_shape() -> None:
    review = failure_review("apiextensions.k8s.io/v1", "uid-1", "object 0: broken", 400)

    assert review["response"] == {
        "uid": "uid-1",
        "result": {
            "status": "Failure",
            "message": "object 0: broken",
            "reason": "object 0: broken",
            "code": 400,
        },
        "convertedObjects": [],
    }
