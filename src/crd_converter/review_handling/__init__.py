"""Review handling exports."""

from .conversion_errors import (
    ConversionFailure,
    InvalidConversionReviewError,
    ObjectConversionError,
    ObjectParseError,
    ObjectSerializationError,
    http_status_code,
    join_errors,
)
from .review_contracts import (
    CONVERSION_REVIEW_KIND,
    DEFAULT_REVIEW_API_VERSION,
    ConversionRequest,
    failure_review,
    parse_conversion_review,
    success_review,
)
from .review_handler import ConversionReviewHandler

__all__ = [
    "CONVERSION_REVIEW_KIND",
    "DEFAULT_REVIEW_API_VERSION",
    "ConversionFailure",
    "ConversionRequest",
    "ConversionReviewHandler",
    "InvalidConversionReviewError",
    "ObjectConversionError",
    "ObjectParseError",
    "ObjectSerializationError",
    "failure_review",
    "http_status_code",
    "join_errors",
    "parse_conversion_review",
    "success_review",
]
