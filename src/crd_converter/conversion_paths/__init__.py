"""Conversion path exports."""

from .path_models import ConversionPath, Direction
from .path_resolver import (
    PathResolutionError,
    conversion_paths,
    resolve_conversion_path,
    verify_conversion_path,
)

__all__ = [
    "ConversionPath",
    "Direction",
    "PathResolutionError",
    "conversion_paths",
    "resolve_conversion_path",
    "verify_conversion_path",
]
