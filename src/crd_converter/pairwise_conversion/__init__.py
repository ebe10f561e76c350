"""Pairwise conversion exports."""

from .pairwise_converter import ObjectShapeError, convert_object, convert_spec

__all__ = [
    "ObjectShapeError",
    "convert_object",
    "convert_spec",
]
