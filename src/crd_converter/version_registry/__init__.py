"""Version registry exports."""

from .version_models import (
    KubernetesVersion,
    StabilityLevel,
    VersionError,
    parse_kubernetes_version,
)
from .version_registry import RegistryError, UnknownVersionError, VersionRegistry

__all__ = [
    "KubernetesVersion",
    "StabilityLevel",
    "VersionError",
    "parse_kubernetes_version",
    "RegistryError",
    "UnknownVersionError",
    "VersionRegistry",
]
