"""Version registry tests."""

from __future__ import annotations

import pytest
from crd_converter.version_registry import RegistryError, UnknownVersionError, VersionRegistry

VERSIONS = ("v1alpha1", "v1alpha2", "v1beta1", "v1")


def test_registry_exposes_declared_order() -> None:
    registry = VersionRegistry(VERSIONS)

    assert registry.all() == VERSIONS
    assert len(registry) == 4
    assert registry.earliest == "v1alpha1"
    assert registry.latest == "v1"
    assert [registry.ordinal(version) for version in VERSIONS] == [0, 1, 2, 3]


def test_registry_membership() -> None:
    registry = VersionRegistry(VERSIONS)

    assert "v1beta1" in registry
    assert registry.contains("v1")
    assert "v2" not in registry
    assert not registry.contains("v1beta2")


def test_neighbors_at_chain_boundaries() -> None:
    registry = VersionRegistry(VERSIONS)

    assert registry.neighbors("v1alpha1") == (None, "v1alpha2")
    assert registry.neighbors("v1alpha2") == ("v1alpha1", "v1beta1")
    assert registry.neighbors("v1") == ("v1beta1", None)


def test_single_version_registry_has_no_neighbors() -> None:
    registry = VersionRegistry(["v1"])

    assert registry.neighbors("v1") == (None, None)
    assert registry.earliest == registry.latest == "v1"


def test_is_before_follows_declaration_order() -> None:
    registry = VersionRegistry(VERSIONS)

    assert registry.is_before("v1alpha1", "v1")
    assert not registry.is_before("v1", "v1beta1")
    assert not registry.is_before("v1", "v1")


def test_unknown_version_error_lists_known_versions() -> None:
    registry = VersionRegistry(VERSIONS)

    with pytest.raises(UnknownVersionError) as exc_info:
        registry.ordinal("v2")

    assert exc_info.value.version == "v2"
    assert exc_info.value.known_versions == VERSIONS
    assert 'the resource version "v2" is not known' in str(exc_info.value)
    assert "v1alpha1, v1alpha2, v1beta1, v1" in str(exc_info.value)


def test_registry_requires_at_least_one_version() -> None:
    with pytest.raises(RegistryError, match="at least one version"):
        VersionRegistry([])


def test_registry_rejects_duplicates() -> None:
    with pytest.raises(RegistryError, match="Duplicate version 'v1alpha1'"):
        VersionRegistry(["v1alpha1", "v1alpha1", "v1"])


def test_registry_rejects_invalid_names() -> None:
    with pytest.raises(RegistryError, match="Invalid version 'stable'"):
        VersionRegistry(["v1alpha1", "stable"])


def test_registry_rejects_versions_out_of_order() -> None:
    with pytest.raises(RegistryError, match="'v1beta1' cannot follow 'v1'"):
        VersionRegistry(["v1alpha1", "v1", "v1beta1"])
