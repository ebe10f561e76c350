"""Configuration loader tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from crd_converter.configuration.loader import ConfigurationError, load_configuration

_INLINE_KIND = """
  - kind: Widget
    group: example.com
    versions: [v1alpha1, v1]
    spec: WidgetSpec
    records:
      WidgetSpec:
        fields:
          - size
          - name: color
            added: v1
            default: blue
"""


def _project_root() -> Path:
    return Path(__file__).resolve().parents[3]


def _write_file(path: Path, contents: str) -> Path:
    path.write_text(contents, encoding="utf-8")
    return path


def test_loads_sample_configuration_with_kind_file() -> None:
    config_path = _project_root() / "samples" / "config.yaml"

    configuration = load_configuration(config_path)

    assert configuration.path == config_path
    assert configuration.server.host == "0.0.0.0"
    assert configuration.server.port == 8443
    assert configuration.server.tls is None
    assert configuration.conversion.parallelism == 2
    assert configuration.logging.level == "INFO"
    assert [kind.kind for kind in configuration.kinds] == ["Gateway"]
    assert configuration.kind("gateway").group == "networking.example.com"


def test_loads_inline_kind_with_defaults(tmp_path: Path) -> None:
    config_path = _write_file(tmp_path / "config.yaml", "kinds:" + _INLINE_KIND)

    configuration = load_configuration(config_path)

    assert configuration.server.host == "0.0.0.0"
    assert configuration.server.port == 8443
    assert configuration.conversion.parallelism == 1
    assert configuration.logging.level == "INFO"
    widget = configuration.kind("Widget")
    assert widget.registry.all() == ("v1alpha1", "v1")
    assert widget.root.fields[1].default == "blue"


def test_loads_json_configuration(tmp_path: Path) -> None:
    kind = {
        "kind": "Widget",
        "versions": ["v1"],
        "spec": "WidgetSpec",
        "records": {"WidgetSpec": {"fields": ["size"]}},
    }
    config_path = _write_file(
        tmp_path / "config.json",
        json.dumps({"logging": {"level": "debug"}, "kinds": [kind]}),
    )

    configuration = load_configuration(config_path)

    assert configuration.logging.level == "DEBUG"
    assert configuration.kind("widget").group == ""


def test_resolves_tls_paths_relative_to_configuration(tmp_path: Path) -> None:
    config_path = _write_file(
        tmp_path / "config.yaml",
        """
server:
  host: 127.0.0.1
  port: 9443
  tls:
    cert_file: certs/tls.crt
    key_file: /etc/webhook/tls.key
kinds:"""
        + _INLINE_KIND,
    )

    configuration = load_configuration(config_path)

    assert configuration.server.host == "127.0.0.1"
    assert configuration.server.port == 9443
    assert configuration.server.tls is not None
    assert configuration.server.tls.cert_file == (tmp_path / "certs" / "tls.crt").resolve()
    assert configuration.server.tls.key_file == Path("/etc/webhook/tls.key")


def test_unknown_kind_lookup_raises_key_error(tmp_path: Path) -> None:
    configuration = load_configuration(_write_file(tmp_path / "c.yaml", "kinds:" + _INLINE_KIND))

    with pytest.raises(KeyError):
        configuration.kind("Gateway")


def test_missing_file_is_reported(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Configuration file not found"):
        load_configuration(tmp_path / "missing.yaml")


def test_invalid_yaml_is_reported(tmp_path: Path) -> None:
    config_path = _write_file(tmp_path / "config.yaml", "kinds: [unclosed")

    with pytest.raises(ConfigurationError, match="Failed to parse configuration file"):
        load_configuration(config_path)


@pytest.mark.parametrize(
    ("contents", "message"),
    [
        ("- kinds", "root must be a mapping"),
        ("", "must list at least one kind"),
        ("kinds: []", "must list at least one kind"),
        ("server: 8443\nkinds:" + _INLINE_KIND, "'server' must be a mapping"),
        ("server:\n  port: 0\nkinds:" + _INLINE_KIND, "server.port must be greater than zero"),
        ("server:\n  port: 70000\nkinds:" + _INLINE_KIND, "server.port must be at most 65535"),
        ("server:\n  port: true\nkinds:" + _INLINE_KIND, "server.port must be an integer"),
        ("server:\n  host: ' '\nkinds:" + _INLINE_KIND, "server.host must not be empty"),
        (
            "server:\n  tls:\n    cert_file: a.crt\nkinds:" + _INLINE_KIND,
            "server.tls.key_file must be a string",
        ),
        (
            "conversion:\n  parallelism: 0\nkinds:" + _INLINE_KIND,
            "conversion.parallelism must be greater than zero",
        ),
        ("logging:\n  level: verbose\nkinds:" + _INLINE_KIND, "logging.level must be one of"),
        ("kinds:" + _INLINE_KIND + _INLINE_KIND, "Kind 'Widget' is configured more than once"),
        ("kinds:\n  - kind: Widget\n    versions: [v1]\n", "Widget: records must be a mapping"),
        ("kinds:\n  - path: a.yaml\n    kind: Widget\n", "must not define other keys"),
        ("kinds:\n  - path: 3\n", "Kind definition path must be a string"),
        ("kinds:\n  - path: missing.yaml\n", "Kind definition file not found"),
    ],
)
def test_invalid_configuration_is_rejected(tmp_path: Path, contents: str, message: str) -> None:
    config_path = _write_file(tmp_path / "config.yaml", contents)

    with pytest.raises(ConfigurationError, match=message):
        load_configuration(config_path)
