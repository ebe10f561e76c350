"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from crd_converter.schema_management.schema_models import KindDefinition


@dataclass(frozen=True)
class TLSSettings:
    """Certificate and key served by the webhook; issuance happens elsewhere."""

    cert_file: Path
    key_file: Path


@dataclass(frozen=True)
class ServerSettings:
    """Webhook HTTP server settings."""

    host: str
    port: int
    tls: TLSSettings | None


@dataclass(frozen=True)
class ConversionSettings:
    """Conversion engine tuning."""

    parallelism: int


@dataclass(frozen=True)
class LoggingSettings:
    """Log level applied by the CLI."""

    level: str


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path
    server: ServerSettings
    conversion: ConversionSettings
    logging: LoggingSettings
    kinds: tuple[KindDefinition, ...]

    def kind(self, name: str) -> KindDefinition:
        """Return the kind definition named ``name`` (case-insensitive).

        Raises:
          KeyError: If no such kind is configured.
        """
        for definition in self.kinds:
            if definition.kind.lower() == name.lower():
                return definition
        raise KeyError(name)
