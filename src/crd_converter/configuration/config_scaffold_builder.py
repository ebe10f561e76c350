"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "crd-converter.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Configuration template for crd-converter.
# Replace every <REQUIRED> placeholder before running validate, convert or serve.
# Remove or fill <OPTIONAL> entries only when your setup needs them.

server:
  host: "0.0.0.0"
  port: 8443
  # Certificates are issued and rotated outside crd-converter.
  # tls:
  #   cert_file: "<OPTIONAL>"
  #   key_file: "<OPTIONAL>"

conversion:
  # Number of objects of one ConversionReview converted concurrently.
  parallelism: 1

logging:
  level: "INFO"

kinds:
  # Either define a kind inline or point to a file with `- path: kinds/foo.yaml`.
  - kind: "<REQUIRED>"
    group: "<REQUIRED>"
    # Versions in chronological order, oldest first.
    versions:
      - "v1alpha1"
      - "v1"
    # Keep values dropped by downgrades in status.changedValues.
    tracking: true
    # Record describing the spec of the resource.
    spec: "<REQUIRED>"
    records:
      "<REQUIRED>":
        preserve_unknown_fields: false
        fields:
          - name: "<REQUIRED>"
          # - name: "<OPTIONAL>"
          #   key: "<OPTIONAL>"
          #   added: "v1"
          #   removed: "<OPTIONAL>"
          #   default: "<OPTIONAL>"
          #   record: "<OPTIONAL>"
          #   list: false
"""


def build_placeholder_configuration() -> str:
    """Build a YAML configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
