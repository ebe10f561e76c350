"""Command line interface entry point."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from crd_converter.configuration import (
    DEFAULT_CONFIG_FILENAME,
    Configuration,
    ConfigurationError,
    load_configuration,
    write_placeholder_configuration,
)
from crd_converter.conversion_paths import conversion_paths
from crd_converter.review_handling import ConversionReviewHandler
from crd_converter.review_handling.review_contracts import STATUS_FAILURE
from crd_converter.schema_management import KindDefinition, describe_version_schema
from crd_converter.webhook_serving import create_app_from_configuration, serve_webhook

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="crd-converter")
@click.option(
    "--log-level",
    "log_level",
    required=False,
    default=None,
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    help="Override the log level from the configuration file",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """Multi-version custom resource conversion webhook."""
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level.upper() if log_level else None


config_option = click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the YAML converter configuration file",
)
kind_option = click.option(
    "--kind",
    "kind_name",
    required=True,
    help="Resource kind as named in the configuration",
)


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="validate")
@config_option
@click.pass_context
def validate(ctx: click.Context, config_path: str) -> None:
    """Validate the configuration and list every kind with its version chain."""
    configuration = _load(ctx, config_path)
    for kind in configuration.kinds:
        click.echo(f"{kind.kind} ({kind.group or 'core'}): {' -> '.join(kind.registry.all())}")


@cli.command(name="paths")
@config_option
@kind_option
@click.pass_context
def paths(ctx: click.Context, config_path: str, kind_name: str) -> None:
    """Print every conversion path of a kind."""
    kind = _select_kind(_load(ctx, config_path), kind_name)
    for path in conversion_paths(kind.registry):
        direction = path.direction.value if path.direction else "no-op"
        click.echo(f"{path.source} -> {path.target} [{direction}]: {', '.join(path.steps)}")


@cli.command(name="schema")
@config_option
@kind_option
@click.option("--version", "version", required=True, help="Version to describe")
@click.pass_context
def schema(ctx: click.Context, config_path: str, kind_name: str, version: str) -> None:
    """Print the fields of every record of a kind in one version."""
    kind = _select_kind(_load(ctx, config_path), kind_name)
    if not kind.registry.contains(version):
        raise CliError(f"Unknown version '{version}' for kind {kind.kind}.")
    for record, fields in describe_version_schema(kind, version).items():
        click.echo(f"{record}:")
        for key, status in fields:
            click.echo(f"  {key} ({status.value})")


@cli.command(name="convert")
@config_option
@kind_option
@click.option(
    "--input",
    "input_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to a ConversionReview JSON document",
)
@click.option(
    "--output",
    "output_path",
    required=False,
    type=click.Path(path_type=str),
    help="Optional path for the response ConversionReview; printed when omitted",
)
@click.pass_context
def convert(
    ctx: click.Context,
    config_path: str,
    kind_name: str,
    input_path: str,
    output_path: str | None,
) -> None:
    """Run one ConversionReview document through the converter."""
    configuration = _load(ctx, config_path)
    kind = _select_kind(configuration, kind_name)
    try:
        payload = Path(input_path).read_bytes()
    except OSError as exc:
        raise CliError(str(exc)) from exc

    handler = ConversionReviewHandler(kind, parallelism=configuration.conversion.parallelism)
    review = handler.handle(payload)
    rendered = json.dumps(review, indent=2)

    if output_path is None:
        click.echo(rendered)
    else:
        try:
            Path(output_path).write_text(rendered + "\n", encoding="utf-8")
        except OSError as exc:
            raise CliError(str(exc)) from exc
        click.echo(str(Path(output_path).resolve()))

    result = review["response"]["result"]
    if result["status"] == STATUS_FAILURE:
        raise CliError(f"Conversion failed ({result['code']}): {result['message']}")


@cli.command(name="serve")
@config_option
@click.pass_context
def serve(ctx: click.Context, config_path: str) -> None:
    """Serve the conversion webhook over HTTP(S)."""
    configuration = _load(ctx, config_path)
    app = create_app_from_configuration(configuration)
    serve_webhook(app, configuration.server, _effective_log_level(ctx, configuration))


def _load(ctx: click.Context, config_path: str) -> Configuration:
    try:
        configuration = load_configuration(config_path)
    except ConfigurationError as exc:
        raise CliError(str(exc)) from exc
    _configure_logging(_effective_log_level(ctx, configuration))
    logger.debug("Loaded configuration from %s", configuration.path)
    return configuration


def _select_kind(configuration: Configuration, kind_name: str) -> KindDefinition:
    try:
        return configuration.kind(kind_name)
    except KeyError as exc:
        known = ", ".join(kind.kind for kind in configuration.kinds)
        raise CliError(f"Unknown kind '{kind_name}' (configured kinds: {known}).") from exc


def _effective_log_level(ctx: click.Context, configuration: Configuration) -> str:
    override = (ctx.obj or {}).get("log_level")
    return override or configuration.logging.level


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("crd_converter").setLevel(level)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
