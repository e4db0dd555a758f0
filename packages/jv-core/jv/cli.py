"""CLI — validate instances and check schemas."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import typer

from jv import _config

app = typer.Typer(name="jv", help="JSON Schema Draft 2020-12 validator")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else _config.get_log_level()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@app.command()
def validate(
    schema_path: Path = typer.Argument(..., help="Path to the schema (JSON or YAML)"),
    instance_path: Path = typer.Argument(..., help="Path to the instance (JSON or YAML)"),
    output: str = typer.Option(None, "--output", "-o", help="Output level: flag, basic, detailed or verbose"),
    remote: Path = typer.Option(None, "--remote", help="Directory of pre-registered remote schemas"),
    remote_base: str = typer.Option(None, "--remote-base", help="Base URI the --remote directory is published under"),
    formats: bool = typer.Option(False, "--formats", help="Assert the built-in formats"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Validate an instance document against a schema."""
    import yaml

    from jv.models.issues import SchemaIssue
    from jv.models.results import OutputLevel
    from jv.runner.context import Context, FileSchemaStore
    from jv.runner.engine import validate as run_validation
    from jv.runner.formats import default_formats
    from jv.runner.output import render_output
    from jv.utils.yaml_io import load_document

    try:
        _setup_logging(verbose)
        level = OutputLevel(output) if output else _config.get_output_level()
        assert_formats = formats or _config.get_assert_formats()
        if remote is not None and not remote_base:
            raise ValueError("--remote requires --remote-base")
        schema = load_document(schema_path)
        instance = load_document(instance_path)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)

    context = Context(
        remote_store=FileSchemaStore(remote, remote_base) if remote is not None else None,
        formats=default_formats() if assert_formats else None,
    )
    try:
        result = run_validation(schema, instance, context=context, base_uri=schema_path.resolve().as_uri())
    except SchemaIssue as exc:
        typer.echo(f"Invalid schema: {exc}", err=True)
        raise typer.Exit(1)

    typer.echo(json.dumps(render_output(result, level), indent=2))
    if not result.valid:
        raise typer.Exit(1)


@app.command("check-schema")
def check_schema(
    schema_path: Path = typer.Argument(..., help="Path to the schema (JSON or YAML)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Validate a schema document against the Draft 2020-12 meta-schema."""
    import yaml

    from jv.compiler.dialect import Dialect
    from jv.runner.output import render_output
    from jv.utils.yaml_io import load_document

    try:
        _setup_logging(verbose)
        raw = load_document(schema_path)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)

    dialect = Dialect.draft2020_12
    if isinstance(raw, dict) and isinstance(raw.get("$schema"), str):
        dialect = Dialect.from_uri(raw["$schema"]) or dialect
    result = dialect.validate_schema(raw)
    if not result.valid:
        typer.echo("Schema errors:", err=True)
        typer.echo(json.dumps(render_output(result, "basic"), indent=2), err=True)
        raise typer.Exit(1)

    typer.echo("OK — schema is valid")


if __name__ == "__main__":
    app()
