# src/pipewright/cli.py
"""Pipewright Command Line Interface.

Entry point for the pipewright CLI tool. Compiles workflow graph files
locally; the compiled definition goes to stdout (or --output), logs and
diagnostics go to stderr.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
import yaml
from dynaconf.vendor.ruamel.yaml.parser import ParserError as YamlParserError
from dynaconf.vendor.ruamel.yaml.scanner import ScannerError as YamlScannerError
from pydantic import ValidationError

from pipewright import __version__
from pipewright.compiler import (
    CompilationResult,
    SemanticValidationError,
    ValidationIssue,
    WorkflowCompilationError,
    compile_workflow,
)
from pipewright.contracts.ports import describe_port_type
from pipewright.core.config import CompilerSettings, load_settings
from pipewright.plugins.catalog import load_component_catalog
from pipewright.plugins.manager import ComponentRegistry

__all__ = [
    "app",
]

app = typer.Typer(
    name="pipewright",
    help="Pipewright: compile visual workflow graphs into executable definitions.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"pipewright version {__version__}")
        raise typer.Exit()


def _load_dotenv(env_file: Path | None = None) -> bool:
    """Load environment variables from .env file.

    Args:
        env_file: Explicit path to .env file. If None, searches for .env
                 in current directory and parent directories.

    Returns:
        True if .env was found and loaded, False otherwise.

    Raises:
        typer.Exit: If explicit env_file path doesn't exist.
    """
    from dotenv import load_dotenv

    if env_file is not None:
        if not env_file.exists():
            typer.secho(
                f"Error: .env file not found: {env_file}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(1)
        return load_dotenv(env_file, override=False)

    return load_dotenv(override=False)  # Don't override existing env vars


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_dotenv: bool = typer.Option(
        False,
        "--no-dotenv",
        help="Skip loading .env file.",
    ),
    env_file: Path | None = typer.Option(
        None,
        "--env-file",
        help="Path to .env file (skips automatic search).",
        exists=False,  # We handle existence check ourselves for better error message
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose/debug logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """Pipewright: compile visual workflow graphs into executable definitions."""
    from pipewright.core.logging import configure_logging

    log_level = "DEBUG" if verbose else "WARNING"
    configure_logging(json_output=json_logs, level=log_level)

    if not no_dotenv:
        _load_dotenv(env_file=env_file)
    elif env_file is not None:
        typer.secho(
            "Warning: --env-file ignored because --no-dotenv is set.",
            fg=typer.colors.YELLOW,
            err=True,
        )


# === Shared loading helpers ===


def _read_graph(path: Path) -> Any:
    """Read a graph file (JSON, or YAML by extension).

    Raises:
        typer.Exit: If the file is missing or not parseable
    """
    if not path.exists():
        typer.echo(f"Error: Graph file not found: {path}", err=True)
        raise typer.Exit(1)
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            return yaml.safe_load(text)
        return json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        typer.echo(f"Error: Could not parse graph file {path}: {e}", err=True)
        raise typer.Exit(1) from None


def _load_settings_option(settings: Path | None) -> CompilerSettings:
    if settings is None:
        return CompilerSettings()
    try:
        return load_settings(settings)
    except (YamlParserError, YamlScannerError) as e:
        typer.echo(f"YAML syntax error in {settings}: {e.problem}", err=True)
        raise typer.Exit(1) from None
    except FileNotFoundError:
        typer.echo(f"Error: Settings file not found: {settings}", err=True)
        raise typer.Exit(1) from None
    except ValidationError as e:
        typer.echo("Configuration errors:", err=True)
        _echo_validation_error(e)
        raise typer.Exit(1) from None


def _build_registry(catalogs: list[Path]) -> ComponentRegistry:
    registry = ComponentRegistry()
    registry.register_builtin_components()
    for catalog in catalogs:
        try:
            registry.register_components(load_component_catalog(catalog), name=catalog.name)
        except FileNotFoundError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1) from None
        except ValidationError as e:
            typer.echo(f"Component catalog errors in {catalog}:", err=True)
            _echo_validation_error(e)
            raise typer.Exit(1) from None
        except ValueError as e:
            typer.echo(f"Error registering catalog {catalog}: {e}", err=True)
            raise typer.Exit(1) from None
    return registry


def _echo_validation_error(error: ValidationError) -> None:
    for detail in error.errors():
        loc = ".".join(str(x) for x in detail["loc"])
        typer.echo(f"  - {loc}: {detail['msg']}", err=True)


def _echo_issue(issue: ValidationIssue) -> None:
    typer.echo(f"  - {issue.format_line()}", err=True)


def _compile_or_exit(graph: Path, catalogs: list[Path], settings: Path | None) -> CompilationResult:
    raw_graph = _read_graph(graph)
    compiler_settings = _load_settings_option(settings)
    registry = _build_registry(catalogs)

    try:
        return compile_workflow(raw_graph, registry, settings=compiler_settings)
    except ValidationError as e:
        typer.echo("Graph errors:", err=True)
        _echo_validation_error(e)
        raise typer.Exit(1) from None
    except SemanticValidationError as e:
        typer.echo(f"Workflow validation failed with {len(e.errors)} error(s):", err=True)
        for issue in e.errors:
            _echo_issue(issue)
        raise typer.Exit(1) from None
    except WorkflowCompilationError as e:
        typer.echo(f"Compilation error: {e}", err=True)
        raise typer.Exit(1) from None


# === Commands ===

_CATALOG_OPTION = typer.Option(
    [],
    "--catalog",
    "-c",
    help="Component catalog YAML file (repeatable).",
)
_SETTINGS_OPTION = typer.Option(
    None,
    "--settings",
    "-s",
    help="Path to compiler settings YAML file.",
)


@app.command("compile")
def compile_command(
    graph: Path = typer.Argument(..., help="Workflow graph file (JSON or YAML)."),
    catalog: list[Path] = _CATALOG_OPTION,
    settings: Path | None = _SETTINGS_OPTION,
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the definition to this file instead of stdout.",
    ),
    indent: int = typer.Option(
        2,
        "--indent",
        help="JSON indentation (0 for compact output).",
    ),
) -> None:
    """Compile a workflow graph into a definition."""
    result = _compile_or_exit(graph, catalog, settings)

    for warning in result.warnings:
        typer.secho(f"Warning: {warning.format_line()}", fg=typer.colors.YELLOW, err=True)

    rendered = json.dumps(result.definition.to_wire(), indent=indent or None)
    if output is None:
        typer.echo(rendered)
    else:
        output.write_text(rendered + "\n", encoding="utf-8")
        typer.echo(f"Wrote {output} (sha256 {result.definition_hash})", err=True)


@app.command("validate")
def validate_command(
    graph: Path = typer.Argument(..., help="Workflow graph file (JSON or YAML)."),
    catalog: list[Path] = _CATALOG_OPTION,
    settings: Path | None = _SETTINGS_OPTION,
) -> None:
    """Validate a workflow graph without writing a definition."""
    result = _compile_or_exit(graph, catalog, settings)

    if result.warnings:
        typer.echo(f"Warnings ({len(result.warnings)}):")
        for warning in result.warnings:
            typer.echo(f"  - {warning.format_line()}")
    typer.secho(
        f"Workflow is valid: {len(result.definition.actions)} action(s), entry point '{result.definition.entrypoint.ref}'",
        fg=typer.colors.GREEN,
    )


components_app = typer.Typer(help="Component registry commands.")
app.add_typer(components_app, name="components")


@components_app.command("list")
def components_list(
    catalog: list[Path] = _CATALOG_OPTION,
    show_ports: bool = typer.Option(
        False,
        "--ports",
        "-p",
        help="Show input and output ports.",
    ),
) -> None:
    """List registered components."""
    registry = _build_registry(catalog)

    for spec in registry.list_components():
        flags = []
        if spec.presentation_only:
            flags.append("presentation-only")
        if spec.has_dynamic_ports:
            flags.append("dynamic ports")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        description = f" - {spec.description}" if spec.description else ""
        typer.echo(f"{spec.id}{suffix}{description}")
        if show_ports:
            for port in spec.inputs:
                marker = "*" if port.required else " "
                typer.echo(f"    in {marker} {port.id}: {describe_port_type(port.data_type)}")
            for port in spec.outputs:
                typer.echo(f"    out  {port.id}: {describe_port_type(port.data_type)}")


if __name__ == "__main__":
    app()
