"""Command line interface for divelog."""

from __future__ import annotations

import logging
from typing import Any

import click
import yaml
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from divelog.config import ConfigError, ConfigManager, DivelogConfig
from divelog.loader import GitLoader, LoadError, LoadResult

console = Console()

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _configure_logging(level: str) -> None:
    """Route divelog logging to stderr at the requested level.

    The handler is replaced on every call so it always writes to the
    current ``sys.stderr``.

    Args:
        level: Logging level name such as ``WARNING`` or ``DEBUG``.
    """
    logger = logging.getLogger("divelog")
    for handler in [h for h in logger.handlers if getattr(h, "is_cli_handler", False)]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.is_cli_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output to terminate the command.
        click.ClickException: For non-JSON flows to surface the error.
    """
    if json_output:
        console.print_json(data={"error": {"code": code, "message": message}})
        raise SystemExit(1)
    raise click.ClickException(message) from original


def _emit_message(message: Any, *, mode: str, quiet: bool, summary_only: bool) -> None:
    """Conditionally print CLI output according to quiet/summary settings.

    Args:
        message: Renderable or string to emit.
        mode: Output mode identifier (``detail``, ``summary``, ``warning``, or ``error``).
        quiet: Whether quiet mode is active.
        summary_only: Whether only summary lines should be emitted.
    """
    if quiet and mode != "error":
        return
    if summary_only and mode not in {"summary", "warning", "error"}:
        return
    console.print(message)


def _format_summary_line(command: str, location: str, metrics: dict[str, Any]) -> str:
    """Return a consistent summary line for CLI commands."""
    parts = ", ".join(f"{key}={value}" for key, value in metrics.items())
    return f"[green]{command} summary for {location}: {parts}.[/green]"


def _dive_table(result: LoadResult) -> Table:
    """Render the dives of a load as a table."""
    trip_numbers = {id(trip): position for position, trip in enumerate(result.log.trips, start=1)}
    table = Table(title=f"Dives on {result.branch}")
    table.add_column("#", justify="right")
    table.add_column("Start (UTC)")
    table.add_column("Trip")
    for dive in result.log.dives:
        trip = ""
        if dive.trip is not None:
            trip = f"{trip_numbers[id(dive.trip)]} ({dive.trip.when.date().isoformat()})"
        table.add_row(
            "" if dive.number is None else str(dive.number),
            dive.when.strftime("%Y-%m-%d %H:%M:%S"),
            trip,
        )
    return table


def _load_config(cli_overrides: dict[str, Any] | None = None) -> DivelogConfig:
    try:
        return ConfigManager().load(cli_overrides=cli_overrides)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="divelog")
def cli() -> None:
    """divelog reads dive logs stored as directory trees in git repositories."""


@cli.command()
@click.argument("location")
@click.option("--branch", type=str, help="Branch to load; overrides any ':branch' in LOCATION.")
@click.option(
    "--tree-trips",
    is_flag=True,
    help="Limit the active trip and dive to the directory that set them.",
)
@click.option("--json", "json_output", is_flag=True, help="Emit JSON describing the loaded log.")
@click.option("--summary", "summary_mode", is_flag=True, help="Only emit summary lines.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def load(
    location: str,
    branch: str | None,
    tree_trips: bool,
    json_output: bool,
    summary_mode: bool,
    quiet: bool,
    verbose: bool,
) -> None:
    """Load the dive log at LOCATION and print its dives.

    LOCATION is a repository path, optionally written as
    ``"git /path/to/repo:branch"``.
    """
    overrides: dict[str, Any] = {}
    if tree_trips:
        overrides["loader.trip_scoping"] = "tree"
    config = _load_config(overrides)
    _configure_logging("DEBUG" if verbose else config.logging.level)

    quiet = quiet or config.cli.quiet_default
    summary_only = summary_mode or config.cli.summary_default

    if branch:
        location = f"{location.rstrip()}:{branch}"

    loader = GitLoader(loader=config.loader, store=config.store)
    try:
        result = loader.load(location)
    except LoadError as exc:
        _handle_cli_error(str(exc), code="load_failed", json_output=json_output, original=exc)
        return

    if json_output:
        console.print_json(data=result.json_payload())
        return

    _emit_message(_dive_table(result), mode="detail", quiet=quiet, summary_only=summary_only)
    if result.diagnostics:
        _emit_message(
            "[yellow]Diagnostics:[/yellow]", mode="warning", quiet=quiet, summary_only=summary_only
        )
        for diagnostic in result.diagnostics:
            _emit_message(
                f"  - {diagnostic.message}", mode="warning", quiet=quiet, summary_only=summary_only
            )
    _emit_message(
        _format_summary_line("Load", result.location, result.counts),
        mode="summary",
        quiet=quiet,
        summary_only=summary_only,
    )


@cli.group()
def config() -> None:
    """Manage divelog configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules."""
    try:
        effective = ConfigManager().load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    rendered = yaml.safe_dump(effective.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(rendered, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY."""
    manager = ConfigManager()
    try:
        file_data = manager.load_file_overrides()
        parsed = yaml.safe_load(value)
    except (ConfigError, yaml.YAMLError) as exc:
        raise click.ClickException(str(exc)) from exc

    node = file_data
    *parents, leaf = key.split(".")
    for segment in parents:
        child = node.setdefault(segment, {})
        if not isinstance(child, dict):
            raise click.ClickException(
                f"Cannot assign into '{segment}' because it is not a mapping in the config file."
            )
        node = child
    node[leaf] = parsed

    try:
        manager.load(cli_overrides={key: parsed}, include_env=False)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(file_data)
    console.print(f"[green]Set {key} = {parsed!r}[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
