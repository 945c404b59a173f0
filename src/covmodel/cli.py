"""Top-level click command group for the covmodel CLI."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any

import click
import yaml
from rich.console import Console

from covmodel import __version__
from covmodel.adapters.coverage import MalformedRecordError, MProfAdapter, ReportParseError
from covmodel.aggregation import InvalidReportError
from covmodel.config import CovmodelConfig, load_config, validate_config
from covmodel.models import model_to_dict
from covmodel.reporters.terminal import reporter

logger = logging.getLogger(__name__)
console = Console()


def _config_to_dict(config: CovmodelConfig) -> dict[str, Any]:
    """Convert CovmodelConfig to dictionary for display."""
    result = asdict(config)
    # Remove the raw field as it's redundant
    result.pop("raw", None)
    return result


def _load_valid_config(path: str) -> CovmodelConfig:
    try:
        config = load_config(path)
    except (OSError, yaml.YAMLError, ValueError) as e:
        reporter.print_error(f"Failed to load configuration: {e}")
        raise click.Abort from e

    errors = validate_config(config)
    if errors:
        reporter.print_error(f"Found {len(errors)} configuration error(s):")
        for idx, error in enumerate(errors, start=1):
            console.print(f"  {idx}. [red]{error}[/red]")
        raise click.Abort
    return config


@click.group()
@click.version_option(version=__version__, prog_name="covmodel")
def cli() -> None:
    """covmodel: build line/method coverage models from mprof reports."""


@cli.command("parse")
@click.argument("report", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--path",
    default=".",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Project root directory containing .covmodel.yml.",
)
@click.option(
    "--assembly-filter",
    "assembly_filters",
    multiple=True,
    help="Assembly filter pattern (+include / -exclude). Overrides config.",
)
@click.option(
    "--class-filter",
    "class_filters",
    multiple=True,
    help="Class filter pattern (+include / -exclude). Overrides config.",
)
@click.option(
    "--file-filter",
    "file_filters",
    multiple=True,
    help="File filter pattern (+include / -exclude). Overrides config.",
)
@click.option(
    "--max-workers",
    type=click.IntRange(min=1),
    default=None,
    help="Worker threads used to build classes. Overrides config.",
)
@click.option(
    "--json-output",
    "as_json",
    is_flag=True,
    help="Output the full model as JSON instead of a summary table.",
)
def parse_command(
    report: Path,
    path: str,
    assembly_filters: tuple[str, ...],
    class_filters: tuple[str, ...],
    file_filters: tuple[str, ...],
    max_workers: int | None,
    *,
    as_json: bool,
) -> None:
    """Parse an mprof XML REPORT and summarize its coverage model.

    Example:
      covmodel parse coverage.xml --assembly-filter "-*.Tests"
    """
    config = _load_valid_config(path)
    if assembly_filters:
        config.filters.assemblies = list(assembly_filters)
    if class_filters:
        config.filters.classes = list(class_filters)
    if file_filters:
        config.filters.files = list(file_filters)
    if max_workers is not None:
        config.build.max_workers = max_workers

    logger.debug("Parsing %s with %d workers", report, config.build.max_workers)
    try:
        adapter = MProfAdapter(
            config.filters.assembly_filter(),
            config.filters.class_filter(),
            config.filters.file_filter(),
            max_workers=config.build.max_workers,
            parallel_assemblies=config.build.parallel_assemblies,
        )
        model = adapter.parse_coverage_file(report)
    except (ReportParseError, MalformedRecordError, InvalidReportError) as e:
        reporter.print_error(str(e))
        raise click.Abort from e
    except ValueError as e:
        reporter.print_error(f"Invalid filter: {e}")
        raise click.Abort from e

    if as_json or config.report.format == "json":
        click.echo(json.dumps(model_to_dict(model), indent=2))
        return

    reporter.print_header(f"Coverage model: {report.name}")
    reporter.print_model_summary(model)


@cli.group("config")
def config_group() -> None:
    """Inspect `.covmodel.yml` configuration."""


@config_group.command("show")
@click.option(
    "--path",
    default=".",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Project root directory.",
)
@click.option(
    "--json-output",
    "as_json",
    is_flag=True,
    help="Output as JSON instead of YAML.",
)
def config_show(path: str, *, as_json: bool) -> None:
    """Display the resolved configuration.

    Example:
      covmodel config show
      covmodel config show --json-output
    """
    try:
        config = load_config(path)
    except (OSError, yaml.YAMLError, ValueError) as e:
        reporter.print_error(f"Failed to load configuration: {e}")
        raise click.Abort from e

    config_dict = _config_to_dict(config)
    if as_json:
        click.echo(json.dumps(config_dict, indent=2))
        return

    console.print()
    console.print("[bold cyan]Configuration:[/bold cyan]")
    console.print()
    click.echo(yaml.safe_dump(config_dict, sort_keys=False, default_flow_style=False))


@config_group.command("validate")
@click.option(
    "--path",
    default=".",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Project root directory.",
)
def config_validate(path: str) -> None:
    """Validate `.covmodel.yml` configuration.

    Example:
      covmodel config validate
    """
    _load_valid_config(path)
    reporter.print_success("Configuration is valid!")
