"""Configuration parsing from ``.covmodel.yml``."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from covmodel.filters import EXCLUDE_PREFIX, INCLUDE_PREFIX, create_filter

if TYPE_CHECKING:
    from covmodel.filters import InclusionFilter

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".covmodel.yml"

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")

_ENV_FILTER_SEPARATOR = ";"

REPORT_FORMATS = frozenset({"terminal", "json"})


def _resolve_env_vars(value: str) -> str:
    """Replace ``${VAR_NAME}`` placeholders with environment variable values."""

    def _replace(match: re.Match[str]) -> str:
        var = match.group(1)
        resolved = os.environ.get(var)
        if resolved is None:
            logger.warning("Environment variable %s is not set (referenced in config)", var)
            return ""
        return resolved

    return _ENV_VAR_RE.sub(_replace, value)


def _resolve_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively resolve environment variables in a dictionary."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            result[key] = _resolve_env_vars(value)
        elif isinstance(value, dict):
            result[key] = _resolve_dict(value)
        elif isinstance(value, list):
            result[key] = [
                _resolve_env_vars(item) if isinstance(item, str) else item for item in value
            ]
        else:
            result[key] = value
    return result


@dataclass
class FilterConfig:
    """Inclusion filter patterns per tier (``+pattern`` / ``-pattern``)."""

    assemblies: list[str] = field(default_factory=list)
    """Assembly name patterns."""

    classes: list[str] = field(default_factory=list)
    """Class name patterns."""

    files: list[str] = field(default_factory=list)
    """Source file path patterns."""

    def assembly_filter(self) -> InclusionFilter:
        return create_filter(self.assemblies)

    def class_filter(self) -> InclusionFilter:
        return create_filter(self.classes)

    def file_filter(self) -> InclusionFilter:
        return create_filter(self.files)


@dataclass
class BuildConfig:
    """Model construction configuration."""

    max_workers: int = 4
    """Size of the worker pool used to build classes."""

    parallel_assemblies: bool = False
    """Build assemblies concurrently, each with its own class pool."""


@dataclass
class ReportConfig:
    """Output configuration."""

    format: str = "terminal"
    """Default output format: terminal or json."""


@dataclass
class CovmodelConfig:
    """Complete covmodel configuration from ``.covmodel.yml``."""

    root: str
    """Project root directory."""

    filters: FilterConfig = field(default_factory=FilterConfig)
    """Inclusion filter configuration."""

    build: BuildConfig = field(default_factory=BuildConfig)
    """Model construction configuration."""

    report: ReportConfig = field(default_factory=ReportConfig)
    """Output configuration."""

    raw: dict[str, Any] = field(default_factory=dict)
    """Raw parsed YAML for extension/debugging."""


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    value = raw.get(name, {})
    return value if isinstance(value, dict) else {}


def _pattern_list(section: dict[str, Any], key: str, env_var: str) -> list[str]:
    value = section.get(key)
    if value is None:
        env_value = os.environ.get(env_var, "")
        return [p.strip() for p in env_value.split(_ENV_FILTER_SEPARATOR) if p.strip()]
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(p) for p in value]
    return []


def _parse_filter_config(raw: dict[str, Any]) -> FilterConfig:
    """Parse filter configuration from raw YAML."""
    filters_raw = _section(raw, "filters")
    return FilterConfig(
        assemblies=_pattern_list(filters_raw, "assemblies", "COVMODEL_ASSEMBLY_FILTERS"),
        classes=_pattern_list(filters_raw, "classes", "COVMODEL_CLASS_FILTERS"),
        files=_pattern_list(filters_raw, "files", "COVMODEL_FILE_FILTERS"),
    )


def _parse_build_config(raw: dict[str, Any]) -> BuildConfig:
    """Parse build configuration from raw YAML."""
    build_raw = _section(raw, "build")
    return BuildConfig(
        max_workers=int(build_raw.get("max_workers", 4)),
        parallel_assemblies=bool(build_raw.get("parallel_assemblies", False)),
    )


def _parse_report_config(raw: dict[str, Any]) -> ReportConfig:
    """Parse report configuration from raw YAML."""
    report_raw = _section(raw, "report")
    return ReportConfig(format=str(report_raw.get("format", "terminal")))


def load_config(root: str | Path) -> CovmodelConfig:
    """Load and parse the complete ``.covmodel.yml`` configuration.

    Falls back to defaults and environment variables when the YAML file
    is missing or incomplete.
    """
    root_path = Path(root).resolve()
    config_file = root_path / CONFIG_FILE_NAME

    raw: dict[str, Any] = {}
    if config_file.is_file():
        parsed = yaml.safe_load(config_file.read_text(encoding="utf-8"))
        if isinstance(parsed, dict):
            raw = _resolve_dict(parsed)

    return CovmodelConfig(
        root=str(root_path),
        filters=_parse_filter_config(raw),
        build=_parse_build_config(raw),
        report=_parse_report_config(raw),
        raw=raw,
    )


def _validate_patterns(patterns: list[str], key: str) -> list[str]:
    errors: list[str] = []
    for pattern in patterns:
        stripped = pattern.strip()
        if not stripped.startswith((INCLUDE_PREFIX, EXCLUDE_PREFIX)) or len(stripped) < 2:
            errors.append(
                f"{key} pattern must start with '+' or '-' followed by a pattern "
                f"(got: {pattern!r})"
            )
    return errors


def validate_config(config: CovmodelConfig) -> list[str]:
    """Validate the configuration and return a list of error messages.

    Returns an empty list if the configuration is valid.
    """
    errors: list[str] = []

    errors.extend(_validate_patterns(config.filters.assemblies, "filters.assemblies"))
    errors.extend(_validate_patterns(config.filters.classes, "filters.classes"))
    errors.extend(_validate_patterns(config.filters.files, "filters.files"))

    if config.build.max_workers < 1:
        errors.append(f"build.max_workers must be at least 1 (got: {config.build.max_workers})")

    if config.report.format not in REPORT_FORMATS:
        errors.append(
            f"report.format must be one of {', '.join(sorted(REPORT_FORMATS))} "
            f"(got: {config.report.format})"
        )

    return errors
