"""JSON-safe serialization of the coverage model."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from covmodel.models.coverage import Assembly, Class, CodeFile, CoverageModel


def model_to_dict(model: CoverageModel) -> dict[str, Any]:
    """Convert a CoverageModel to a JSON-serializable dict."""
    return {
        "parser": model.parser_name,
        "supports_branch_coverage": model.supports_branch_coverage,
        "covered_lines": model.covered_lines,
        "coverable_lines": model.coverable_lines,
        "line_coverage": model.line_coverage,
        "assemblies": [_serialize_assembly(a) for a in model.assemblies],
    }


def _serialize_assembly(assembly: Assembly) -> dict[str, Any]:
    return {
        "name": assembly.name,
        "line_coverage": assembly.line_coverage,
        "classes": [_serialize_class(c) for c in assembly.classes],
    }


def _serialize_class(cls: Class) -> dict[str, Any]:
    return {
        "name": cls.name,
        "line_coverage": cls.line_coverage,
        "files": [_serialize_file(f) for f in cls.files],
    }


def _serialize_file(code_file: CodeFile) -> dict[str, Any]:
    return {
        "path": code_file.path,
        "coverage": list(code_file.coverage),
        "line_status": [status.value for status in code_file.line_status],
        "code_elements": [
            {
                "name": element.name,
                "type": element.type.value,
                "first_line": element.first_line,
                "last_line": element.last_line,
                "coverage_quota": element.coverage_quota,
            }
            for element in code_file.code_elements
        ],
    }
