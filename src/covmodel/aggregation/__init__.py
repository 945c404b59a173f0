"""Aggregation of raw coverage records into the coverage model."""

from covmodel.aggregation.assembly_builder import (
    AssemblyBuilder,
    BuildCancelledError,
    is_synthetic_class,
)
from covmodel.aggregation.class_builder import ClassBuilder, build_code_file
from covmodel.aggregation.elements import extract_code_elements, is_generated_method
from covmodel.aggregation.line_merger import merge_line_coverage
from covmodel.aggregation.model_builder import (
    CoverageModelBuilder,
    InvalidReportError,
    build_coverage_model,
)

__all__ = [
    "AssemblyBuilder",
    "BuildCancelledError",
    "ClassBuilder",
    "CoverageModelBuilder",
    "InvalidReportError",
    "build_code_file",
    "build_coverage_model",
    "extract_code_elements",
    "is_generated_method",
    "is_synthetic_class",
    "merge_line_coverage",
]
