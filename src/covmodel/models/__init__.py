"""Data models for covmodel."""

from covmodel.models.coverage import (
    NO_DATA,
    Assembly,
    Class,
    CodeElement,
    CodeElementType,
    CodeFile,
    CoverageModel,
    LineVisitStatus,
)
from covmodel.models.serialization import model_to_dict

__all__ = [
    "NO_DATA",
    "Assembly",
    "Class",
    "CodeElement",
    "CodeElementType",
    "CodeFile",
    "CoverageModel",
    "LineVisitStatus",
    "model_to_dict",
]
