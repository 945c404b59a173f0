"""Extraction of methods and properties from a file's method records."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from covmodel.models.coverage import CodeElement, CodeElementType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from covmodel.adapters.coverage.records import RawRecord
    from covmodel.models.coverage import CodeFile

# Compiler-generated closures and state machines, e.g. "<Main>b__0"
_GENERATED_METHOD_RE = re.compile(r"<.*>.+__")

_PROPERTY_PREFIXES = ("get_", "set_")
_PROPERTY_PREFIX_LENGTH = 4


def is_generated_method(name: str) -> bool:
    """Return True for compiler-generated lambda/iterator method names."""
    return _GENERATED_METHOD_RE.search(name) is not None


def _classify(method_name: str) -> tuple[str, CodeElementType]:
    if method_name.lower().startswith(_PROPERTY_PREFIXES):
        return method_name[_PROPERTY_PREFIX_LENGTH:], CodeElementType.PROPERTY
    return method_name, CodeElementType.METHOD


def extract_code_elements(code_file: CodeFile, records: Iterable[RawRecord]) -> None:
    """Add one CodeElement per user-visible method record to *code_file*.

    The element's range comes from the record's own statements; its quota
    is computed from the file's already merged line status.  Records with
    generated names or without statements are skipped.
    """
    for record in records:
        if is_generated_method(record.method):
            continue

        line_numbers = [s.line for s in record.statements]
        if not line_numbers:
            continue

        name, element_type = _classify(record.method)
        first_line = min(line_numbers)
        last_line = max(line_numbers)
        code_file.add_code_element(
            CodeElement(
                name=name,
                type=element_type,
                first_line=first_line,
                last_line=last_line,
                coverage_quota=code_file.coverage_quota(first_line, last_line),
            )
        )
