"""Construction of a single class and its source files."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from covmodel.aggregation.elements import extract_code_elements
from covmodel.aggregation.line_merger import merge_line_coverage
from covmodel.models.coverage import Class, CodeFile

if TYPE_CHECKING:
    from covmodel.adapters.coverage.records import RecordSet
    from covmodel.filters import InclusionFilter
    from covmodel.models.coverage import Assembly

logger = logging.getLogger(__name__)


class ClassBuilder:
    """Builds one fully populated Class from the raw records.

    A class without any file information is kept (with no files) unless the
    file filter has custom rules.  A class whose files were all removed by
    the file filter is omitted.
    """

    def __init__(self, file_filter: InclusionFilter) -> None:
        self.file_filter = file_filter

    def build(self, records: RecordSet, assembly: Assembly, class_name: str) -> Class | None:
        """Return the built class, or None when it is omitted from the model.

        The returned class is not attached to *assembly*; the caller does
        that once every class of the assembly is built.
        """
        class_records = records.select(assembly=assembly.name, class_name=class_name)
        files_of_class = class_records.file_paths()
        filtered_files = sorted(f for f in files_of_class if self.file_filter.is_included(f))

        # No file metadata and no file rules: nothing was filtered out
        has_no_file_info = not files_of_class and not self.file_filter.has_custom_rules()
        if not has_no_file_info and not filtered_files:
            logger.debug("Omitting class %s: no files left after filtering", class_name)
            return None

        cls = Class(name=class_name, assembly=assembly)
        for file_path in filtered_files:
            cls.add_file(build_code_file(class_records, file_path))
        return cls


def build_code_file(class_records: RecordSet, file_path: str) -> CodeFile:
    """Build the CodeFile for *file_path* from one class's records."""
    methods_of_file = class_records.select(file_path=file_path).distinct()
    coverage, line_status = merge_line_coverage(methods_of_file)
    code_file = CodeFile(path=file_path, coverage=coverage, line_status=line_status)
    extract_code_elements(code_file, methods_of_file)
    return code_file
