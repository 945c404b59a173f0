"""Coverage report adapters."""

from covmodel.adapters.coverage.mprof_adapter import MProfAdapter, ReportParseError, read_records
from covmodel.adapters.coverage.records import (
    MalformedRecordError,
    RawRecord,
    RecordSet,
    Statement,
)

__all__ = [
    "MProfAdapter",
    "MalformedRecordError",
    "RawRecord",
    "RecordSet",
    "ReportParseError",
    "Statement",
    "read_records",
]
