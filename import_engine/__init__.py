"""
import_engine - Material import pipeline.

Public API:
    read_rows(content, filename)         → rows
    run_import(rows, field_spec=None)    → ImportSummary
    select_mode(size_bytes)              → ImportMode
"""

from import_engine.errors import (                      # noqa: F401
    FieldSpecError, PipelineFatalError, RowError,
    RowValidationError, ResolutionError, PersistenceError,
)
from import_engine.field_map import FieldSpec           # noqa: F401
from import_engine.importer import ImportOrchestrator, run_import   # noqa: F401
from import_engine.mode import ImportMode, select_mode  # noqa: F401
from import_engine.report import ImportSummary          # noqa: F401
from import_engine.tabular import read_rows, read_rows_from_path   # noqa: F401
