"""
export_engine - Material export pipeline.

Public API:
    project(materials, field_spec)              → [ExportRow]
    export_materials(session, field_spec, fmt)  → ExportFile
"""

from export_engine.projector import FIELD_RULES, project            # noqa: F401
from export_engine.exporter import ExportFile, export_materials     # noqa: F401
from export_engine.writer import EXPORT_FORMATS, render             # noqa: F401
