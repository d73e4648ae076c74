"""
export_engine.exporter - Query materials and produce a download.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

import config
from db.models import Material
from export_engine.projector import project
from export_engine.writer import EXPORT_FORMATS, render
from import_engine.field_map import FieldSpec

logger = logging.getLogger(__name__)


@dataclass
class ExportFile:
    content: bytes
    filename: str
    mimetype: str
    row_count: int


def export_materials(
    session: Session,
    field_spec: FieldSpec | None = None,
    fmt: str | None = None,
) -> ExportFile:
    field_spec = field_spec or FieldSpec.for_export()
    fmt = (fmt or config.DEFAULT_EXPORT_FORMAT).lower()
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format '{fmt}'")

    materials = session.execute(
        select(Material)
        .options(selectinload(Material.category), selectinload(Material.supplier))
        .order_by(Material.name, Material.id)
    ).scalars().all()

    rows = project(materials, field_spec)
    logger.info("Exporting %d materials as %s (fields=%s)",
                len(rows), fmt, ",".join(field_spec))

    return ExportFile(
        content=render(field_spec.headers(), rows, fmt),
        filename=f"{config.EXPORT_BASENAME}.{fmt}",
        mimetype=EXPORT_FORMATS[fmt],
        row_count=len(rows),
    )
