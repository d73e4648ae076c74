"""
import_engine.importer - Top-level orchestrator.

Coordinates validator → resolver → builder → DB commit for every row
and produces a structured ImportSummary.  It knows nothing about HTTP or
Celery, so an inline import and a queued one give identical results.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.engine import get_session
from db.models import Category, Material, Supplier
from import_engine.builder import build_material
from import_engine.errors import PersistenceError, RowError, RowValidationError
from import_engine.field_map import FieldSpec
from import_engine.report import ImportSummary
from import_engine.resolver import EntityResolver
from import_engine.validator import validate

logger = logging.getLogger(__name__)


class ImportOrchestrator:
    """
    Runs one batch.  Each row is committed on its own, so a rejected
    row never undoes the rows before it.
    """

    def __init__(
        self,
        session: Session,
        field_spec: FieldSpec | None = None,
        *,
        resolver: EntityResolver | None = None,
        builder: Callable[[dict, int, int], Material] = build_material,
    ):
        self.session = session
        self.field_spec = field_spec or FieldSpec.for_import()
        self.resolver = resolver or EntityResolver(session)
        self.builder = builder

    def run(self, rows: Sequence[dict]) -> ImportSummary:
        summary = ImportSummary()
        logger.info("Import batch started: %d rows, fields=%s",
                    len(rows), ",".join(self.field_spec))

        for row_idx, row in enumerate(rows, start=1):
            try:
                material_id = self.process(row)
                summary.add_created(row_idx, material_id)
            except RowError as exc:
                logger.warning("Row %d rejected: %s", row_idx, exc)
                summary.add_rejection(row_idx, str(exc), exc.errors)
            except Exception as exc:
                self.session.rollback()
                logger.exception("Row %d failed unexpectedly", row_idx)
                summary.add_rejection(row_idx, f"Unexpected: {exc}")

        summary.finish()
        logger.info("Import batch finished: %d created, %d rejected / %d rows",
                    summary.created, summary.rejected, summary.total_rows)
        return summary

    def process(self, row: dict) -> int:
        """Import one row and return the new material id.  Raises RowError."""
        outcome = validate(row, self.field_spec)
        if not outcome.ok:
            raise RowValidationError(outcome.message(), outcome.error_dicts())

        category_id = self.resolver.resolve(Category, outcome.values["category"])
        supplier_id = self.resolver.resolve(Supplier, outcome.values["supplier"])

        material = self.builder(outcome.values, category_id, supplier_id)
        try:
            self.session.add(material)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            reason = getattr(exc, "orig", None) or exc
            raise PersistenceError(f"Could not save material: {reason}") from exc
        return material.id


def run_import(
    rows: Sequence[dict],
    field_spec: FieldSpec | None = None,
    *,
    session: Session | None = None,
) -> ImportSummary:
    """
    Import already-parsed rows.

    Parameters
    ----------
    rows : ordered rows (column name → text)
    field_spec : import schema, defaults to config.IMPORT_FIELDS
    session : reuse an open session; otherwise one is opened and closed here
    """
    if session is not None:
        return ImportOrchestrator(session, field_spec).run(rows)

    own = get_session()
    try:
        return ImportOrchestrator(own, field_spec).run(rows)
    finally:
        own.close()
