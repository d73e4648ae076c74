"""
db.models - SQLAlchemy ORM declarations.

Tables
------
categories   - material categories, unique by name (natural key).
suppliers    - material suppliers, unique by name, with contact details.
materials    - one row per catalogued material; always references an
               existing category and supplier.
import_jobs  - one row per submitted import file.  Tracks the batch
               from pending to a terminal state so large (queued)
               imports are never silently lost.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column, String, Integer, DateTime, Text, ForeignKey,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_uuid() -> str:
    return str(uuid.uuid4())


def _load_json(raw: str | None):
    if not raw:
        return None
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return None


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


class Base(DeclarativeBase):
    pass


class Category(Base):
    __tablename__ = "categories"

    id   = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(String(36), unique=True, nullable=False, default=_new_uuid)
    name = Column(String(255), unique=True, nullable=False, index=True)

    # "metadata" is reserved on declarative classes
    metadata_json = Column("metadata", Text, nullable=True)

    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    materials = relationship("Material", back_populates="category")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "uuid": self.uuid,
            "name": self.name,
            "metadata": _load_json(self.metadata_json),
            "created_at": _iso(self.created_at),
        }


class Supplier(Base):
    __tablename__ = "suppliers"

    id   = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(String(36), unique=True, nullable=False, default=_new_uuid)
    name = Column(String(255), unique=True, nullable=False, index=True)

    # ── Contact details ────────────────────────────────────────────────
    contact_name  = Column(String(255), nullable=True)
    contact_email = Column(String(255), nullable=True)
    contact_phone = Column(String(50), nullable=True)
    address       = Column(Text, nullable=True)

    metadata_json = Column("metadata", Text, nullable=True)

    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    materials = relationship("Material", back_populates="supplier")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "uuid": self.uuid,
            "name": self.name,
            "contact_name": self.contact_name,
            "contact_email": self.contact_email,
            "contact_phone": self.contact_phone,
            "address": self.address,
            "metadata": _load_json(self.metadata_json),
            "created_at": _iso(self.created_at),
        }


class Material(Base):
    __tablename__ = "materials"

    id   = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(String(36), unique=True, nullable=False, default=_new_uuid)
    name = Column(String(255), nullable=False, index=True)

    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=False, index=True)

    description   = Column(Text, nullable=True)
    file_path     = Column(String(500), nullable=True)
    metadata_json = Column("metadata", Text, nullable=True)

    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    category = relationship("Category", back_populates="materials")
    supplier = relationship("Supplier", back_populates="materials")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "uuid": self.uuid,
            "name": self.name,
            "category_id": self.category_id,
            "supplier_id": self.supplier_id,
            "category": self.category.name if self.category else None,
            "supplier": self.supplier.name if self.supplier else None,
            "description": self.description,
            "file_path": self.file_path,
            "metadata": _load_json(self.metadata_json),
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class JobStatus:
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    COMPLETED_WITH_REJECTIONS = "completed_with_rejections"
    FAILED = "failed"

    TERMINAL = frozenset({COMPLETED, COMPLETED_WITH_REJECTIONS, FAILED})


class ImportJob(Base):
    __tablename__ = "import_jobs"

    id     = Column(String(36), primary_key=True, default=_new_uuid)
    status = Column(String(40), nullable=False, default=JobStatus.PENDING, index=True)
    mode   = Column(String(20), nullable=False)

    # ── Source file ────────────────────────────────────────────────────
    filename    = Column(String(300), nullable=False)
    stored_path = Column(String(500), nullable=False)
    size_bytes  = Column(Integer, nullable=False, default=0)

    # ── Outcome ────────────────────────────────────────────────────────
    total_rows      = Column(Integer, nullable=False, default=0)
    created_count   = Column(Integer, nullable=False, default=0)
    rejected_count  = Column(Integer, nullable=False, default=0)
    rejections_json = Column(Text, nullable=True)     # [{row, reason, errors}]
    error           = Column(Text, nullable=True)

    created_at  = Column(DateTime, default=_utcnow)
    started_at  = Column(DateTime, nullable=True)
    finished_at = Column(DateTime, nullable=True)

    @property
    def is_terminal(self) -> bool:
        return self.status in JobStatus.TERMINAL

    @property
    def rejections(self) -> list[dict]:
        return _load_json(self.rejections_json) or []

    def summary(self) -> dict:
        """Batch outcome as reported to the uploader."""
        return {
            "status": self.status,
            "total_rows": self.total_rows,
            "created": self.created_count,
            "rejected": self.rejected_count,
            "rejections": self.rejections,
        }

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "mode": self.mode,
            "filename": self.filename,
            "size_bytes": self.size_bytes,
            **self.summary(),
            "error": self.error,
            "created_at": _iso(self.created_at),
            "started_at": _iso(self.started_at),
            "finished_at": _iso(self.finished_at),
        }
