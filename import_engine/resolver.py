"""
import_engine.resolver - Natural-key → id resolution with get-or-create.

One EntityResolver lives for one batch.  It remembers every name it has
resolved, and treats a unique-constraint hit on create as "someone else
created it first", so a name is never stored twice.
"""

from __future__ import annotations

import logging
import threading

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from db.models import Category, Supplier
from import_engine.errors import ResolutionError

logger = logging.getLogger(__name__)

RESOLVABLE = (Category, Supplier)


class EntityResolver:

    def __init__(self, session: Session):
        self._session = session
        self._cache: dict[tuple[str, str], int] = {}   # (kind, name) → id
        self._lock = threading.Lock()
        self.created: list[tuple[str, str]] = []

    def resolve(self, kind: type, name: str) -> int:
        """Return the id of the ``kind`` named ``name``, creating it if absent."""
        if kind not in RESOLVABLE:
            raise TypeError(f"Cannot resolve {kind!r}")
        if not name:
            raise ValueError(f"{kind.__name__} name must not be empty")

        key = (kind.__name__, name)
        with self._lock:
            if key not in self._cache:
                self._cache[key] = self._get_or_create(kind, name)
            return self._cache[key]

    # ── Private helpers ────────────────────────────────────────────────

    def _find(self, kind: type, name: str):
        return self._session.execute(
            select(kind).where(kind.name == name)
        ).scalar_one_or_none()

    def _get_or_create(self, kind: type, name: str) -> int:
        label = kind.__name__.lower()
        try:
            existing = self._find(kind, name)
            if existing is not None:
                return existing.id

            entity = kind(name=name, metadata_json=None)
            self._session.add(entity)
            self._session.commit()
            self.created.append((kind.__name__, name))
            logger.info("Created %s %r (id=%s)", label, name, entity.id)
            return entity.id

        except IntegrityError:
            # Lost a race on the unique name; the winner's row is the answer
            self._session.rollback()
            try:
                existing = self._find(kind, name)
            except SQLAlchemyError as exc:
                self._session.rollback()
                raise ResolutionError(f"Could not resolve {label} '{name}': {exc}") from exc
            if existing is None:
                raise ResolutionError(f"Could not create {label} '{name}'")
            return existing.id

        except SQLAlchemyError as exc:
            self._session.rollback()
            raise ResolutionError(f"Could not resolve {label} '{name}': {exc}") from exc
