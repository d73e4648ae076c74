"""
export_engine.projector - Materials → flat, ordered export rows.

FIELD_RULES maps each exportable field identifier to the function that
extracts its text from a material.  A FieldSpec picks and orders them.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Callable, Iterable

import config
from import_engine.errors import FieldSpecError
from import_engine.field_map import FieldSpec

Rule = Callable[[object, str], str]


def _text(value) -> str:
    if value is None:
        return ""
    return str(value)


def _scalar(attr: str) -> Rule:
    return lambda entity, _placeholder: _text(getattr(entity, attr, None))


def _relation(attr: str) -> Rule:
    def rule(entity, placeholder: str) -> str:
        related = getattr(entity, attr, None)
        if related is None or not related.name:
            return placeholder
        return related.name
    return rule


def _timestamp(attr: str) -> Rule:
    def rule(entity, _placeholder: str) -> str:
        value: datetime | None = getattr(entity, attr, None)
        if value is None:
            return ""
        return value.strftime(config.EXPORT_TIMESTAMP_FORMAT)
    return rule


def _json(attr: str) -> Rule:
    def rule(entity, _placeholder: str) -> str:
        raw = getattr(entity, attr, None)
        if not raw:
            return ""
        try:
            return json.dumps(json.loads(raw), ensure_ascii=False)
        except (json.JSONDecodeError, TypeError):
            return _text(raw)
    return rule


FIELD_RULES: dict[str, Rule] = {
    "name":        _scalar("name"),
    "category":    _relation("category"),
    "supplier":    _relation("supplier"),
    "description": _scalar("description"),
    "file_path":   _scalar("file_path"),
    "metadata":    _json("metadata_json"),
    "uuid":        _scalar("uuid"),
    "created_at":  _timestamp("created_at"),
    "updated_at":  _timestamp("updated_at"),
}


def project(
    entities: Iterable,
    field_spec: FieldSpec,
    placeholder: str | None = None,
) -> list[dict[str, str]]:
    """One ordered {header: text} dict per entity, columns in FieldSpec order."""
    if placeholder is None:
        placeholder = config.MISSING_RELATION_PLACEHOLDER

    missing = [f for f in field_spec if f not in FIELD_RULES]
    if missing:
        raise FieldSpecError(f"No export rule for: {', '.join(missing)}")

    columns = list(zip(field_spec.headers(), (FIELD_RULES[f] for f in field_spec)))
    return [
        {header: rule(entity, placeholder) for header, rule in columns}
        for entity in entities
    ]
