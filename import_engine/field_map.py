"""
import_engine.field_map - Field identifiers ↔ columns.

A FieldSpec is the ordered list of field identifiers that governs which
columns are read on import and written on export.  It is validated once,
when it is built, so row processing never sees an unknown field.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import config
from import_engine.errors import FieldSpecError

# Field identifier → display header, where plain capitalisation is wrong
HEADER_OVERRIDES: dict[str, str] = {
    "category": "Category",
    "supplier": "Supplier",
    "uuid":     "UUID",
}


def normalise_identifier(identifier: str) -> str:
    """Lower-case, trim, map spaces to underscores and apply legacy aliases."""
    key = str(identifier).strip().lower().replace(" ", "_")
    return config.FIELD_ALIASES.get(key, key)


def split_identifiers(values: Iterable[str]) -> list[str]:
    """Flatten ``["name,category", "supplier"]`` into single identifiers."""
    out: list[str] = []
    for value in values:
        out.extend(p.strip() for p in str(value).split(",") if p.strip())
    return out


def header_for(identifier: str) -> str:
    """Human-readable column header: ``file_path`` → ``File path``."""
    if identifier in HEADER_OVERRIDES:
        return HEADER_OVERRIDES[identifier]
    text = identifier.replace("_", " ")
    return text[:1].upper() + text[1:]


@dataclass(frozen=True)
class FieldSpec:
    fields: tuple[str, ...]

    @classmethod
    def parse(cls, identifiers: Iterable[str], allowed: Iterable[str]) -> "FieldSpec":
        allowed = tuple(allowed)
        fields: list[str] = []
        for raw in identifiers:
            key = normalise_identifier(raw)
            if not key:
                continue
            if key not in allowed:
                raise FieldSpecError(
                    f"Unknown field '{raw}' (allowed: {', '.join(allowed)})"
                )
            if key in fields:
                raise FieldSpecError(f"Field '{key}' requested more than once")
            fields.append(key)
        if not fields:
            raise FieldSpecError("At least one field is required")
        return cls(tuple(fields))

    @classmethod
    def for_import(cls, identifiers: Iterable[str] | None = None) -> "FieldSpec":
        spec = cls.parse(identifiers or config.IMPORT_FIELDS, config.IMPORT_FIELDS)
        missing = [f for f in config.IMPORT_REQUIRED_FIELDS if f not in spec]
        if missing:
            raise FieldSpecError(
                f"Import field list must include {', '.join(missing)}"
            )
        return spec

    @classmethod
    def for_export(cls, identifiers: Iterable[str] | None = None) -> "FieldSpec":
        return cls.parse(identifiers or config.DEFAULT_EXPORT_FIELDS, config.EXPORT_FIELDS)

    def headers(self) -> list[str]:
        return [header_for(f) for f in self.fields]

    def __iter__(self):
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __contains__(self, item) -> bool:
        return item in self.fields
