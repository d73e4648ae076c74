"""
import_engine.validator - Check one parsed row against the import schema.

Pure function: no session, no side effects.  Every failing field is
reported, a row is never half-accepted.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field

import config
from import_engine.field_map import FieldSpec


@dataclass
class ValidationOutcome:
    values: dict[str, str | None] = field(default_factory=dict)
    errors: list[tuple[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def error_dicts(self) -> list[dict]:
        return [{"field": f, "reason": r} for f, r in self.errors]

    def message(self) -> str:
        return "; ".join(f"{f}: {r}" for f, r in self.errors)


def validate(row: dict, field_spec: FieldSpec) -> ValidationOutcome:
    """Validate ``row`` for every field in ``field_spec``.  Extra columns are ignored."""
    outcome = ValidationOutcome()

    for name in field_spec:
        raw = row.get(name)
        text = "" if raw is None else str(raw).strip()

        if name in config.IMPORT_REQUIRED_FIELDS:
            if not text:
                outcome.errors.append((name, "is required"))
            elif len(text) > config.MAX_NAME_LENGTH:
                outcome.errors.append(
                    (name, f"must be at most {config.MAX_NAME_LENGTH} characters")
                )
            else:
                outcome.values[name] = text

        elif name == "metadata":
            if not text:
                outcome.values[name] = None
                continue
            try:
                json.loads(text)
            except ValueError:
                outcome.errors.append((name, "must be valid JSON"))
            else:
                outcome.values[name] = text

        elif name == "description":
            outcome.values[name] = raw if raw not in (None, "") else None

        else:
            outcome.values[name] = text or None

    return outcome
