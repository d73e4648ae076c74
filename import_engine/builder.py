"""
import_engine.builder - Turn validated values + resolved ids into a Material.
"""

from __future__ import annotations

import json

from db.models import Material


def build_material(values: dict, category_id: int, supplier_id: int) -> Material:
    """
    Pure transformation, no session.  Anything absent from ``values``
    falls back to None.
    """
    return Material(
        name=values["name"],
        category_id=category_id,
        supplier_id=supplier_id,
        description=values.get("description"),
        file_path=values.get("file_path"),
        metadata_json=_compact_json(values.get("metadata")),
    )


def _compact_json(raw: str | None) -> str | None:
    if raw is None:
        return None
    return json.dumps(json.loads(raw), ensure_ascii=False, separators=(",", ":"))
