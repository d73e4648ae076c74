import csv
import io
from datetime import datetime

import pytest
from openpyxl import load_workbook

from db.models import Category, Material, Supplier
from export_engine import export_materials, project
from export_engine.writer import render
from import_engine.errors import FieldSpecError
from import_engine.field_map import FieldSpec
from tests.factories import MaterialFactory


def _material(**kw):
    defaults = dict(
        name="Steel Rod",
        category=Category(name="Metals"),
        supplier=Supplier(name="Acme Co"),
        description="Hot rolled",
    )
    defaults.update(kw)
    return Material(**defaults)


def test_default_projection_headers_and_values():
    spec = FieldSpec.for_export(["name", "category", "supplier", "description"])
    rows = project([_material()], spec)

    assert spec.headers() == ["Name", "Category", "Supplier", "Description"]
    assert list(rows[0]) == ["Name", "Category", "Supplier", "Description"]
    assert rows[0] == {"Name": "Steel Rod", "Category": "Metals",
                       "Supplier": "Acme Co", "Description": "Hot rolled"}


def test_columns_follow_requested_order():
    spec = FieldSpec.for_export(["supplier", "name"])
    rows = project([_material()], spec)
    assert list(rows[0].items()) == [("Supplier", "Acme Co"), ("Name", "Steel Rod")]


def test_missing_relation_uses_placeholder():
    spec = FieldSpec.for_export(["name", "category", "supplier"])
    rows = project([_material(category=None, supplier=None)], spec)
    assert rows[0]["Category"] == "N/A"
    assert rows[0]["Supplier"] == "N/A"

    rows = project([_material(category=None)], spec, placeholder="-")
    assert rows[0]["Category"] == "-"


def test_scalars_and_timestamps_are_text():
    spec = FieldSpec.for_export(["description", "file_path", "metadata", "created_at"])
    material = _material(
        description=None,
        metadata_json='{"grade":"S235"}',
        created_at=datetime(2025, 4, 18, 12, 52, 50),
    )
    row = project([material], spec)[0]

    assert row["Description"] == ""
    assert row["File path"] == ""
    assert row["Metadata"] == '{"grade": "S235"}'
    assert row["Created at"] == "2025-04-18 12:52:50"


def test_legacy_id_fields_export_names():
    """category_id / supplier_id export the related name, once each."""
    spec = FieldSpec.for_export(["name", "category_id", "supplier_id"])
    rows = project([_material()], spec)
    assert rows[0] == {"Name": "Steel Rod", "Category": "Metals", "Supplier": "Acme Co"}


def test_unknown_export_field_rejected():
    with pytest.raises(FieldSpecError):
        FieldSpec.for_export(["name", "price"])


def test_render_csv():
    data = render(["Name", "Category"], [{"Name": "A", "Category": "B"}], "csv")
    text = data.decode("utf-8-sig")
    assert list(csv.reader(io.StringIO(text))) == [["Name", "Category"], ["A", "B"]]


def test_render_rejects_unknown_format():
    with pytest.raises(ValueError):
        render(["Name"], [], "pdf")


def test_export_materials_xlsx(session):
    MaterialFactory(name="Bolt", category__name="Fasteners", supplier__name="Acme Co")
    MaterialFactory(name="Anchor", category__name="Hardware", supplier__name="Bolt Inc")

    export = export_materials(session)
    assert export.filename == "materials.xlsx"
    assert export.row_count == 2

    ws = load_workbook(io.BytesIO(export.content)).active
    values = [list(r) for r in ws.iter_rows(values_only=True)]
    assert values[0] == ["Name", "Category", "Supplier", "Description"]
    # Ordered by name
    assert [v[:3] for v in values[1:]] == [
        ["Anchor", "Hardware", "Bolt Inc"],
        ["Bolt", "Fasteners", "Acme Co"],
    ]


def test_export_materials_csv(session):
    MaterialFactory(name="Bolt", category__name="Fasteners", supplier__name="Acme Co")
    spec = FieldSpec.for_export(["name", "supplier"])

    export = export_materials(session, spec, "csv")
    assert export.filename == "materials.csv"
    assert export.mimetype == "text/csv"
    assert export.content.decode("utf-8-sig").splitlines() == ["Name,Supplier", "Bolt,Acme Co"]
