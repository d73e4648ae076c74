from import_engine.builder import build_material


def test_maps_values_and_ids():
    material = build_material(
        {"name": "Steel Rod", "description": "12 mm", "metadata": '{ "grade": "S235" }'},
        category_id=3, supplier_id=7,
    )
    assert material.name == "Steel Rod"
    assert material.category_id == 3
    assert material.supplier_id == 7
    assert material.description == "12 mm"
    assert material.metadata_json == '{"grade":"S235"}'


def test_absent_fields_default_to_none():
    first = build_material({"name": "A", "description": "old"}, 1, 1)
    second = build_material({"name": "B"}, 1, 1)

    assert first.description == "old"
    assert second.description is None
    assert second.file_path is None
    assert second.metadata_json is None
