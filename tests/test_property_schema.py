import pytest
from pydantic import ValidationError
from blockdb.core.errors import InvalidState, NotFound
from blockdb.schemas.property import PropertyDefinition, PropertyOptions, PropertyType, SelectOption
from blockdb.services.property_schema import (
    append_property, replace_property, remove_property, reorder,
    load_properties, dump_properties, validate_property_values
)


def make_schema():
    return [
        PropertyDefinition(name="Title", type=PropertyType.TEXT),
        PropertyDefinition(name="Points", type=PropertyType.NUMBER),
    ]

# ============ TESTS liste de propriétés ============

def test_append_property_keeps_existing_ids():
    """Ajout en fin de liste avec un id neuf"""
    schema = make_schema()
    ids = [p.id for p in schema]

    updated = append_property(schema, "Due", PropertyType.DATE)

    assert [p.id for p in updated[:2]] == ids
    assert updated[2].name == "Due"
    assert updated[2].type == PropertyType.DATE
    assert updated[2].id not in ids
    # la liste d'origine n'est pas modifiée
    assert len(schema) == 2

def test_replace_property_keeps_id_and_position():
    schema = make_schema()
    target = schema[0]

    updated = replace_property(schema, target.id, {"name": "Name", "type": "url", "width": 240})

    assert updated[0].id == target.id
    assert updated[0].name == "Name"
    assert updated[0].type == PropertyType.URL
    assert updated[0].width == 240
    assert updated[1] == schema[1]

def test_replace_property_only_supplied_fields():
    schema = make_schema()
    updated = replace_property(schema, schema[1].id, {"width": 90})
    assert updated[1].name == "Points"
    assert updated[1].type == PropertyType.NUMBER
    assert updated[1].width == 90

def test_replace_property_ignores_null_name():
    schema = make_schema()
    updated = replace_property(schema, schema[0].id, {"name": None})
    assert updated[0].name == "Title"

def test_replace_property_options_from_dict():
    schema = make_schema()
    updated = replace_property(schema, schema[0].id, {
        "type": "select",
        "options": {"options": [{"id": "o1", "label": "Todo", "color": "red"}]}
    })
    assert updated[0].options.option_ids() == ["o1"]

def test_replace_unknown_property():
    with pytest.raises(NotFound):
        replace_property(make_schema(), "nope", {"name": "x"})

def test_remove_property():
    schema = make_schema()
    updated = remove_property(schema, schema[0].id)
    assert [p.name for p in updated] == ["Points"]

def test_remove_unknown_property():
    with pytest.raises(NotFound):
        remove_property(make_schema(), "nope")

def test_remove_last_property_fails():
    """Une database garde toujours au moins une colonne"""
    schema = make_schema()[:1]
    with pytest.raises(InvalidState):
        remove_property(schema, schema[0].id)

def test_reorder():
    schema = make_schema()
    updated = reorder(schema, [schema[1].id, schema[0].id])
    assert [p.name for p in updated] == ["Points", "Title"]

def test_reorder_unknown_id():
    schema = make_schema()
    with pytest.raises(NotFound):
        reorder(schema, [schema[0].id, "nope"])

def test_reorder_must_be_a_permutation():
    schema = make_schema()
    with pytest.raises(InvalidState):
        reorder(schema, [schema[0].id])
    with pytest.raises(InvalidState):
        reorder(schema, [schema[0].id, schema[0].id])

def test_storage_roundtrip_keeps_select_options():
    schema = append_property(make_schema(), "Status", PropertyType.SELECT, PropertyOptions(
        options=[SelectOption(id="o1", label="Todo"), SelectOption(id="o2", label="Done", color="green")]
    ))
    stored = dump_properties(schema)
    assert stored[2]["options"]["options"][0] == {"id": "o1", "label": "Todo", "color": "gray"}
    # width=None n'est pas stocké
    assert "width" not in stored[0]
    assert load_properties(stored) == schema

def test_select_option_accepts_name_alias():
    option = SelectOption.model_validate({"id": "o1", "name": "Todo"})
    assert option.label == "Todo"

def test_select_option_bad_color():
    with pytest.raises(ValidationError):
        SelectOption(label="Todo", color="neon")

def test_load_properties_empty():
    assert load_properties(None) == []
    assert load_properties([]) == []

# ============ TESTS validation des valeurs ============

def test_validate_values_ok():
    schema = [
        PropertyDefinition(id="t", name="Title", type=PropertyType.TEXT),
        PropertyDefinition(id="n", name="Points", type=PropertyType.NUMBER),
        PropertyDefinition(id="d", name="Due", type=PropertyType.DATE),
        PropertyDefinition(id="c", name="Done", type=PropertyType.CHECKBOX),
        PropertyDefinition(id="u", name="Link", type=PropertyType.URL),
        PropertyDefinition(id="e", name="Mail", type=PropertyType.EMAIL),
        PropertyDefinition(id="p", name="Owners", type=PropertyType.PERSON),
        PropertyDefinition(id="f", name="Formula", type=PropertyType.FORMULA,
                           options=PropertyOptions(formula="prop('Points') * 2")),
    ]
    values = {
        "t": "hello", "n": 3.5, "d": "2026-10-19", "c": True,
        "u": "https://example.com", "e": "a@b.co", "p": ["u1"], "f": {"anything": 1}
    }
    assert validate_property_values(schema, values) == []

def test_validate_values_reports_mismatches():
    schema = [
        PropertyDefinition(id="n", name="Points", type=PropertyType.NUMBER),
        PropertyDefinition(id="c", name="Done", type=PropertyType.CHECKBOX),
        PropertyDefinition(id="d", name="Due", type=PropertyType.DATE),
    ]
    issues = validate_property_values(schema, {"n": "three", "c": 1, "d": "tomorrow", "x": 1})
    assert len(issues) == 4
    assert any("unknown property x" in i for i in issues)

def test_validate_values_none_always_passes():
    schema = [PropertyDefinition(id="n", name="Points", type=PropertyType.NUMBER)]
    assert validate_property_values(schema, {"n": None}) == []

def test_validate_select_option_ids():
    schema = [
        PropertyDefinition(id="s", name="Status", type=PropertyType.SELECT, options=PropertyOptions(
            options=[SelectOption(id="o1", label="Todo")]
        )),
        PropertyDefinition(id="m", name="Tags", type=PropertyType.MULTI_SELECT, options=PropertyOptions(
            options=[SelectOption(id="t1", label="A"), SelectOption(id="t2", label="B")]
        )),
    ]
    assert validate_property_values(schema, {"s": "o1", "m": ["t1", "t2"]}) == []
    issues = validate_property_values(schema, {"s": "o9", "m": ["t1", "t9"]})
    assert len(issues) == 2
