import pytest
from conftest import USER_ID, WORKSPACE_ID, SPACE_ID, PAGE_ID
from blockdb.core.errors import InvalidState, NotFound
from blockdb.schemas.property import PropertyOptions, PropertyType, SelectOption
from blockdb.services import database_service, row_service
from blockdb.services.database_service import (
    create_database, get_database, get_database_by_slug, list_page_databases, update_database,
    delete_database, purge_database, add_property, update_property, delete_property,
    reorder_properties, get_properties, owning_space_id
)

# ============ TESTS création ============

def test_create_database_seeds_title_property(db):
    """Une database n'est jamais créée sans schéma"""
    database = create_database(db, USER_ID, WORKSPACE_ID, page_id=PAGE_ID, space_id=SPACE_ID)

    properties = get_properties(database)
    assert len(properties) == 1
    assert properties[0].name == "Title"
    assert properties[0].type == PropertyType.TEXT
    assert database.title == "Untitled Database"
    assert database.view_config == {}
    assert database.creator_id == USER_ID
    assert database.workspace_id == WORKSPACE_ID
    assert database.deleted_at is None
    assert len(database.slug_id) == 10

def test_get_database_by_slug(db, database):
    found = get_database_by_slug(db, database.slug_id)
    assert found.id == database.id

def test_get_database_not_found(db):
    with pytest.raises(NotFound):
        get_database(db, "missing")
    with pytest.raises(NotFound):
        get_database_by_slug(db, "missing")

def test_list_page_databases(db, database):
    other = create_database(db, USER_ID, WORKSPACE_ID, page_id=PAGE_ID, space_id=SPACE_ID, title="Other")
    create_database(db, USER_ID, WORKSPACE_ID, page_id="another-page", space_id=SPACE_ID)

    found = list_page_databases(db, PAGE_ID, WORKSPACE_ID)
    assert {d.id for d in found} == {database.id, other.id}
    # autre workspace -> rien
    assert list_page_databases(db, PAGE_ID, "other-workspace") == []

def test_owning_space_id(db, database):
    assert owning_space_id(db, database.id) == SPACE_ID

# ============ TESTS update / delete ============

def test_update_database(db, database):
    updated = update_database(db, database.id, {"title": "Roadmap", "view_config": {"hidden": ["x"]}})
    assert updated.title == "Roadmap"
    assert updated.view_config == {"hidden": ["x"]}
    assert updated.icon is None

def test_update_database_not_found(db):
    with pytest.raises(NotFound):
        update_database(db, "missing", {"title": "x"})

def test_delete_database_tombstones_rows(db, database):
    row = row_service.create_row(db, USER_ID, WORKSPACE_ID, database.id, title="R1")

    delete_database(db, database.id)

    with pytest.raises(NotFound):
        get_database(db, database.id)
    with pytest.raises(NotFound):
        row_service.get_row(db, row.id)

def test_delete_database_twice(db, database):
    delete_database(db, database.id)
    with pytest.raises(NotFound):
        delete_database(db, database.id)

def test_purge_database_is_idempotent(db, database):
    row_service.create_row(db, USER_ID, WORKSPACE_ID, database.id)
    database_id = database.id
    delete_database(db, database_id)

    # l'objet est détaché après la purge: on garde l'id à part
    assert purge_database(db, database_id) is True
    assert purge_database(db, database_id) is False

# ============ TESTS propriétés ============

def test_add_property_appends(db, database):
    title_id = get_properties(database)[0].id

    updated = add_property(db, database.id, "Status", PropertyType.SELECT, PropertyOptions(
        options=[SelectOption(id="o1", label="Todo")]
    ))

    properties = get_properties(updated)
    assert [p.name for p in properties] == ["Title", "Status"]
    assert properties[0].id == title_id
    assert properties[1].options.option_ids() == ["o1"]

def test_add_property_not_found(db):
    with pytest.raises(NotFound):
        add_property(db, "missing", "Status", PropertyType.TEXT)

def test_sequential_adds_keep_every_property(db, database):
    for name in ("A", "B", "C", "D"):
        add_property(db, database.id, name, PropertyType.TEXT)
    properties = get_properties(get_database(db, database.id))
    assert [p.name for p in properties] == ["Title", "A", "B", "C", "D"]

def test_update_property_keeps_id(db, database):
    prop = get_properties(database)[0]
    updated = update_property(db, database.id, prop.id, {"name": "Name", "type": PropertyType.NUMBER, "width": 120})
    properties = get_properties(updated)
    assert properties[0].id == prop.id
    assert properties[0].name == "Name"
    assert properties[0].type == PropertyType.NUMBER
    assert properties[0].width == 120

def test_update_property_not_found(db, database):
    with pytest.raises(NotFound):
        update_property(db, database.id, "nope", {"name": "x"})
    with pytest.raises(NotFound):
        update_property(db, "missing", "nope", {"name": "x"})

def test_delete_last_property_fails(db, database):
    """Supprimer l'unique propriété -> InvalidState, le schéma ne change pas"""
    prop = get_properties(database)[0]
    with pytest.raises(InvalidState):
        delete_property(db, database.id, prop.id)
    assert len(get_properties(get_database(db, database.id))) == 1

def test_delete_property(db, database):
    updated = add_property(db, database.id, "Status", PropertyType.TEXT)
    status_id = get_properties(updated)[1].id
    updated = delete_property(db, database.id, status_id)
    assert [p.name for p in get_properties(updated)] == ["Title"]

def test_delete_property_not_found(db, database):
    with pytest.raises(NotFound):
        delete_property(db, database.id, "nope")

def test_reorder_properties(db, database):
    add_property(db, database.id, "A", PropertyType.TEXT)
    updated = add_property(db, database.id, "B", PropertyType.TEXT)
    ids = [p.id for p in get_properties(updated)]

    updated = reorder_properties(db, database.id, list(reversed(ids)))
    assert [p.name for p in get_properties(updated)] == ["B", "A", "Title"]

def test_retype_does_not_touch_row_values(db, database):
    """Retyper une colonne ne convertit pas les valeurs déjà stockées"""
    prop = get_properties(database)[0]
    row = row_service.create_row(db, USER_ID, WORKSPACE_ID, database.id, properties={prop.id: "hello"})

    database_service.update_property(db, database.id, prop.id, {"type": PropertyType.NUMBER})

    assert row_service.get_row(db, row.id).properties[prop.id] == "hello"
