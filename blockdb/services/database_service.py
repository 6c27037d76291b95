"""
Database service - création et évolution du schéma.

Toute modification du schéma est une lecture-modification-écriture de la
liste complète des propriétés, dans une seule transaction, avec la ligne
databases verrouillée quand le SGBD le permet. Deux éditions envoyées en même
temps sont donc appliquées l'une après l'autre; côté client c'est toujours
"le dernier qui écrit gagne" sur la liste entière.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from blockdb.core.database import transaction
from blockdb.core.errors import NotFound
from blockdb.core.identifiers import generate_slug_id
from blockdb.models.database import DatabaseBlock
from blockdb.repos import database_repo, database_row_repo
from blockdb.schemas.property import PropertyDefinition, PropertyOptions, PropertyType
from blockdb.services import property_schema

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled Database"
DEFAULT_PROPERTY_NAME = "Title"


def get_database(db: Session, database_id: str, for_update: bool = False) -> DatabaseBlock:
    database = database_repo.find_by_id(db, database_id, for_update=for_update)
    if not database:
        raise NotFound("Database not found", {"database_id": database_id})
    return database


def get_database_by_slug(db: Session, slug_id: str) -> DatabaseBlock:
    database = database_repo.find_by_slug_id(db, slug_id)
    if not database:
        raise NotFound("Database not found", {"slug_id": slug_id})
    return database


def list_page_databases(db: Session, page_id: str, workspace_id: str) -> List[DatabaseBlock]:
    return database_repo.find_by_page_id(db, page_id, workspace_id)


def get_properties(database: DatabaseBlock) -> List[PropertyDefinition]:
    return property_schema.load_properties(database.properties)


def owning_space_id(db: Session, database_id: str) -> str:
    # pour le contrôle de droits fait par l'appelant
    return get_database(db, database_id).space_id


def create_database(
    db: Session,
    user_id: str,
    workspace_id: str,
    page_id: str,
    space_id: str,
    title: Optional[str] = None,
    icon: Optional[str] = None
) -> DatabaseBlock:
    """Crée une database avec une seule colonne texte "Title" (jamais sans schéma)"""
    default_property = PropertyDefinition(name=DEFAULT_PROPERTY_NAME, type=PropertyType.TEXT)

    with transaction(db):
        database = database_repo.insert_database(db, DatabaseBlock(
            slug_id=generate_slug_id(),
            title=title or DEFAULT_TITLE,
            icon=icon,
            properties=property_schema.dump_properties([default_property]),
            view_config={},
            page_id=page_id,
            space_id=space_id,
            workspace_id=workspace_id,
            creator_id=user_id
        ))

    logger.info(f"Database {database.id} created on page {page_id}")
    db.refresh(database)
    return database


def update_database(db: Session, database_id: str, changes: Dict[str, Any]) -> DatabaseBlock:
    """title / icon / view_config: seuls les champs fournis et non nuls sont remplacés"""
    with transaction(db):
        database = get_database(db, database_id, for_update=True)
        fields = {
            field: changes[field]
            for field in ("title", "icon", "view_config")
            if changes.get(field) is not None
        }
        database_repo.update_database(db, database, **fields)

    db.refresh(database)
    return database


def delete_database(db: Session, database_id: str):
    """Soft delete de la database et de toutes ses lignes"""
    with transaction(db):
        get_database(db, database_id, for_update=True)
        rows = database_row_repo.soft_delete_rows_by_database(db, database_id)
        database_repo.soft_delete(db, database_id)
    logger.info(f"Database {database_id} deleted ({rows} rows tombstoned)")


def purge_database(db: Session, database_id: str) -> bool:
    """Suppression définitive, idempotente (False si rien à supprimer)"""
    with transaction(db):
        database_row_repo.hard_delete_rows_by_database(db, database_id)
        deleted = database_repo.hard_delete(db, database_id)
    if deleted:
        logger.info(f"Database {database_id} permanently deleted")
    return bool(deleted)


def _mutate_schema(db: Session, database_id: str, mutate) -> DatabaseBlock:
    # lecture + écriture de la liste complète dans la même transaction
    with transaction(db):
        database = get_database(db, database_id, for_update=True)
        properties = mutate(get_properties(database))
        database_repo.update_database(db, database, properties=property_schema.dump_properties(properties))

    db.refresh(database)
    return database


def add_property(
    db: Session,
    database_id: str,
    name: str,
    type: PropertyType,
    options: Optional[PropertyOptions] = None
) -> DatabaseBlock:
    database = _mutate_schema(
        db, database_id,
        lambda properties: property_schema.append_property(properties, name, type, options)
    )
    logger.info(f"Property '{name}' ({PropertyType(type).value}) added to database {database_id}")
    return database


def update_property(db: Session, database_id: str, property_id: str, changes: Dict[str, Any]) -> DatabaseBlock:
    return _mutate_schema(
        db, database_id,
        lambda properties: property_schema.replace_property(properties, property_id, changes)
    )


def delete_property(db: Session, database_id: str, property_id: str) -> DatabaseBlock:
    database = _mutate_schema(
        db, database_id,
        lambda properties: property_schema.remove_property(properties, property_id)
    )
    logger.info(f"Property {property_id} removed from database {database_id}")
    return database


def reorder_properties(db: Session, database_id: str, property_ids: List[str]) -> DatabaseBlock:
    return _mutate_schema(
        db, database_id,
        lambda properties: property_schema.reorder(properties, property_ids)
    )
