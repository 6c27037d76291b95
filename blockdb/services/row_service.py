"""
Row service - cycle de vie des lignes d'une database.

Chaque opération résout d'abord la cible (ligne ou database) et lève NotFound
avant la moindre écriture. Le calcul de position (dernière position, voisins)
et l'écriture se font dans la même transaction.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from blockdb.core.config import settings
from blockdb.core.database import transaction
from blockdb.core.errors import InvalidState, NotFound
from blockdb.core.identifiers import generate_slug_id
from blockdb.core.pagination import PaginationResult
from blockdb.core.position import jittered_key_between
from blockdb.models.database_row import DatabaseRow
from blockdb.repos import database_row_repo
from blockdb.schemas.property import PropertyType
from blockdb.services import database_service, property_schema

logger = logging.getLogger(__name__)

# nom (insensible à la casse) des colonnes date remplies automatiquement
# TODO: remplacer par un vrai champ "valeur par défaut" dans PropertyDefinition
CREATED_PROPERTY_NAME = "created"


def today_iso() -> str:
    # date UTC au format YYYY-MM-DD
    return datetime.utcnow().date().isoformat()


def get_row(db: Session, row_id: str, include_content: bool = False) -> DatabaseRow:
    row = database_row_repo.find_by_id(db, row_id, include_content=include_content)
    if not row:
        raise NotFound("Database row not found", {"row_id": row_id})
    return row


def get_row_by_slug(db: Session, slug_id: str, include_content: bool = False) -> DatabaseRow:
    row = database_row_repo.find_by_slug_id(db, slug_id, include_content=include_content)
    if not row:
        raise NotFound("Database row not found", {"slug_id": slug_id})
    return row


def owning_space_id(db: Session, row_id: str) -> str:
    return get_row(db, row_id).space_id


def list_rows(db: Session, database_id: str, page: int = 1, limit: Optional[int] = None) -> PaginationResult:
    database_service.get_database(db, database_id)
    return database_row_repo.list_by_database(db, database_id, page, limit)


def count_rows(db: Session, database_id: str) -> int:
    database_service.get_database(db, database_id)
    return database_row_repo.count_rows(db, database_id)


def check_property_values(database, values: Dict[str, Any]):
    issues = property_schema.validate_property_values(database_service.get_properties(database), values)
    if not issues:
        return
    if settings.STRICT_PROPERTIES:
        raise InvalidState("Invalid property values", {"issues": issues})
    logger.warning(f"Database {database.id}: storing values that do not match the schema: {'; '.join(issues)}")


def fill_created_dates(database, properties: Dict[str, Any]) -> Dict[str, Any]:
    """Colonne date nommée "Created" -> date du jour, seulement si aucune valeur fournie"""
    filled = dict(properties)
    for prop in database_service.get_properties(database):
        if prop.type != PropertyType.DATE or prop.name.lower() != CREATED_PROPERTY_NAME:
            continue
        if filled.get(prop.id) in (None, ""):
            filled[prop.id] = today_iso()
    return filled


def create_row(
    db: Session,
    user_id: str,
    workspace_id: str,
    database_id: str,
    title: Optional[str] = None,
    icon: Optional[str] = None,
    properties: Optional[Dict[str, Any]] = None
) -> DatabaseRow:
    """Ajoute une ligne à la fin de la database"""
    with transaction(db):
        # le verrou sur la database sérialise les créations concurrentes
        database = database_service.get_database(db, database_id, for_update=True)

        values = properties or {}
        check_property_values(database, values)
        values = fill_created_dates(database, values)

        last = database_row_repo.last_position(db, database_id)
        row = database_row_repo.insert_row(db, DatabaseRow(
            slug_id=generate_slug_id(),
            position=jittered_key_between(last, None),
            title=title,
            icon=icon,
            properties=values,
            database_id=database_id,
            space_id=database.space_id,
            workspace_id=workspace_id,
            creator_id=user_id,
            last_updated_by_id=user_id
        ))

    logger.info(f"Row {row.id} created in database {database_id}")
    db.refresh(row)
    return row


def update_row(db: Session, user_id: str, row_id: str, changes: Dict[str, Any]) -> DatabaseRow:
    """title / icon remplacés s'ils sont fournis, properties fusionnées clé par clé.
    Le contenu n'est jamais touché ici."""
    with transaction(db):
        row = get_row(db, row_id)
        fields = {"last_updated_by_id": user_id}

        if "title" in changes:
            fields["title"] = changes["title"]
        if "icon" in changes:
            fields["icon"] = changes["icon"]
        if changes.get("properties") is not None:
            database = database_service.get_database(db, row.database_id)
            check_property_values(database, changes["properties"])
            existing = row.properties if isinstance(row.properties, dict) else {}
            fields["properties"] = {**existing, **changes["properties"]}

        database_row_repo.update_row(db, row, **fields)

    db.refresh(row)
    return row


def update_row_content(db: Session, user_id: str, row_id: str, content: Any) -> DatabaseRow:
    """Remplace le contenu en entier, renvoie la ligne avec le contenu"""
    with transaction(db):
        row = get_row(db, row_id)
        database_row_repo.update_row(db, row, content=content, last_updated_by_id=user_id)

    return get_row(db, row_id, include_content=True)


def _anchor(db: Session, row: DatabaseRow, anchor_id: str) -> DatabaseRow:
    anchor = get_row(db, anchor_id)
    if anchor.database_id != row.database_id:
        raise InvalidState("Anchor row belongs to another database", {"row_id": anchor_id})
    return anchor


def move_row(
    db: Session,
    row_id: str,
    after_row_id: Optional[str] = None,
    before_row_id: Optional[str] = None
) -> DatabaseRow:
    """Déplace une ligne en changeant seulement sa position.

    - after_row_id: juste après l'ancre
    - before_row_id: juste avant l'ancre
    - les deux: entre les deux ancres
    - aucun: en tête
    """
    with transaction(db):
        row = get_row(db, row_id)
        database_id = row.database_id

        if after_row_id and before_row_id:
            lower = _anchor(db, row, after_row_id).position
            upper = _anchor(db, row, before_row_id).position
            if lower >= upper:
                raise InvalidState("after_row_id must come before before_row_id")
        elif after_row_id:
            lower = _anchor(db, row, after_row_id).position
            upper = database_row_repo.neighbor_position(db, database_id, lower, after=True, exclude_row_id=row.id)
        elif before_row_id:
            upper = _anchor(db, row, before_row_id).position
            lower = database_row_repo.neighbor_position(db, database_id, upper, after=False, exclude_row_id=row.id)
        else:
            lower = None
            upper = database_row_repo.first_position(db, database_id, exclude_row_id=row.id)

        database_row_repo.update_row(db, row, position=jittered_key_between(lower, upper))

    db.refresh(row)
    return row


def delete_row(db: Session, row_id: str):
    with transaction(db):
        get_row(db, row_id)
        database_row_repo.soft_delete_row(db, row_id)
    logger.info(f"Row {row_id} deleted")


def hard_delete_row(db: Session, row_id: str) -> bool:
    """Suppression définitive, idempotente (marche aussi sur une ligne déjà soft-deleted)"""
    with transaction(db):
        deleted = database_row_repo.hard_delete_row(db, row_id)
    if deleted:
        logger.info(f"Row {row_id} permanently deleted")
    return bool(deleted)
