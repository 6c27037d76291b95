"""Accès aux tables databases"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from blockdb.core.errors import Conflict
from blockdb.models.database import DatabaseBlock

logger = logging.getLogger(__name__)


def find_by_id(db: Session, database_id: str, for_update: bool = False) -> Optional[DatabaseBlock]:
    # for_update: verrou ligne (Postgres) pour les lecture-modification-écriture
    query = db.query(DatabaseBlock).filter(
        DatabaseBlock.id == database_id,
        DatabaseBlock.deleted_at.is_(None)
    )
    if for_update:
        query = query.with_for_update()
    return query.first()


def find_by_slug_id(db: Session, slug_id: str) -> Optional[DatabaseBlock]:
    return db.query(DatabaseBlock).filter(
        DatabaseBlock.slug_id == slug_id,
        DatabaseBlock.deleted_at.is_(None)
    ).first()


def find_by_page_id(db: Session, page_id: str, workspace_id: str) -> List[DatabaseBlock]:
    return db.query(DatabaseBlock).filter(
        DatabaseBlock.page_id == page_id,
        DatabaseBlock.workspace_id == workspace_id,
        DatabaseBlock.deleted_at.is_(None)
    ).order_by(DatabaseBlock.created_at, DatabaseBlock.id).all()


def insert_database(db: Session, database: DatabaseBlock) -> DatabaseBlock:
    db.add(database)
    try:
        db.flush()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Database insert conflict (slug {database.slug_id}): {e.orig}")
        raise Conflict("Database identifier already exists", {"slug_id": database.slug_id}) from e
    return database


def update_database(db: Session, database: DatabaseBlock, **fields) -> DatabaseBlock:
    for field, value in fields.items():
        setattr(database, field, value)
    database.updated_at = datetime.utcnow()
    db.flush()
    return database


def soft_delete(db: Session, database_id: str):
    db.query(DatabaseBlock).filter(
        DatabaseBlock.id == database_id,
        DatabaseBlock.deleted_at.is_(None)
    ).update({DatabaseBlock.deleted_at: datetime.utcnow()}, synchronize_session=False)


def hard_delete(db: Session, database_id: str) -> int:
    # idempotent: 0 si déjà supprimée
    return db.query(DatabaseBlock).filter(
        DatabaseBlock.id == database_id
    ).delete(synchronize_session=False)
