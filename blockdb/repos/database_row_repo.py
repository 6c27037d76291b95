"""
Row store - persistance des lignes, toujours servies dans l'ordre des positions.

L'ordre est celui des octets de `position` (COLLATE "C" sur Postgres, BINARY
par défaut sur SQLite), puis l'id pour départager deux positions identiques.
Les lignes supprimées (deleted_at non nul) ne sont jamais renvoyées.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, undefer

from blockdb.core.database import dialect_name
from blockdb.core.errors import Conflict
from blockdb.core.pagination import PaginationResult, paginate
from blockdb.models.database_row import DatabaseRow

logger = logging.getLogger(__name__)


def position_column(db: Session):
    if dialect_name(db) == "postgresql":
        return DatabaseRow.position.collate("C")
    return DatabaseRow.position


def live_rows(db: Session, database_id: str):
    return db.query(DatabaseRow).filter(
        DatabaseRow.database_id == database_id,
        DatabaseRow.deleted_at.is_(None)
    )


def find_by_id(db: Session, row_id: str, include_content: bool = False) -> Optional[DatabaseRow]:
    query = db.query(DatabaseRow).filter(
        DatabaseRow.id == row_id,
        DatabaseRow.deleted_at.is_(None)
    )
    if include_content:
        query = query.options(undefer(DatabaseRow.content))
    return query.first()


def find_by_slug_id(db: Session, slug_id: str, include_content: bool = False) -> Optional[DatabaseRow]:
    query = db.query(DatabaseRow).filter(
        DatabaseRow.slug_id == slug_id,
        DatabaseRow.deleted_at.is_(None)
    )
    if include_content:
        query = query.options(undefer(DatabaseRow.content))
    return query.first()


def list_by_database(db: Session, database_id: str, page: int = 1, per_page: int = None) -> PaginationResult:
    query = live_rows(db, database_id).order_by(position_column(db).asc(), DatabaseRow.id.asc())
    return paginate(query, page, per_page)


def last_position(db: Session, database_id: str) -> Optional[str]:
    """Position de la dernière ligne vivante (None si la database est vide)"""
    row = live_rows(db, database_id).with_entities(DatabaseRow.position).order_by(
        position_column(db).desc()
    ).first()
    return row[0] if row else None


def first_position(db: Session, database_id: str, exclude_row_id: Optional[str] = None) -> Optional[str]:
    query = live_rows(db, database_id)
    if exclude_row_id:
        query = query.filter(DatabaseRow.id != exclude_row_id)
    row = query.with_entities(DatabaseRow.position).order_by(position_column(db).asc()).first()
    return row[0] if row else None


def neighbor_position(db: Session, database_id: str, position: str, after: bool, exclude_row_id: Optional[str] = None) -> Optional[str]:
    """Position de la ligne juste après (after=True) ou juste avant la position donnée"""
    column = position_column(db)
    query = live_rows(db, database_id)
    if exclude_row_id:
        query = query.filter(DatabaseRow.id != exclude_row_id)
    if after:
        query = query.filter(column > position).order_by(column.asc())
    else:
        query = query.filter(column < position).order_by(column.desc())
    row = query.with_entities(DatabaseRow.position).first()
    return row[0] if row else None


def insert_row(db: Session, row: DatabaseRow) -> DatabaseRow:
    # la position doit déjà être calculée par l'appelant
    db.add(row)
    try:
        db.flush()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Row insert conflict (slug {row.slug_id}): {e.orig}")
        raise Conflict("Row identifier already exists", {"slug_id": row.slug_id}) from e
    return row


def update_row(db: Session, row: DatabaseRow, **fields) -> DatabaseRow:
    for field, value in fields.items():
        setattr(row, field, value)
    row.updated_at = datetime.utcnow()
    db.flush()
    return row


def soft_delete_row(db: Session, row_id: str):
    db.query(DatabaseRow).filter(
        DatabaseRow.id == row_id,
        DatabaseRow.deleted_at.is_(None)
    ).update({DatabaseRow.deleted_at: datetime.utcnow()}, synchronize_session=False)


def hard_delete_row(db: Session, row_id: str) -> int:
    # ignore le tombstone, irréversible, 0 si déjà supprimée
    return db.query(DatabaseRow).filter(DatabaseRow.id == row_id).delete(synchronize_session=False)


def soft_delete_rows_by_database(db: Session, database_id: str) -> int:
    return live_rows(db, database_id).update(
        {DatabaseRow.deleted_at: datetime.utcnow()}, synchronize_session=False
    )


def hard_delete_rows_by_database(db: Session, database_id: str) -> int:
    return db.query(DatabaseRow).filter(
        DatabaseRow.database_id == database_id
    ).delete(synchronize_session=False)


def count_rows(db: Session, database_id: str) -> int:
    return live_rows(db, database_id).count()
