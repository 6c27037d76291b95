from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from blockdb.core.config import settings
from blockdb.core.database import get_db
from blockdb.core.permissions import EDIT, READ, get_capability_checker, require_capability
from blockdb.core.security import Actor, get_current_actor
from blockdb.schemas.database import (
    DatabaseCreate, DatabaseUpdate, DatabaseResponse,
    PropertyCreate, PropertyUpdate, PropertyReorder
)
from blockdb.schemas.row import RowCreate, RowResponse, RowPage, RowCount
from blockdb.services import database_service, row_service
from typing import List

router = APIRouter(prefix="/databases", tags=["databases"])

# Crée une database (bloc dans une page)
@router.post("", response_model=DatabaseResponse, status_code=status.HTTP_201_CREATED)
def create_database(
    data: DatabaseCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    checker=Depends(get_capability_checker)
):
    require_capability(checker, actor, data.space_id, EDIT)
    return database_service.create_database(
        db, actor.user_id, actor.workspace_id,
        page_id=data.page_id, space_id=data.space_id, title=data.title, icon=data.icon
    )

@router.get("/slug/{slug_id}", response_model=DatabaseResponse)
def get_database_by_slug(
    slug_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    checker=Depends(get_capability_checker)
):
    database = database_service.get_database_by_slug(db, slug_id)
    require_capability(checker, actor, database.space_id, READ)
    return database

@router.get("/page/{page_id}", response_model=List[DatabaseResponse])
def list_page_databases(
    page_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    checker=Depends(get_capability_checker)
):
    # les databases d'une page, filtrées sur ce que l'acteur peut lire
    databases = database_service.list_page_databases(db, page_id, actor.workspace_id)
    return [d for d in databases if checker(actor, d.space_id, READ)]

@router.get("/{database_id}", response_model=DatabaseResponse)
def get_database(
    database_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    checker=Depends(get_capability_checker)
):
    database = database_service.get_database(db, database_id)
    require_capability(checker, actor, database.space_id, READ)
    return database

@router.put("/{database_id}", response_model=DatabaseResponse)
def update_database(
    database_id: str,
    data: DatabaseUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    checker=Depends(get_capability_checker)
):
    require_capability(checker, actor, database_service.owning_space_id(db, database_id), EDIT)
    return database_service.update_database(db, database_id, data.model_dump(exclude_unset=True))

@router.delete("/{database_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_database(
    database_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    checker=Depends(get_capability_checker)
):
    require_capability(checker, actor, database_service.owning_space_id(db, database_id), EDIT)
    database_service.delete_database(db, database_id)

# ========== PROPRIÉTÉS ==========

@router.post("/{database_id}/properties", response_model=DatabaseResponse)
def add_property(
    database_id: str,
    data: PropertyCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    checker=Depends(get_capability_checker)
):
    require_capability(checker, actor, database_service.owning_space_id(db, database_id), EDIT)
    return database_service.add_property(db, database_id, data.name, data.type, data.options)

@router.put("/{database_id}/properties/{property_id}", response_model=DatabaseResponse)
def update_property(
    database_id: str,
    property_id: str,
    data: PropertyUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    checker=Depends(get_capability_checker)
):
    require_capability(checker, actor, database_service.owning_space_id(db, database_id), EDIT)
    # on ne passe que les champs envoyés
    changes = {field: getattr(data, field) for field in data.model_fields_set}
    return database_service.update_property(db, database_id, property_id, changes)

@router.delete("/{database_id}/properties/{property_id}", response_model=DatabaseResponse)
def delete_property(
    database_id: str,
    property_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    checker=Depends(get_capability_checker)
):
    require_capability(checker, actor, database_service.owning_space_id(db, database_id), EDIT)
    return database_service.delete_property(db, database_id, property_id)

@router.post("/{database_id}/properties/reorder", response_model=DatabaseResponse)
def reorder_properties(
    database_id: str,
    data: PropertyReorder,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    checker=Depends(get_capability_checker)
):
    require_capability(checker, actor, database_service.owning_space_id(db, database_id), EDIT)
    return database_service.reorder_properties(db, database_id, data.property_ids)

# ========== LIGNES ==========

@router.post("/{database_id}/rows", response_model=RowResponse, status_code=status.HTTP_201_CREATED)
def create_row(
    database_id: str,
    data: RowCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    checker=Depends(get_capability_checker)
):
    require_capability(checker, actor, database_service.owning_space_id(db, database_id), EDIT)
    return row_service.create_row(
        db, actor.user_id, actor.workspace_id, database_id,
        title=data.title, icon=data.icon, properties=data.properties
    )

@router.get("/{database_id}/rows", response_model=RowPage)
def list_rows(
    database_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.ROWS_DEFAULT_PAGE_SIZE, ge=1, le=settings.ROWS_MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    checker=Depends(get_capability_checker)
):
    require_capability(checker, actor, database_service.owning_space_id(db, database_id), READ)
    result = row_service.list_rows(db, database_id, page, limit)
    return {"items": result.items, "meta": result.meta}

@router.get("/{database_id}/rows/count", response_model=RowCount)
def count_rows(
    database_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    checker=Depends(get_capability_checker)
):
    require_capability(checker, actor, database_service.owning_space_id(db, database_id), READ)
    return {"database_id": database_id, "count": row_service.count_rows(db, database_id)}
