from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from blockdb.core.database import get_db
from blockdb.core.permissions import EDIT, READ, get_capability_checker, require_capability
from blockdb.core.security import Actor, get_current_actor
from blockdb.schemas.row import RowUpdate, RowContentUpdate, RowMove, RowResponse, RowWithContent
from blockdb.services import row_service

router = APIRouter(prefix="/rows", tags=["rows"])

@router.get("/slug/{slug_id}", response_model=RowWithContent)
def get_row_by_slug(
    slug_id: str,
    include_content: bool = False,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    checker=Depends(get_capability_checker)
):
    row = row_service.get_row_by_slug(db, slug_id, include_content=include_content)
    require_capability(checker, actor, row.space_id, READ)
    return _with_content(row, include_content)

@router.get("/{row_id}", response_model=RowWithContent)
def get_row(
    row_id: str,
    include_content: bool = False,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    checker=Depends(get_capability_checker)
):
    """Récupérer une ligne (contenu seulement si demandé)"""
    row = row_service.get_row(db, row_id, include_content=include_content)
    require_capability(checker, actor, row.space_id, READ)
    return _with_content(row, include_content)

@router.put("/{row_id}", response_model=RowResponse)
def update_row(
    row_id: str,
    data: RowUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    checker=Depends(get_capability_checker)
):
    """Modifier titre / icône / propriétés (fusion)"""
    require_capability(checker, actor, row_service.owning_space_id(db, row_id), EDIT)
    return row_service.update_row(db, actor.user_id, row_id, data.model_dump(exclude_unset=True))

@router.put("/{row_id}/content", response_model=RowWithContent)
def update_row_content(
    row_id: str,
    data: RowContentUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    checker=Depends(get_capability_checker)
):
    require_capability(checker, actor, row_service.owning_space_id(db, row_id), EDIT)
    return row_service.update_row_content(db, actor.user_id, row_id, data.content)

@router.post("/{row_id}/move", response_model=RowResponse)
def move_row(
    row_id: str,
    data: RowMove,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    checker=Depends(get_capability_checker)
):
    """Déplacer une ligne (seule la position change)"""
    require_capability(checker, actor, row_service.owning_space_id(db, row_id), EDIT)
    return row_service.move_row(db, row_id, after_row_id=data.after_row_id, before_row_id=data.before_row_id)

@router.delete("/{row_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_row(
    row_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    checker=Depends(get_capability_checker)
):
    """Supprimer une ligne (soft delete)"""
    require_capability(checker, actor, row_service.owning_space_id(db, row_id), EDIT)
    row_service.delete_row(db, row_id)


def _with_content(row, include_content: bool) -> RowWithContent:
    # sans include_content on ne touche pas à la colonne différée
    data = RowResponse.model_validate(row).model_dump()
    if include_content:
        data["content"] = row.content
    return RowWithContent(**data)
