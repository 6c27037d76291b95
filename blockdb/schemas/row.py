from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional, Any, List

from blockdb.schemas.pagination import PageMeta

class RowCreate(BaseModel):
    """Créer une ligne"""
    title: Optional[str] = None
    icon: Optional[str] = None
    properties: Optional[dict[str, Any]] = None

class RowUpdate(BaseModel):
    """Modifier une ligne (properties fusionnées clé par clé)"""
    title: Optional[str] = None
    icon: Optional[str] = None
    properties: Optional[dict[str, Any]] = None

class RowContentUpdate(BaseModel):
    # document riche, jamais interprété
    content: Optional[Any] = None

class RowMove(BaseModel):
    after_row_id: Optional[str] = None
    before_row_id: Optional[str] = None

class RowResponse(BaseModel):
    """Ligne retournée (sans le contenu)"""
    id: str
    slug_id: str
    position: str
    title: Optional[str]
    icon: Optional[str]
    properties: dict[str, Any]
    database_id: str
    space_id: str
    workspace_id: str
    creator_id: Optional[str]
    last_updated_by_id: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class RowWithContent(RowResponse):
    content: Optional[Any] = None

class RowPage(BaseModel):
    items: List[RowResponse]
    meta: PageMeta

class RowCount(BaseModel):
    database_id: str
    count: int
