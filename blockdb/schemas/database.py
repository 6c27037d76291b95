from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional, List, Any

from blockdb.schemas.property import PropertyDefinition, PropertyOptions, PropertyType

# Schemas pour les databases

class DatabaseCreate(BaseModel):
    page_id: str
    space_id: str
    title: Optional[str] = None
    icon: Optional[str] = None

class DatabaseUpdate(BaseModel):
    title: Optional[str] = None
    icon: Optional[str] = None
    view_config: Optional[dict[str, Any]] = None

class DatabaseResponse(BaseModel):
    id: str
    slug_id: str
    title: Optional[str]
    icon: Optional[str]
    properties: List[PropertyDefinition]
    view_config: Optional[dict[str, Any]]
    page_id: Optional[str]
    space_id: str
    workspace_id: str
    creator_id: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

# Schemas pour les propriétés

class PropertyCreate(BaseModel):
    name: str
    type: PropertyType
    options: Optional[PropertyOptions] = None

class PropertyUpdate(BaseModel):
    """Seuls les champs envoyés sont remplacés"""
    name: Optional[str] = None
    type: Optional[PropertyType] = None
    width: Optional[int] = None
    options: Optional[PropertyOptions] = None

class PropertyReorder(BaseModel):
    property_ids: List[str]
