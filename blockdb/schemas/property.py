from enum import Enum
from typing import List, Literal, Optional
from blockdb.core.identifiers import new_id
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# Schéma des colonnes d'une database

class PropertyType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    SELECT = "select"
    MULTI_SELECT = "multi_select"
    DATE = "date"
    CHECKBOX = "checkbox"
    URL = "url"
    EMAIL = "email"
    PERSON = "person"
    FILES = "files"
    FORMULA = "formula"
    RELATION = "relation"


# couleurs dispo pour les options select
SELECT_COLORS = ("gray", "brown", "orange", "yellow", "green", "blue", "purple", "pink", "red")


class SelectOption(BaseModel):
    """Option d'une colonne select / multi_select"""
    id: str = Field(default_factory=new_id)
    label: str = Field(validation_alias=AliasChoices("label", "name"))
    color: str = "gray"

    @field_validator("color")
    @classmethod
    def check_color(cls, v: str) -> str:
        if v not in SELECT_COLORS:
            raise ValueError(f"color must be one of {', '.join(SELECT_COLORS)}")
        return v


class PropertyOptions(BaseModel):
    """Options qui dépendent du type (le reste est ignoré par le store)"""
    # select / multi_select
    options: Optional[List[SelectOption]] = None
    # number
    format: Optional[Literal["number", "percent", "currency"]] = None
    # date
    include_time: Optional[bool] = None
    date_format: Optional[str] = None
    # formula: expression jamais évaluée ici
    formula: Optional[str] = None
    # relation: référence opaque, pas d'intégrité vérifiée
    related_database_id: Optional[str] = None

    model_config = ConfigDict(extra="allow")

    def option_ids(self) -> List[str]:
        return [o.id for o in self.options or []]


class PropertyDefinition(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    type: PropertyType
    width: Optional[int] = None
    options: Optional[PropertyOptions] = None

    def to_storage(self) -> dict:
        # forme JSON stockée dans databases.properties
        return self.model_dump(mode="json", exclude_none=True)
