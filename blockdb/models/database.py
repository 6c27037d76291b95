"""Database model (le conteneur du schéma)"""

from sqlalchemy import Column, String, DateTime, JSON
from datetime import datetime
from blockdb.core.database import Base
from blockdb.core.identifiers import new_id


class DatabaseBlock(Base):
    __tablename__ = "databases"

    id = Column(String(36), primary_key=True, default=new_id)
    slug_id = Column(String, unique=True, nullable=False, index=True)

    title = Column(String, nullable=True)
    icon = Column(String, nullable=True)
    # liste ordonnée des PropertyDefinition (l'ordre = ordre d'affichage)
    properties = Column(JSON, nullable=False, default=list)
    view_config = Column(JSON, nullable=True, default=dict)  # tri/filtres/colonnes cachées, opaque

    page_id = Column(String(36), nullable=True, index=True)
    space_id = Column(String(36), nullable=False)
    workspace_id = Column(String(36), nullable=False, index=True)
    creator_id = Column(String(36), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    deleted_at = Column(DateTime, nullable=True)
