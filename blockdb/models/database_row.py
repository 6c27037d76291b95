"""DatabaseRow model"""

from sqlalchemy import Column, String, DateTime, ForeignKey, JSON, Index
from sqlalchemy.orm import deferred
from datetime import datetime
from blockdb.core.database import Base
from blockdb.core.identifiers import new_id


class DatabaseRow(Base):
    __tablename__ = "database_rows"

    id = Column(String(36), primary_key=True, default=new_id)
    slug_id = Column(String, unique=True, nullable=False, index=True)
    position = Column(String, nullable=False)  # clé fractionnaire, ordre des octets

    title = Column(String, nullable=True)
    icon = Column(String, nullable=True)
    properties = Column(JSON, nullable=False, default=dict)  # {property_id: valeur}
    # chargé seulement sur demande (undefer), peut être gros
    content = deferred(Column(JSON, nullable=True))

    database_id = Column(String(36), ForeignKey("databases.id", ondelete="CASCADE"), nullable=False)
    space_id = Column(String(36), nullable=False)
    workspace_id = Column(String(36), nullable=False)
    creator_id = Column(String(36), nullable=True)
    last_updated_by_id = Column(String(36), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    deleted_at = Column(DateTime, nullable=True)

    __table_args__ = (
        Index("database_rows_database_id_position_idx", "database_id", "position"),
    )
