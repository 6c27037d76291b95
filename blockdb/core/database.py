from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base, Session
from blockdb.core.config import settings

engine = create_engine(settings.DATABASE_URL, echo=False)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

def get_db():
    """Dépendance sessionDB"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session):
    """Lecture + écriture dans une seule transaction: commit si ok, rollback sinon"""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def dialect_name(db: Session) -> str:
    return db.get_bind().dialect.name
