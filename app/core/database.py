from contextlib import contextmanager

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from app.core.config import settings
from app.core.errors import StoreError

DATABASE_URL = settings.DATABASE_URL

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, echo=False, connect_args=connect_args)
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
def store_operation(db: Session, action: str):
    """Run a unit of work against the store, turning driver failures into StoreError."""
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(f"Store failure while trying to {action}")
        raise StoreError(f"Server error while trying to {action}") from exc
