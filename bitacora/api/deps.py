"""
Dependencias compartidas de FastAPI
"""
from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from ..database.config import get_db_session
from ..services.entrevista_service import EntrevistaService


def get_db() -> Generator[Session, None, None]:
    yield from get_db_session()


def get_entrevista_service(db: Session = Depends(get_db)) -> EntrevistaService:
    return EntrevistaService(db)
