"""Generate database session"""

from typing import Iterator, Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from chess_rules.core.config import Settings, get_settings
from chess_rules.db.schema import Base


def build_engine(database_url: str) -> Engine:
    return create_engine(database_url)


def init_db(engine: Engine) -> None:
    """Ensure all tables are created"""
    Base.metadata.create_all(bind=engine)


def get_db(settings: Optional[Settings] = None) -> Iterator[Session]:
    settings = settings if settings is not None else get_settings()
    engine = build_engine(settings.database_url)
    init_db(engine)
    db = sessionmaker(bind=engine)()
    try:
        yield db
    finally:
        db.close()
