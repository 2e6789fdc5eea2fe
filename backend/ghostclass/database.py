"""
Connexion PostgreSQL de GhostClass.
Tables : tracker (corrections / séances extra), user_settings, notifications.
"""

from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from ghostclass.config import settings

# pool_pre_ping : la base peut couper les connexions inactives entre deux synchronisations
engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)

SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

Base = declarative_base()


def get_db() -> Iterator[Session]:
    """Session BDD injectée dans les routes, fermée en fin de requête."""
    with SessionLocal() as db:
        yield db
