# Re-export the contract and both backends so callers can keep using: from emulation.store import Store, build_store
from emulation.config import Settings
from emulation.store.base import (
    AdminRepository,
    ButtonRepository,
    ScoreRepository,
    Store,
    StudentRepository,
    WeekRepository,
)
from emulation.store.mongo.store import MongoStore
from emulation.store.sql.store import SqlStore


def build_store(settings: Settings) -> Store:
    """Construct (but do not initialize) the backend named by STORE_BACKEND."""
    common = dict(
        admin_username=settings.ADMIN_USERNAME,
        admin_password=settings.ADMIN_PASSWORD,
        seed_buttons=settings.SEED_DEFAULT_BUTTONS,
        default_points=settings.DEFAULT_POINTS,
    )
    if settings.STORE_BACKEND == "mongo":
        from emulation.store.mongo.database import connect

        client = connect(settings.MONGO_URL, journal=settings.MONGO_WRITE_JOURNAL)
        return MongoStore(client, settings.MONGO_DB_NAME, **common)
    return SqlStore(settings.sqlalchemy_database_url, echo=settings.SQL_ECHO, **common)


__all__ = [
    "Store",
    "AdminRepository", "StudentRepository", "ButtonRepository", "WeekRepository", "ScoreRepository",
    "SqlStore", "MongoStore",
    "build_store",
]
