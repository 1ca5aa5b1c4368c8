from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from app.core.config import settings

_is_sqlite = str(settings.DATABASE_URI).startswith("sqlite")

# pool_pre_ping comprueba la conexión antes de tomarla del pool
engine = create_engine(
    str(settings.DATABASE_URI),
    pool_pre_ping=True,
    connect_args={"check_same_thread": False} if _is_sqlite else {},
)


def enable_sqlite_foreign_keys(target: Engine) -> None:
    """SQLite no aplica claves foráneas salvo que se active por conexión."""
    @event.listens_for(target, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


if _is_sqlite:
    enable_sqlite_foreign_keys(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
