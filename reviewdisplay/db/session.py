import logging
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker

from reviewdisplay.core.config import settings

logger = logging.getLogger(__name__)


def _engine_options(database_url: str) -> dict:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return {"pool_pre_ping": True}
    return {"connect_args": {"check_same_thread": False}}


def ensure_sqlite_directory(database_url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""

    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return
    if not url.database or url.database == ":memory:":
        return
    directory = Path(url.database).expanduser().resolve().parent
    if not directory.exists():
        directory.mkdir(parents=True, exist_ok=True)
        logger.info("Created database directory %s", directory)


ensure_sqlite_directory(settings.DATABASE_URL)
engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    """Create the widgets and reviews tables when they do not exist yet."""

    # Models register themselves on Base.metadata at import time.
    from reviewdisplay.db.base import Base
    from reviewdisplay.models import review, widget  # noqa: F401

    Base.metadata.create_all(bind=engine)
