import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, create_engine, Session

from ..core.config import settings

logger = logging.getLogger(__name__)


class Database:
    """Owns the engine and its connection pool.

    ``init()`` creates the engine and the schema; it runs on its own the first
    time ``engine`` or ``session()`` is used, so callers never need to check.
    ``dispose()`` closes every pooled connection.
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 10,
        pool_timeout: float = 30.0,
        echo: bool = False,
    ) -> None:
        self.url = url
        self.pool_size = pool_size
        self.pool_timeout = pool_timeout
        self.echo = echo
        self._engine: Optional[Engine] = None

    @property
    def initialized(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self.init()
        return self._engine

    def init(self) -> Engine:
        if self._engine is not None:
            return self._engine

        url = make_url(self.url)
        kwargs = {"echo": self.echo, "pool_pre_ping": True}
        if url.get_backend_name() == "sqlite":
            # TestClient and the server thread pool share connections
            kwargs["connect_args"] = {"check_same_thread": False}
            if url.database and url.database != ":memory:":
                Path(url.database).parent.mkdir(parents=True, exist_ok=True)
        else:
            kwargs["pool_size"] = self.pool_size
            kwargs["pool_timeout"] = self.pool_timeout

        engine = create_engine(self.url, **kwargs)
        from . import models  # noqa: F401
        SQLModel.metadata.create_all(engine)
        self._engine = engine
        logger.info("Database connection pool created backend=%s", url.get_backend_name())
        return engine

    def dispose(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        logger.info("Database connection pool closed")

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError:
            logger.exception("Database connection test failed")
            return False
        return True

    @contextmanager
    def session(self) -> Iterator[Session]:
        with Session(self.engine) as session:
            yield session


database = Database(
    settings.DATABASE_URL,
    pool_size=settings.DB_POOL_SIZE,
    pool_timeout=settings.DB_POOL_TIMEOUT,
    echo=settings.DB_ECHO,
)

def init_db() -> None:
    database.init()

def close_db() -> None:
    database.dispose()
