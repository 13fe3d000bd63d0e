# course_chat/infrastructure/database/session.py

import logging
from contextlib import contextmanager
from typing import Callable, Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from course_chat.config.settings import settings

logger = logging.getLogger(__name__)


def _build_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        # worker threads share the file database
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, echo=settings.debug, pool_pre_ping=True)


_engine = _build_engine(settings.database_url)

_SessionLocal = sessionmaker(
    bind=_engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
)


def get_engine() -> Engine:
    return _engine


def configure_engine(url: str) -> Engine:
    """Rebind the session factory to another database (used by tests and scripts)."""
    global _engine
    _engine.dispose()
    _engine = _build_engine(url)
    _SessionLocal.configure(bind=_engine)
    return _engine


_AFTER_COMMIT_KEY = "after_commit_callbacks"


def after_commit(session: Session, fn: Callable[[], None]) -> None:
    """Run ``fn`` once the current transaction of ``session`` commits.

    Callbacks are dropped if the transaction rolls back. A failing callback is
    logged and skipped; the commit already happened and stays.
    """
    session.info.setdefault(_AFTER_COMMIT_KEY, []).append(fn)


@event.listens_for(Session, "after_commit")
def _run_after_commit(session: Session) -> None:
    callbacks = session.info.pop(_AFTER_COMMIT_KEY, [])
    for fn in callbacks:
        try:
            fn()
        except Exception:
            logger.exception("after_commit callback %r failed", fn)


@event.listens_for(Session, "after_rollback")
def _drop_after_commit(session: Session) -> None:
    session.info.pop(_AFTER_COMMIT_KEY, None)


@contextmanager
def db_session() -> Iterator[Session]:
    session: Session = _SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
