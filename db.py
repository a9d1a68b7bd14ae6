# db.py

#============================================================#
#                         Foundry-PM                         #
#============================================================#
# Purpose     : Foundry-PM is a project, task and finance    #
#               manager for founders and small teams, with   #
#               admin/member roles and row-level policies    #
#               (SQLite/Postgres powered)                    #
#============================================================#


from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

import config
import models  # noqa: F401  (registers every table on SQLModel.metadata)

logger = logging.getLogger(__name__)


def make_engine(url: Optional[str] = None):
    """Build an engine; in-memory SQLite shares one connection across threads."""
    url = url or config.DATABASE_URL
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


# ---- Engine / Session ----
engine = make_engine()


def init_db(bind=None) -> None:
    bind = bind or engine
    SQLModel.metadata.create_all(bind)
    logger.info("Schema ready on %s", bind.url.render_as_string(hide_password=True))


@contextmanager
def get_session(bind=None) -> Iterator[Session]:
    """Session that rolls back on error; callers commit explicitly."""
    session = Session(bind or engine, expire_on_commit=False)
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
