"""SQLModel engine setup for generation storage."""

import logging
import os

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

# Imported for table registration on SQLModel.metadata
from flashcardengine.models import generation  # noqa: F401

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///flashcards.db"


def create_db_engine(database_url: str | None = None) -> Engine:
    """
    Create an engine for *database_url* (defaults to FLASHCARDS_DATABASE_URL).

    SQLite engines are made safe for use from executor threads; an in-memory
    SQLite URL shares a single connection so every session sees the same data.
    """
    url = database_url or os.getenv("FLASHCARDS_DATABASE_URL", DEFAULT_DATABASE_URL)

    if url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)

    return create_engine(url, pool_pre_ping=True)


def create_db_and_tables(engine: Engine) -> None:
    SQLModel.metadata.create_all(engine)
    logger.info(f"🗄️ [Database] Tables ready on {engine.url.render_as_string(hide_password=True)}")
