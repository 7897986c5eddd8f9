"""SQLModel-backed GenerationRepository."""

import asyncio
import functools
import logging
from typing import Any, Callable, Optional, Sequence, TypeVar

from sqlalchemy.engine import Engine
from sqlmodel import Session, col, func, select

from flashcardengine.models.generation import Generation, GenerationErrorLog

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SQLModelGenerationRepository:
    """GenerationRepository over a SQLAlchemy engine.

    Sessions are blocking, so each operation runs in the default executor.
    """

    def __init__(self, engine: Engine):
        self._engine = engine

    async def _run(self, fn: Callable[..., T], *args: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(fn, *args))

    async def insert_generation(self, user_id: str, source_text: str, generated_count: int) -> str:
        return await self._run(self._insert_generation, user_id, source_text, generated_count)

    async def insert_error_log(
        self,
        user_id: str,
        error_code: str,
        error_message: str,
        model: str,
        source_text_hash: str,
        source_text_length: int,
    ) -> None:
        row = GenerationErrorLog(
            user_id=user_id,
            error_code=error_code,
            error_message=error_message,
            model=model,
            source_text_hash=source_text_hash,
            source_text_length=source_text_length,
        )
        await self._run(self._add, row)

    async def list_generations(
        self, user_id: str, offset: int, limit: int, ascending: bool
    ) -> tuple[Sequence[Generation], int]:
        return await self._run(self._page, Generation, user_id, offset, limit, ascending)

    async def get_generation(self, user_id: str, generation_id: str) -> Optional[Generation]:
        return await self._run(self._get_generation, user_id, generation_id)

    async def list_error_logs(
        self, user_id: str, offset: int, limit: int, ascending: bool
    ) -> tuple[Sequence[GenerationErrorLog], int]:
        return await self._run(self._page, GenerationErrorLog, user_id, offset, limit, ascending)

    # ------------------------------------------------------------------
    # Blocking implementations
    # ------------------------------------------------------------------

    def _insert_generation(self, user_id: str, source_text: str, generated_count: int) -> str:
        row = Generation(
            user_id=user_id,
            source_text=source_text,
            source_text_length=len(source_text),
            generated_count=generated_count,
        )
        self._add(row)
        return row.id

    def _add(self, row: Any) -> None:
        with Session(self._engine, expire_on_commit=False) as session:
            session.add(row)
            session.commit()
        logger.debug(f"🗄️ [GenerationRepository] Inserted {row.__tablename__} row {row.id}")

    def _get_generation(self, user_id: str, generation_id: str) -> Optional[Generation]:
        with Session(self._engine) as session:
            statement = select(Generation).where(
                Generation.id == generation_id,
                Generation.user_id == user_id,
            )
            return session.exec(statement).first()

    def _page(self, model: Any, user_id: str, offset: int, limit: int, ascending: bool) -> tuple[list, int]:
        order = col(model.created_at).asc() if ascending else col(model.created_at).desc()
        with Session(self._engine) as session:
            total = session.exec(
                select(func.count()).select_from(model).where(model.user_id == user_id)
            ).one()
            rows = session.exec(
                select(model).where(model.user_id == user_id).order_by(order).offset(offset).limit(limit)
            ).all()
        return list(rows), total
