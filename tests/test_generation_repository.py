"""Tests for the SQLModel generation repository."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlmodel import Session

from flashcardengine.interfaces import GenerationRepository
from flashcardengine.models.generation import Generation, GenerationErrorLog
from flashcardengine.storage.database import create_db_engine

USER_ID = "user-123"


def seed_generations(engine, user_id: str, count: int) -> list[str]:
    """Insert rows with distinct, increasing created_at values."""
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    ids = []
    with Session(engine) as session:
        for i in range(count):
            row = Generation(
                user_id=user_id,
                source_text=f"text {i}",
                source_text_length=len(f"text {i}"),
                generated_count=i + 1,
                created_at=base + timedelta(minutes=i),
                updated_at=base + timedelta(minutes=i),
            )
            session.add(row)
            ids.append(row.id)
        session.commit()
    return ids


def test_repository_satisfies_protocol(repository):
    assert isinstance(repository, GenerationRepository)


@pytest.mark.asyncio
async def test_insert_generation_derives_length(repository, engine):
    generation_id = await repository.insert_generation(USER_ID, "twelve chars", 4)

    with Session(engine) as session:
        row = session.get(Generation, generation_id)

    assert row.source_text_length == 12
    assert row.generated_count == 4
    assert row.accepted_edited_count == 0
    assert row.accepted_unedited_count == 0
    assert row.created_at is not None


@pytest.mark.asyncio
async def test_insert_error_log(repository, engine):
    await repository.insert_error_log(
        user_id=USER_ID,
        error_code="TIMEOUT",
        error_message="Request timed out",
        model="openai/gpt-4o-mini",
        source_text_hash="d41d8cd98f00b204e9800998ecf8427e",
        source_text_length=1500,
    )

    rows, total = await repository.list_error_logs(USER_ID, 0, 10, ascending=False)

    assert total == 1
    assert rows[0].error_code == "TIMEOUT"
    assert rows[0].source_text_length == 1500
    assert isinstance(rows[0], GenerationErrorLog)


@pytest.mark.asyncio
async def test_list_generations_orders_by_created_at(repository, engine):
    ids = seed_generations(engine, USER_ID, 3)

    newest_first, total = await repository.list_generations(USER_ID, 0, 10, ascending=False)
    oldest_first, _ = await repository.list_generations(USER_ID, 0, 10, ascending=True)

    assert total == 3
    assert [row.id for row in newest_first] == list(reversed(ids))
    assert [row.id for row in oldest_first] == ids


@pytest.mark.asyncio
async def test_list_generations_offset_and_limit(repository, engine):
    ids = seed_generations(engine, USER_ID, 5)
    seed_generations(engine, "someone-else", 2)

    rows, total = await repository.list_generations(USER_ID, 2, 2, ascending=True)

    assert total == 5
    assert [row.id for row in rows] == ids[2:4]


@pytest.mark.asyncio
async def test_get_generation_checks_owner(repository, engine):
    (generation_id,) = seed_generations(engine, USER_ID, 1)

    assert (await repository.get_generation(USER_ID, generation_id)).id == generation_id
    assert await repository.get_generation("intruder", generation_id) is None


def test_create_db_engine_reads_env(monkeypatch):
    monkeypatch.setenv("FLASHCARDS_DATABASE_URL", "sqlite://")

    engine = create_db_engine()

    assert str(engine.url) == "sqlite://"
    engine.dispose()
