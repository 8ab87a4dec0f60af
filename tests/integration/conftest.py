from __future__ import annotations

import pytest
from sqlalchemy import text

import app.db.models  # noqa: F401
from app.core.integration_db_safety import assert_safe_integration_db, assess_integration_db_safety
from app.db.models.base import Base
from app.db.session import engine

TRUNCATE_TABLES = (
    "loyalty_points_transactions",
    "tickets",
    "loyalty_accounts",
    "events",
)

TRUNCATE_SQL = f"TRUNCATE TABLE {', '.join(TRUNCATE_TABLES)} RESTART IDENTITY CASCADE"

# create_all builds tables only; the append-only trigger mirrors the initial migration.
APPEND_ONLY_TRIGGER_SQL = (
    """
    CREATE OR REPLACE FUNCTION fn_loyalty_points_transactions_append_only()
    RETURNS trigger AS $$
    BEGIN
        RAISE EXCEPTION 'loyalty_points_transactions is append-only';
    END;
    $$ LANGUAGE plpgsql;
    """,
    "DROP TRIGGER IF EXISTS trg_loyalty_points_transactions_append_only ON loyalty_points_transactions",
    """
    CREATE TRIGGER trg_loyalty_points_transactions_append_only
    BEFORE UPDATE OR DELETE ON loyalty_points_transactions
    FOR EACH ROW EXECUTE FUNCTION fn_loyalty_points_transactions_append_only();
    """,
)


@pytest.fixture(scope="session", autouse=True)
def guard_integration_db_target() -> None:
    result = assess_integration_db_safety(str(engine.url))
    if not result.is_safe:
        pytest.skip(f"Integration tests need a local test database: {result.reason}")


@pytest.fixture(autouse=True)
async def cleanup_db() -> None:
    # Dispose pooled connections between tests to avoid cross-event-loop asyncpg reuse.
    await engine.dispose()

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as exc:  # pragma: no cover - environment-dependent
        pytest.skip(f"Postgres is required for integration tests: {exc}")

    assert_safe_integration_db(str(engine.url))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        for statement in APPEND_ONLY_TRIGGER_SQL:
            await conn.execute(text(statement))
        await conn.execute(text(TRUNCATE_SQL))

    yield

    await engine.dispose()
