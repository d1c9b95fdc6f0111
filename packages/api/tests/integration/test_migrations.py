# This project was developed with assistance from AI tools.
"""Schema integrity tests after alembic upgrade head."""

import pytest
from sqlalchemy import text

pytestmark = pytest.mark.integration


async def test_all_tables_exist(db_session):
    result = await db_session.execute(
        text("SELECT tablename FROM pg_tables WHERE schemaname = 'public'")
    )
    tables = {row[0] for row in result.fetchall()}
    expected = {
        "loan_applications",
        "shareholders",
        "documents",
        "loan_analyses",
        "decisions",
        "member_decisions",
        "audit_events",
        "alembic_version",
    }
    missing = expected - tables
    assert not missing, f"Missing tables: {missing}"


@pytest.mark.parametrize(
    "table, columns",
    [
        ("loan_applications", ["application_reference_number"]),
        ("loan_applications", ["customer_number"]),
        ("loan_analyses", ["application_reference_number"]),
        ("decisions", ["application_reference_number"]),
        ("member_decisions", ["application_reference_number", "user_id"]),
    ],
)
async def test_unique_constraints(db_session, table, columns):
    result = await db_session.execute(
        text(
            """
            SELECT array_agg(a.attname::text ORDER BY a.attname)
              FROM pg_constraint c
              JOIN pg_class t ON t.oid = c.conrelid
              JOIN pg_attribute a ON a.attrelid = t.oid AND a.attnum = ANY(c.conkey)
             WHERE t.relname = :table AND c.contype = 'u'
             GROUP BY c.oid
            """
        ).bindparams(table=table)
    )
    constraints = [sorted(row[0]) for row in result.fetchall()]
    assert sorted(columns) in constraints


async def test_migration_is_at_head(db_session):
    result = await db_session.execute(text("SELECT version_num FROM alembic_version"))
    assert result.scalar() == "3f1c2a9d7b10"
