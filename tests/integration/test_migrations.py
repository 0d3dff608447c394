"""Test Alembic migrations: upgrade, downgrade, and agreement with the models.

Runs against a throwaway SQLite file.
"""

import os

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from moderation.db.base import Base
import moderation.db.models  # noqa: F401


ALEMBIC_INI = os.path.join(os.path.dirname(__file__), "..", "..", "alembic.ini")

EXPECTED_TABLES = {
    "users",
    "employees",
    "establishments",
    "employment_history",
    "comments",
    "moderation_queue",
    "edit_proposals",
    "notifications",
}


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'migrations.db'}"


@pytest.fixture
def alembic_cfg(database_url):
    cfg = Config(ALEMBIC_INI)
    cfg.set_main_option("sqlalchemy.url", database_url)
    return cfg


@pytest.mark.integration
class TestMigrations:
    """Run upgrade -> verify -> downgrade -> verify cycle."""

    def test_upgrade_creates_all_tables(self, alembic_cfg, database_url):
        command.upgrade(alembic_cfg, "head")

        engine = create_engine(database_url)
        tables = set(inspect(engine).get_table_names())
        engine.dispose()

        assert EXPECTED_TABLES <= tables
        assert "alembic_version" in tables

    def test_upgrade_is_idempotent(self, alembic_cfg):
        command.upgrade(alembic_cfg, "head")
        command.upgrade(alembic_cfg, "head")

    def test_columns_match_models(self, alembic_cfg, database_url):
        command.upgrade(alembic_cfg, "head")

        engine = create_engine(database_url)
        inspector = inspect(engine)
        for table in EXPECTED_TABLES:
            migrated = {c["name"] for c in inspector.get_columns(table)}
            modeled = {c.name for c in Base.metadata.tables[table].columns}
            assert migrated == modeled, f"Columns of {table!r} differ from the model"
        engine.dispose()

    def test_downgrade_removes_tables(self, alembic_cfg, database_url):
        command.upgrade(alembic_cfg, "head")
        command.downgrade(alembic_cfg, "base")

        engine = create_engine(database_url)
        tables = set(inspect(engine).get_table_names())
        engine.dispose()

        assert not (EXPECTED_TABLES & tables)
