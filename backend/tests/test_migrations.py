"""Tests for the alembic migration and application bootstrap."""
import logging
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from moviehub import main

ALEMBIC_DIR = Path(__file__).resolve().parents[1] / "alembic"

EXPECTED_TABLES = {
    "users", "groups", "group_members", "join_requests",
    "group_content", "favorites", "reviews",
}


def _alembic_config(url: str) -> Config:
    cfg = Config()
    cfg.set_main_option("script_location", str(ALEMBIC_DIR))
    cfg.set_main_option("sqlalchemy.url", url)
    return cfg


class TestInitialMigration:

    def test_upgrade_creates_schema(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'migrate.db'}"
        command.upgrade(_alembic_config(url), "head")

        engine = create_engine(url)
        try:
            inspector = inspect(engine)
            assert EXPECTED_TABLES <= set(inspector.get_table_names())
            indexes = {ix["name"]: ix for ix in inspector.get_indexes("join_requests")}
            assert "uq_join_requests_pending" in indexes
            assert indexes["uq_join_requests_pending"]["unique"]
            fk_targets = {fk["referred_table"] for fk in inspector.get_foreign_keys("group_members")}
            assert fk_targets == {"groups", "users"}
        finally:
            engine.dispose()

    def test_downgrade_drops_schema(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'migrate.db'}"
        cfg = _alembic_config(url)
        command.upgrade(cfg, "head")
        command.downgrade(cfg, "base")

        engine = create_engine(url)
        try:
            assert not EXPECTED_TABLES & set(inspect(engine).get_table_names())
        finally:
            engine.dispose()


class TestLoggingSetup:

    def test_existing_root_handlers_are_kept(self):
        root = logging.getLogger()
        handler = logging.NullHandler()
        root.addHandler(handler)
        try:
            main._configure_logging()
            assert handler in root.handlers
            assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        finally:
            root.removeHandler(handler)
