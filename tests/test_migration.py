import importlib.util
from pathlib import Path
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import inspect
from soulmatch.models import Base
from soulmatch.models.database import make_engine

MIGRATION = Path(__file__).resolve().parent.parent / "alembic" / "versions" / "5c1f0a7e2d93_initial_schema.py"


def _load_migration():
    spec = importlib.util.spec_from_file_location("initial_schema", MIGRATION)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _run(engine, step):
    with engine.begin() as conn:
        ctx = MigrationContext.configure(conn)
        with Operations.context(ctx):
            step()


class TestInitialMigration:

    def test_upgrade_creates_model_tables(self, tmp_path):
        engine = make_engine(f"sqlite:///{tmp_path / 'migrated.db'}")
        migration = _load_migration()

        _run(engine, migration.upgrade)

        inspector = inspect(engine)
        assert set(Base.metadata.tables) <= set(inspector.get_table_names())
        for table in Base.metadata.tables.values():
            columns = {c["name"] for c in inspector.get_columns(table.name)}
            assert columns == set(table.columns.keys()), table.name

        unique = {u["name"] for u in inspector.get_unique_constraints("interactions")}
        assert "uq_interaction_edge" in unique
        engine.dispose()

    def test_downgrade_drops_everything(self, tmp_path):
        engine = make_engine(f"sqlite:///{tmp_path / 'migrated.db'}")
        migration = _load_migration()

        _run(engine, migration.upgrade)
        _run(engine, migration.downgrade)

        assert inspect(engine).get_table_names() == []
        engine.dispose()
