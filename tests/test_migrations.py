"""The alembic migration must produce the same table the ORM model maps."""

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from route_profit.infrastructure.models import RouteHistoryModel

ROOT = Path(__file__).resolve().parent.parent


def test_upgrade_matches_model(tmp_path):
    db_file = tmp_path / "history.db"
    config = Config()
    config.set_main_option("script_location", str(ROOT / "migrations"))
    config.set_main_option("sqlalchemy.url", f"sqlite+aiosqlite:///{db_file}")

    command.upgrade(config, "head")

    engine = create_engine(f"sqlite:///{db_file}")
    try:
        inspector = inspect(engine)
        columns = {c["name"] for c in inspector.get_columns("route_history")}
        indexes = {i["name"] for i in inspector.get_indexes("route_history")}
    finally:
        engine.dispose()

    assert columns == {c.name for c in RouteHistoryModel.__table__.columns}
    assert indexes == {"idx_route_history_date", "idx_route_history_driver"}
