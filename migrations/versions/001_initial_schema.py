"""Initial schema: route history table.

Revision ID: 001
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── route_history ─────────────────────────────────────────────────
    op.create_table(
        "route_history",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("driver", sa.String(120), nullable=False),
        sa.Column("origin", sa.String(255), nullable=False),
        sa.Column("destination", sa.String(1000), nullable=False),
        sa.Column("total_distance", sa.Integer, nullable=False),
        sa.Column("total_travel_time", sa.Float, nullable=False),
        sa.Column("total_packages", sa.Integer, nullable=False),
        sa.Column("total_revenue", sa.Float, nullable=False),
        sa.Column("route_cost", sa.Float, nullable=False),
        sa.Column("fuel_cost", sa.Float, nullable=False),
        sa.Column("total_cost", sa.Float, nullable=False),
        sa.Column("profit", sa.Float, nullable=False),
        sa.Column("profit_margin", sa.Float, nullable=False),
        sa.Column("destinations", sa.JSON, nullable=False),
        sa.Column("fuel_analysis", sa.JSON, nullable=False),
        sa.Column("distance_breakdown", sa.JSON, nullable=False),
    )

    # ── Indexes ───────────────────────────────────────────────────────
    op.create_index("idx_route_history_date", "route_history", ["date"])
    op.create_index("idx_route_history_driver", "route_history", ["driver"])


def downgrade() -> None:
    op.drop_index("idx_route_history_driver", table_name="route_history")
    op.drop_index("idx_route_history_date", table_name="route_history")
    op.drop_table("route_history")
