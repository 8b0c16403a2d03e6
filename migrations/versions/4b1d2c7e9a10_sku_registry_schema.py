"""skus, locations & categories tables

Revision ID: 4b1d2c7e9a10
Revises:
Create Date: 2026-10-18 10:00:00.000000
"""
from __future__ import annotations

import os
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# --- Alembic identifiers ---
revision: str = "4b1d2c7e9a10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _schema() -> str | None:
    # SQLite nu are scheme; pe PG folosim DB_SCHEMA (implicit 'app')
    if op.get_bind().dialect.name == "sqlite":
        return None
    return (os.getenv("DB_SCHEMA") or "app").strip() or "app"


def upgrade() -> None:
    schema = _schema()

    op.create_table(
        "skus",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("sku", sa.String(128), nullable=False),
        sa.Column("serial_number", sa.Integer(), nullable=False),
        sa.Column("column", sa.String(32), nullable=True),
        sa.Column("row", sa.String(32), nullable=True),
        sa.Column("date_code", sa.String(4), nullable=False),
        sa.Column("category", sa.String(64), nullable=False),
        sa.Column("subcategory", sa.String(64), nullable=True),
        sa.Column("cost", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("storage_room", sa.String(255), nullable=True),
        sa.Column("description", sa.String(), nullable=False, server_default=""),
        sa.Column("status", sa.String(64), nullable=False, server_default="Active"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("cost >= 0", name="ck_skus_cost_nonnegative"),
        sa.CheckConstraint("price >= 0", name="ck_skus_price_nonnegative"),
        schema=schema,
    )
    # UNIC pe serial: singura garanție contra salvărilor concurente cu același serial
    op.create_index("ix_skus_serial_number", "skus", ["serial_number"], unique=True, schema=schema)
    op.create_index("ix_skus_sku", "skus", ["sku"], schema=schema)
    op.create_index("ix_skus_column", "skus", ["column"], schema=schema)
    op.create_index("ix_skus_row", "skus", ["row"], schema=schema)

    op.create_table(
        "locations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("value", sa.String(32), nullable=False),
        sa.UniqueConstraint("type", "value", name="uq_locations_type_value"),
        schema=schema,
    )

    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("friendly_name", sa.String(255), nullable=False, unique=True),
        sa.Column("code", sa.String(4), nullable=False, unique=True),
        sa.Column("type", sa.String(16), nullable=False),
        schema=schema,
    )


def downgrade() -> None:
    schema = _schema()
    op.drop_table("categories", schema=schema)
    op.drop_table("locations", schema=schema)
    op.drop_index("ix_skus_row", table_name="skus", schema=schema)
    op.drop_index("ix_skus_column", table_name="skus", schema=schema)
    op.drop_index("ix_skus_sku", table_name="skus", schema=schema)
    op.drop_index("ix_skus_serial_number", table_name="skus", schema=schema)
    op.drop_table("skus", schema=schema)
