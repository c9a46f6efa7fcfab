"""Initial schema — customers and readings

Revision ID: 0001
Revises:
Create Date: 2026-10-18

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    # ── customers ─────────────────────────────────────────────────────────────
    op.create_table(
        "customers",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("first_name", sa.Text, nullable=False),
        sa.Column("last_name", sa.Text, nullable=False),
        sa.Column("birth_date", sa.Date, nullable=True),
        sa.Column("gender", sa.String(1), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("gender IN ('D','M','U','W')", name="ck_customers_gender"),
    )

    # ── readings ──────────────────────────────────────────────────────────────
    op.create_table(
        "readings",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "customer_id",
            sa.Uuid(),
            sa.ForeignKey("customers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("comment", sa.Text, nullable=True),
        sa.Column("date_of_reading", sa.Date, nullable=True),
        sa.Column("kind_of_meter", sa.String(20), nullable=False),
        sa.Column("meter_count", sa.Numeric(14, 4), nullable=True),
        sa.Column("meter_id", sa.Text, nullable=False),
        sa.Column("substitute", sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.CheckConstraint(
            "kind_of_meter IN ('HEIZUNG','STROM','UNBEKANNT','WASSER')",
            name="ck_readings_kind_of_meter",
        ),
    )
    op.create_index("ix_readings_customer_id", "readings", ["customer_id"])
    op.create_index("ix_readings_date_of_reading", "readings", ["date_of_reading"])
    op.create_index("ix_readings_meter_id", "readings", ["meter_id"])


def downgrade() -> None:
    op.drop_table("readings")
    op.drop_table("customers")
