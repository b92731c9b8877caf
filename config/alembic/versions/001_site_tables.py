"""Create settings and events tables; seed the singleton settings row.

Revision ID: 001_site_tables
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

revision = "001_site_tables"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    settings = op.create_table(
        "settings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("announcement", sa.JSON(), nullable=True),
        sa.Column("links", sa.JSON(), nullable=True),
        sa.Column("socials", sa.JSON(), nullable=True),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_by",
            sa.String(255),
            server_default="system",
            nullable=False,
        ),
    )

    op.create_table(
        "events",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(), server_default="", nullable=False),
        sa.Column("date", sa.String(), server_default="", nullable=False),
        sa.Column("time", sa.String(), server_default="", nullable=False),
        sa.Column("signup_url", sa.String(), nullable=True),
        sa.Column("order_index", sa.Integer(), nullable=False),
    )
    op.create_index("ix_events_order_index", "events", ["order_index"])

    # Sections start NULL and are filled from the defaults on read
    op.bulk_insert(settings, [{"id": 1}])


def downgrade() -> None:
    op.drop_index("ix_events_order_index", table_name="events")
    op.drop_table("events")
    op.drop_table("settings")
