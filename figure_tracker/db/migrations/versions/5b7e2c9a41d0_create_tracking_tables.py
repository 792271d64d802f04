"""create catalog, tracking and share link tables

Revision ID: 5b7e2c9a41d0
Revises:
Create Date: 2026-10-19 10:00:00.000000
"""

from __future__ import annotations

from typing import Sequence

from alembic import op
import sqlalchemy as sa

revision: str = "5b7e2c9a41d0"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "items",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("character", sa.String(length=255), nullable=False),
        sa.Column("series", sa.String(length=255), nullable=True),
        sa.Column("sub_series", sa.String(length=255), nullable=True),
        sa.Column("kind", sa.String(length=64), nullable=True),
        sa.Column("image_ref", sa.String(length=1024), nullable=True),
        sa.Column("release_date", sa.Date(), nullable=True),
    )
    op.create_index("ix_items_name", "items", ["name"])
    op.create_index("ix_items_series", "items", ["series"])
    op.create_index("ix_items_character_id", "items", ["character", "id"])

    op.create_table(
        "ownership_records",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("caller_id", sa.String(length=128), nullable=False),
        sa.Column("item_id", sa.String(length=64), nullable=False),
        sa.Column(
            "acquired_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "condition",
            sa.String(length=32),
            nullable=False,
            server_default="mint",
        ),
        sa.Column(
            "note",
            sa.String(length=1024),
            nullable=False,
            server_default="",
        ),
        sa.Column(
            "is_favorite",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        sa.ForeignKeyConstraint(["item_id"], ["items.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "caller_id",
            "item_id",
            name="uq_ownership_records_caller_item",
        ),
    )
    op.create_index(
        "ix_ownership_records_caller_id", "ownership_records", ["caller_id"]
    )
    op.create_index("ix_ownership_records_item_id", "ownership_records", ["item_id"])
    op.create_index(
        "ix_ownership_records_caller_acquired",
        "ownership_records",
        ["caller_id", "acquired_at"],
    )

    op.create_table(
        "desire_records",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("caller_id", sa.String(length=128), nullable=False),
        sa.Column("item_id", sa.String(length=64), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "priority",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("3"),
        ),
        sa.Column(
            "note",
            sa.String(length=1024),
            nullable=False,
            server_default="",
        ),
        sa.ForeignKeyConstraint(["item_id"], ["items.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "caller_id",
            "item_id",
            name="uq_desire_records_caller_item",
        ),
    )
    op.create_index("ix_desire_records_caller_id", "desire_records", ["caller_id"])
    op.create_index("ix_desire_records_item_id", "desire_records", ["item_id"])
    op.create_index(
        "ix_desire_records_caller_created",
        "desire_records",
        ["caller_id", "created_at"],
    )

    op.create_table(
        "share_links",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("caller_id", sa.String(length=128), nullable=False),
        sa.Column(
            "kind",
            sa.Enum(
                "ownership",
                "desire",
                name="share_kind",
                native_enum=False,
            ),
            nullable=False,
        ),
        sa.Column("token", sa.String(length=128), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.String(length=1024), nullable=True),
        sa.Column("owner_display_name", sa.String(length=255), nullable=True),
        sa.Column(
            "active",
            sa.Boolean(),
            nullable=False,
            server_default=sa.true(),
        ),
        sa.Column(
            "view_count",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint("token", name="uq_share_links_token"),
        sa.UniqueConstraint("caller_id", "kind", name="uq_share_links_caller_kind"),
    )
    op.create_index("ix_share_links_caller_id", "share_links", ["caller_id"])


def downgrade() -> None:
    op.drop_index("ix_share_links_caller_id", table_name="share_links")
    op.drop_table("share_links")

    op.drop_index("ix_desire_records_caller_created", table_name="desire_records")
    op.drop_index("ix_desire_records_item_id", table_name="desire_records")
    op.drop_index("ix_desire_records_caller_id", table_name="desire_records")
    op.drop_table("desire_records")

    op.drop_index(
        "ix_ownership_records_caller_acquired", table_name="ownership_records"
    )
    op.drop_index("ix_ownership_records_item_id", table_name="ownership_records")
    op.drop_index("ix_ownership_records_caller_id", table_name="ownership_records")
    op.drop_table("ownership_records")

    op.drop_index("ix_items_character_id", table_name="items")
    op.drop_index("ix_items_series", table_name="items")
    op.drop_index("ix_items_name", table_name="items")
    op.drop_table("items")
