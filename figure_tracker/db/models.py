"""SQLAlchemy ORM models for the figure catalog and per-caller tracking rows.

The catalog (``items``) is written only by the external bulk loader; this
service reads it.  Ownership and desire rows are keyed by an opaque caller
identifier forwarded from the identity provider, and share links expose a
caller's ownership set through an unguessable token.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utcnow():
    """Return current UTC datetime."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class ShareKind(str, Enum):
    """Resource a share link exposes."""

    OWNERSHIP = "ownership"
    DESIRE = "desire"


class Item(Base):
    __tablename__ = "items"
    __table_args__ = (Index("ix_items_character_id", "character", "id"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    character: Mapped[str] = mapped_column(String(255), nullable=False)
    series: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        index=True,
        doc="Game series the figure belongs to (e.g. 'Super Mario').",
    )
    sub_series: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        doc="Product line within the series (e.g. 'Super Smash Bros.').",
    )
    kind: Mapped[str | None] = mapped_column(String(64), nullable=True)
    image_ref: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    release_date: Mapped[date | None] = mapped_column(Date, nullable=True)


class OwnershipRecord(Base):
    """Evidence that a caller possesses a catalog item."""

    __tablename__ = "ownership_records"
    __table_args__ = (
        UniqueConstraint(
            "caller_id",
            "item_id",
            name="uq_ownership_records_caller_item",
        ),
        Index("ix_ownership_records_caller_acquired", "caller_id", "acquired_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    caller_id: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        index=True,
        doc=(
            "Opaque identifier for the owning caller as supplied by the"
            " identity provider. Never exposed on the public read path."
        ),
    )
    item_id: Mapped[str] = mapped_column(
        ForeignKey("items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    acquired_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    condition: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default="mint",
        server_default="mint",
    )
    note: Mapped[str] = mapped_column(
        String(1024), nullable=False, default="", server_default=""
    )
    is_favorite: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default="0",
    )

    item: Mapped[Item] = relationship("Item", lazy="joined")


class DesireRecord(Base):
    """Evidence that a caller wants a catalog item they do not yet own."""

    __tablename__ = "desire_records"
    __table_args__ = (
        UniqueConstraint(
            "caller_id",
            "item_id",
            name="uq_desire_records_caller_item",
        ),
        Index("ix_desire_records_caller_created", "caller_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    caller_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    item_id: Mapped[str] = mapped_column(
        ForeignKey("items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    priority: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=3,
        server_default="3",
        doc="Ordinal rank from 1 (low) to 5 (high); 3 is the neutral default.",
    )
    note: Mapped[str] = mapped_column(
        String(1024), nullable=False, default="", server_default=""
    )

    item: Mapped[Item] = relationship("Item", lazy="joined")


class ShareLink(Base):
    """Token-addressed, read-only publication of a caller's record set."""

    __tablename__ = "share_links"
    __table_args__ = (
        UniqueConstraint(
            "caller_id",
            "kind",
            name="uq_share_links_caller_kind",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    caller_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    kind: Mapped[ShareKind] = mapped_column(
        SAEnum(
            ShareKind,
            name="share_kind",
            native_enum=False,
            values_callable=lambda kinds: [kind.value for kind in kinds],
        ),
        nullable=False,
    )
    token: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        unique=True,
        doc="Bearer credential for anonymous read access; never rotated on refresh.",
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    owner_display_name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        doc="Display name captured from the identity provider at share time.",
    )
    active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default="1",
    )
    view_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )


__all__ = [
    "Base",
    "DesireRecord",
    "Item",
    "OwnershipRecord",
    "ShareKind",
    "ShareLink",
    "utcnow",
]
