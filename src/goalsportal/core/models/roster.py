"""
Roster Models

Pairs of educator / evaluator / resolution staff, and portal admins.
Both tables are provisioned administratively (scripts/import_roster.py);
the application only reads them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .parts import PartRecord

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class RosterPair(Base, TimestampMixin):
    """One educator under evaluation, with the staff assigned to each Part."""

    __tablename__ = "roster"

    pair_id: Mapped[str] = mapped_column(String(64), primary_key=True, comment="Pair identifier")
    school_name: Mapped[str | None] = mapped_column(String(300), nullable=True)

    educator_email: Mapped[str | None] = mapped_column(
        String(320), nullable=True, comment="Edits Part1"
    )
    educator_name: Mapped[str | None] = mapped_column(String(200), nullable=True)

    evaluator_email: Mapped[str | None] = mapped_column(
        String(320), nullable=True, comment="Edits Part2 and Part4"
    )
    evaluator_name: Mapped[str | None] = mapped_column(String(200), nullable=True)

    resolution_email: Mapped[str | None] = mapped_column(
        String(320), nullable=True, comment="Edits Part3"
    )
    resolution_name: Mapped[str | None] = mapped_column(String(200), nullable=True)

    # Relationships
    parts: Mapped[list[PartRecord]] = relationship(back_populates="pair")


class Admin(Base, TimestampMixin):
    """Portal administrators (may export every record)."""

    __tablename__ = "admins"

    email: Mapped[str] = mapped_column(
        String(320), primary_key=True, comment="Lower-case admin email"
    )
