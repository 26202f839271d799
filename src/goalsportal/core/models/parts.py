"""
Part Record Model

One row per (pair_id, part_name). Rows are created lazily by the first save
and updated through an upsert on the composite key.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .roster import RosterPair

from sqlalchemy import JSON, CheckConstraint, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class PartRecord(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Data entered for one Part of one pair."""

    __tablename__ = "parts"
    __table_args__ = (
        UniqueConstraint("pair_id", "part_name", name="uq_parts_pair_part"),
        CheckConstraint(
            "part_name IN ('Part1', 'Part2', 'Part3', 'Part4')", name="check_part_name"
        ),
        CheckConstraint("p2_choice IS NULL OR p2_choice IN ('A', 'B', 'C')", name="check_p2_choice"),
    )

    pair_id: Mapped[str] = mapped_column(
        ForeignKey("roster.pair_id", ondelete="CASCADE"), nullable=False
    )
    part_name: Mapped[str] = mapped_column(String(10), nullable=False, comment="Part1..Part4")

    # Part1: goal slots
    goals: Mapped[list[dict[str, Any]] | None] = mapped_column(
        JSON, nullable=True, comment="Goal slots (Part1)"
    )

    # Part2: evaluator conversation
    p2_choice: Mapped[str | None] = mapped_column(
        String(1), nullable=True, comment="A=agreed, B=agreed with revisions, C=not agreed"
    )
    conversation_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    key_evidence: Mapped[str | None] = mapped_column(Text, nullable=True)
    goal_reviews: Mapped[list[dict[str, Any]] | None] = mapped_column(
        JSON, nullable=True, comment="Per-goal review boxes (Part2)"
    )

    # Part3: resolution
    resolution_decision: Mapped[str | None] = mapped_column(Text, nullable=True)
    resolution_rationale: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Part4: end-of-year outcome
    outcome_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    goal_evidence: Mapped[str | None] = mapped_column(Text, nullable=True)
    goal_outcomes: Mapped[list[dict[str, Any]] | None] = mapped_column(
        JSON, nullable=True, comment="Per-goal attainment (Part4)"
    )

    updated_by: Mapped[str | None] = mapped_column(
        String(320), nullable=True, comment="Email of the last writer (set by the store)"
    )

    # Relationships
    pair: Mapped[RosterPair] = relationship(back_populates="parts")
