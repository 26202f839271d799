"""Create roster, parts and admins tables

Revision ID: 3b1f6c2a9d41
Revises:
Create Date: 2026-10-19 09:00:12.518204+00:00

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3b1f6c2a9d41"  # pragma: allowlist secret
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
            comment="Creation timestamp (UTC)",
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
            comment="Last update timestamp (UTC)",
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "roster",
        sa.Column("pair_id", sa.String(length=64), primary_key=True, comment="Pair identifier"),
        sa.Column("school_name", sa.String(length=300), nullable=True),
        sa.Column("educator_email", sa.String(length=320), nullable=True, comment="Edits Part1"),
        sa.Column("educator_name", sa.String(length=200), nullable=True),
        sa.Column(
            "evaluator_email",
            sa.String(length=320),
            nullable=True,
            comment="Edits Part2 and Part4",
        ),
        sa.Column("evaluator_name", sa.String(length=200), nullable=True),
        sa.Column("resolution_email", sa.String(length=320), nullable=True, comment="Edits Part3"),
        sa.Column("resolution_name", sa.String(length=200), nullable=True),
        *_timestamps(),
    )

    # Role lookups compare lower-cased emails
    for role in ("educator", "evaluator", "resolution"):
        op.create_index(
            f"ix_roster_{role}_email_lower",
            "roster",
            [sa.text(f"lower({role}_email)")],
        )

    op.create_table(
        "admins",
        sa.Column("email", sa.String(length=320), primary_key=True, comment="Lower-case admin email"),
        *_timestamps(),
    )

    op.create_table(
        "parts",
        sa.Column("id", sa.UUID(), primary_key=True, comment="UUID primary key"),
        sa.Column(
            "pair_id",
            sa.String(length=64),
            sa.ForeignKey("roster.pair_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("part_name", sa.String(length=10), nullable=False, comment="Part1..Part4"),
        sa.Column("goals", sa.JSON(), nullable=True, comment="Goal slots (Part1)"),
        sa.Column(
            "p2_choice",
            sa.String(length=1),
            nullable=True,
            comment="A=agreed, B=agreed with revisions, C=not agreed",
        ),
        sa.Column("conversation_summary", sa.Text(), nullable=True),
        sa.Column("key_evidence", sa.Text(), nullable=True),
        sa.Column("goal_reviews", sa.JSON(), nullable=True, comment="Per-goal review boxes (Part2)"),
        sa.Column("resolution_decision", sa.Text(), nullable=True),
        sa.Column("resolution_rationale", sa.Text(), nullable=True),
        sa.Column("outcome_summary", sa.Text(), nullable=True),
        sa.Column("goal_evidence", sa.Text(), nullable=True),
        sa.Column("goal_outcomes", sa.JSON(), nullable=True, comment="Per-goal attainment (Part4)"),
        sa.Column(
            "updated_by",
            sa.String(length=320),
            nullable=True,
            comment="Email of the last writer (set by the store)",
        ),
        *_timestamps(),
        sa.UniqueConstraint("pair_id", "part_name", name="uq_parts_pair_part"),
        sa.CheckConstraint(
            "part_name IN ('Part1', 'Part2', 'Part3', 'Part4')", name="check_part_name"
        ),
        sa.CheckConstraint(
            "p2_choice IS NULL OR p2_choice IN ('A', 'B', 'C')", name="check_p2_choice"
        ),
    )


def downgrade() -> None:
    op.drop_table("parts")
    op.drop_table("admins")
    for role in ("educator", "evaluator", "resolution"):
        op.drop_index(f"ix_roster_{role}_email_lower", table_name="roster")
    op.drop_table("roster")
