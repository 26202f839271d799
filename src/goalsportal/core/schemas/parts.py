"""
Part Record Schemas

Pydantic models for the per-Part fields, the goal slot sequences and the
views returned to the portal UI.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from goalsportal.access.roles import PartName

GOAL_SLOT_COUNT = 3

READ_ONLY_NOTICE = "You have view-only access to this section."


class P2Choice(StrEnum):
    """Evaluator's position on the educator's goals (Part2)."""

    AGREED = "A"
    AGREED_WITH_REVISIONS = "B"
    NOT_AGREED = "C"


class Attainment(StrEnum):
    """End-of-year goal attainment (Part4)."""

    MET = "met"
    PARTIALLY_MET = "partially_met"
    NOT_MET = "not_met"


# Slot schemas
class GoalSlot(BaseModel):
    """One of the educator's goals (Part1)."""

    model_config = ConfigDict(extra="forbid")

    goal_statement: str | None = None
    why_goal: str | None = Field(None, description="I chose this goal because")
    measure: str | None = Field(None, description="Measure/Assessment")
    why_measure: str | None = Field(None, description="I chose this Measure/Assessment because")
    monitoring_plan: str | None = Field(None, description="My plan for monitoring progress")
    success_criteria: str | None = None
    timeline: str | None = Field(None, description="By when")


class GoalReview(BaseModel):
    """Evaluator's box for one goal (Part2)."""

    model_config = ConfigDict(extra="forbid")

    feedback: str | None = None
    suggested_revision: str | None = None


class GoalOutcome(BaseModel):
    """Attainment of one goal (Part4)."""

    model_config = ConfigDict(extra="forbid")

    attainment: Attainment | None = None
    evidence: str | None = None


SLOT_SECTIONS: dict[str, type[BaseModel]] = {
    "goals": GoalSlot,
    "goal_reviews": GoalReview,
    "goal_outcomes": GoalOutcome,
}

SlotSection = Literal["goals", "goal_reviews", "goal_outcomes"]


class PartFields(BaseModel):
    """Editable fields of a Part record. Every field is optional.

    Unknown keys (including ``pair_id`` / ``part_name``) are dropped: the
    record key always comes from the caller's selection, never the payload.
    """

    model_config = ConfigDict(extra="ignore", from_attributes=True)

    # Part1
    goals: list[GoalSlot] | None = Field(None, max_length=GOAL_SLOT_COUNT)

    # Part2
    p2_choice: P2Choice | None = None
    conversation_summary: str | None = None
    key_evidence: str | None = None
    goal_reviews: list[GoalReview] | None = Field(None, max_length=GOAL_SLOT_COUNT)

    # Part3
    resolution_decision: str | None = None
    resolution_rationale: str | None = None

    # Part4
    outcome_summary: str | None = None
    goal_evidence: str | None = None
    goal_outcomes: list[GoalOutcome] | None = Field(None, max_length=GOAL_SLOT_COUNT)

    def slots(self, section: SlotSection) -> list[Any]:
        """Slot sequence for `section`, padded with empty slots to full size."""
        model = SLOT_SECTIONS[section]
        current = list(getattr(self, section) or [])
        return current + [model() for _ in range(GOAL_SLOT_COUNT - len(current))]

    def editable_dump(self) -> dict[str, Any]:
        """JSON-ready dict of the editable fields only."""
        return self.model_dump(mode="json", include=set(PartFields.model_fields))

    def merged(self, update: PartFields | Mapping[str, Any] | None) -> PartFields:
        """Return a copy with `update` applied on top.

        Only fields set in `update` are changed. Slot sequences merge by
        index: keys set in slot `i` of the update overwrite slot `i`, other
        slots and keys keep their values.
        """
        if update is None:
            return PartFields.model_validate(self.editable_dump())
        if not isinstance(update, PartFields):
            update = PartFields.model_validate(dict(update))

        result = self.editable_dump()
        changes = update.model_dump(mode="json", exclude_unset=True)

        for field, value in changes.items():
            if field in SLOT_SECTIONS and value is not None:
                base = [slot.model_dump(mode="json") for slot in self.slots(field)]  # type: ignore[arg-type]
                for index, slot_changes in enumerate(value):
                    base[index].update(slot_changes)
                result[field] = base
            else:
                result[field] = value

        return PartFields.model_validate(result)


class PartRecordSchema(PartFields):
    """A stored Part record (canonical server state)."""

    pair_id: str
    part_name: PartName
    updated_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class StatusBanner(BaseModel):
    """Dismissible message shown above the form."""

    kind: Literal["error", "success", "info"]
    message: str


class PartView(BaseModel):
    """What the portal renders for the selected pair and part."""

    pair_id: str
    part_name: PartName
    record: PartFields
    exists: bool = Field(description="False until the first save of this part")
    can_edit: bool
    editing_disabled: bool
    read_only_notice: str | None = None
    status: StatusBanner | None = None
    updated_by: str | None = None
    updated_at: datetime | None = None
