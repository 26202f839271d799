"""
Roster Schemas
"""

from pydantic import BaseModel, ConfigDict


class RosterPairSchema(BaseModel):
    """A roster pair as visible to the signed-in user."""

    model_config = ConfigDict(from_attributes=True)

    pair_id: str
    school_name: str | None = None
    educator_email: str | None = None
    educator_name: str | None = None
    evaluator_email: str | None = None
    evaluator_name: str | None = None
    resolution_email: str | None = None
    resolution_name: str | None = None

    @property
    def display_label(self) -> str:
        """Human-readable label for pair pickers."""
        return (
            f"{self.educator_name or 'Educator'} (Educator) - "
            f"{self.evaluator_name or 'Evaluator'} (Evaluator) - "
            f"{self.resolution_name or 'Resolution'} (Resolution)"
        )


class RosterEntry(RosterPairSchema):
    """Roster pair plus the parts the caller may edit on it."""

    label: str
    editable_parts: list[str]
