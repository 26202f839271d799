"""
CSV Export

Flattens roster pairs and Part records into uniform rows and serializes them
as CSV for the admin download.

Format:
- header row from the first row's keys, in order
- comma separated, rows joined by newlines
- values containing a comma, quote, CR or LF are quoted, quotes doubled
- None serializes to an empty field
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

from goalsportal.core.schemas import (
    GOAL_SLOT_COUNT,
    GoalOutcome,
    GoalReview,
    GoalSlot,
    PartRecordSchema,
    RosterPairSchema,
)

PARTS_EXPORT_FILENAME = "parts_export.csv"
ROSTER_EXPORT_FILENAME = "roster_export.csv"

NEEDS_QUOTING = re.compile(r"[\",\r\n]")

# Column prefixes for the flattened slot sequences
SLOT_PREFIXES = {
    "goals": ("goal", GoalSlot),
    "goal_reviews": ("review", GoalReview),
    "goal_outcomes": ("outcome", GoalOutcome),
}


def to_csv(rows: Sequence[Mapping[str, Any]]) -> str:
    """Serialize uniform rows to CSV text.

    Returns:
        CSV text, or an empty string when there are no rows
    """
    if not rows:
        return ""

    columns = list(rows[0].keys())
    lines = [",".join(_quote(column) for column in columns)]
    for row in rows:
        lines.append(",".join(_quote(_cell(row.get(column))) for column in columns))

    return "\n".join(lines)


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _quote(text: str) -> str:
    # Empty fields stay bare, even when they are the only field on the line
    if NEEDS_QUOTING.search(text):
        return '"' + text.replace('"', '""') + '"'
    return text


def roster_export_row(pair: RosterPairSchema) -> dict[str, Any]:
    return pair.model_dump()


def part_export_row(pair: RosterPairSchema, record: PartRecordSchema) -> dict[str, Any]:
    """One export row: roster columns, part name, then every Part field.

    Slot sequences are flattened to ``goal1_goal_statement``,
    ``review2_feedback``, ``outcome3_attainment`` and so on, so every row
    has the same columns whichever part it belongs to.
    """
    row: dict[str, Any] = roster_export_row(pair)
    row["part_name"] = str(record.part_name)

    fields = record.editable_dump()
    for field, value in fields.items():
        if field in SLOT_PREFIXES:
            row.update(_flatten_slots(field, record))
        else:
            row[field] = value

    row["updated_by"] = record.updated_by
    row["updated_at"] = record.updated_at.isoformat() if record.updated_at else None
    return row


def _flatten_slots(section: str, record: PartRecordSchema) -> dict[str, Any]:
    prefix, model = SLOT_PREFIXES[section]
    flat: dict[str, Any] = {}
    slots = record.slots(section)  # type: ignore[arg-type]
    for index in range(GOAL_SLOT_COUNT):
        slot = slots[index].model_dump(mode="json")
        for key in model.model_fields:
            flat[f"{prefix}{index + 1}_{key}"] = slot[key]
    return flat
