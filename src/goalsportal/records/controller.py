"""
Record Access Controller

Drives one portal view: which pair and part are selected, whether the signed-in
user may edit that part, and the load -> edit -> save -> reload cycle against
the store.

Responses that arrive after the selection has moved on are dropped. Every
selection or session change bumps a generation counter; a load applies its
result only if its generation is still current. A save is bound to the
(pair_id, part_name) captured when it started and only replaces local state
if that key is still selected when the canonical row comes back.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol

from goalsportal.access.roles import PartName, can_edit
from goalsportal.access.session import SessionContext
from goalsportal.core.schemas import (
    READ_ONLY_NOTICE,
    PartFields,
    PartRecordSchema,
    PartView,
    RosterPairSchema,
    StatusBanner,
)
from goalsportal.core.schemas.parts import SlotSection
from goalsportal.records.store import RecordPermissionError, StoreError

logger = logging.getLogger(__name__)

SAVED_MESSAGE = "Saved"
LOAD_FAILED_MESSAGE = "This section could not be loaded. Reload it before editing."


class PartStore(Protocol):
    """Store operations the controller relies on."""

    async def query_roster(self) -> list[RosterPairSchema]: ...

    async def query_part(
        self, pair_id: str, part_name: PartName | str
    ) -> PartRecordSchema | None: ...

    async def upsert_part(self, record: PartRecordSchema) -> PartRecordSchema: ...


class RecordAccessController:
    """State machine for one view of the shared evaluation record."""

    def __init__(self, session: SessionContext, store: PartStore):
        self.session = session
        self.store = store

        self.pairs: list[RosterPairSchema] = []
        self.pair_id: str | None = None
        self.part: PartName = PartName.PART1

        self.record: PartFields | None = None
        self.canonical: PartRecordSchema | None = None
        self.status: StatusBanner | None = None
        self.saving = False
        self.load_failed = False

        self._generation = 0
        self._unsubscribe = session.subscribe(self._on_session_change)

    # ========================================================================
    # DERIVED STATE
    # ========================================================================

    @property
    def current_pair(self) -> RosterPairSchema | None:
        return next((p for p in self.pairs if p.pair_id == self.pair_id), None)

    @property
    def can_edit(self) -> bool:
        """Whether the signed-in user owns the selected part of the selected pair."""
        return can_edit(self.current_pair, self.part, self.session.email)

    @property
    def editing_disabled(self) -> bool:
        return not self.can_edit or self.saving or self.load_failed

    @property
    def read_only_notice(self) -> str | None:
        if not self.session.is_authenticated or self.can_edit:
            return None
        return READ_ONLY_NOTICE

    def view(self) -> PartView:
        """Snapshot of what the UI should render."""
        if self.pair_id is None:
            raise ValueError("No pair selected")
        return PartView(
            pair_id=self.pair_id,
            part_name=self.part,
            record=self.record if self.record is not None else PartFields(),
            exists=self.canonical is not None,
            can_edit=self.can_edit,
            editing_disabled=self.editing_disabled,
            read_only_notice=self.read_only_notice,
            status=self.status,
            updated_by=self.canonical.updated_by if self.canonical else None,
            updated_at=self.canonical.updated_at if self.canonical else None,
        )

    # ========================================================================
    # SELECTION
    # ========================================================================

    async def refresh_roster(self, *, select_first: bool = True) -> list[RosterPairSchema]:
        """Load the pairs visible to the signed-in user.

        With `select_first`, selects the first pair (and loads its record) when
        nothing is selected yet or the selected pair is no longer visible.
        """
        if not self.session.is_authenticated:
            self.pairs = []
            return self.pairs

        generation = self._generation
        try:
            pairs = await self.store.query_roster()
        except StoreError as e:
            logger.warning(f"Roster load failed: {e}")
            self._banner("error", str(e))
            return self.pairs

        if generation != self._generation:
            return self.pairs

        self.pairs = pairs
        if select_first and pairs and self.current_pair is None:
            await self.select_pair(pairs[0].pair_id)
        return self.pairs

    async def open(self, pair_id: str, part_name: PartName | str) -> bool:
        """Refresh the roster, then select `pair_id` / `part_name` and load it.

        Returns:
            False if the pair isn't visible to the signed-in user
        """
        await self.refresh_roster(select_first=False)
        if not any(pair.pair_id == pair_id for pair in self.pairs):
            return False
        self.part = PartName(part_name)
        await self.select_pair(pair_id)
        return True

    async def select_pair(self, pair_id: str) -> PartFields:
        """Switch the active pair and reload the current part for it."""
        self.pair_id = pair_id
        return await self._reload_selection()

    async def select_part(self, part_name: PartName | str) -> PartFields:
        """Switch the active part and reload it for the active pair."""
        self.part = PartName(part_name)
        return await self._reload_selection()

    async def _reload_selection(self) -> PartFields:
        self._generation += 1
        self.status = None
        if self.pair_id is None:
            self.record = None
            self.canonical = None
            self.load_failed = False
            return PartFields()
        return await self.load(self.pair_id, self.part)

    # ========================================================================
    # LOAD / EDIT / SAVE
    # ========================================================================

    async def load(self, pair_id: str, part_name: PartName | str) -> PartFields:
        """Fetch the record for (pair_id, part_name).

        A missing row is the normal initial state and yields an empty record.
        Store failures raise an error banner and also yield an empty record;
        editing stays disabled until a later load of the selection succeeds.
        The result only becomes local state if the selection hasn't changed
        while the fetch was in flight.
        """
        part = PartName(part_name)
        generation = self._generation

        failed = False
        try:
            row = await self.store.query_part(pair_id, part)
        except StoreError as e:
            logger.warning(f"Load failed for {pair_id}/{part}: {e}")
            row = None
            failed = True
            if generation == self._generation:
                self._banner("error", str(e))

        fields = PartFields.model_validate(row.editable_dump()) if row else PartFields()

        if generation == self._generation and (pair_id, part) == self._key():
            self.canonical = row
            self.record = fields
            self.load_failed = failed
        else:
            logger.debug(f"Dropped stale load for {pair_id}/{part}")
        return fields

    def edit(self, **fields: Any) -> bool:
        """Apply field edits to the local draft.

        Returns:
            False (with a permission banner) when editing is disabled
        """
        if not self._check_editable():
            return False
        self.record = self._draft().merged(fields)
        return True

    def edit_slot(self, section: SlotSection, index: int, **fields: Any) -> bool:
        """Edit one slot of a goal sequence (``goals``, ``goal_reviews``, ``goal_outcomes``).

        Raises:
            IndexError: If index is outside the fixed slot range
        """
        slots = self._draft().slots(section)
        if not 0 <= index < len(slots):
            raise IndexError(f"{section} slot {index} out of range (0-{len(slots) - 1})")
        update: list[dict[str, Any]] = [{} for _ in range(index)] + [fields]
        return self.edit(**{section: update})

    def edit_goal(self, index: int, **fields: Any) -> bool:
        return self.edit_slot("goals", index, **fields)

    async def save(self, fields: PartFields | Mapping[str, Any] | None = None) -> bool:
        """Merge `fields` into the draft, upsert it, then re-sync from the store.

        On success local state is replaced by the canonical stored row. On
        failure the draft is left as it was and an error banner is raised.

        Returns:
            True if the record was written
        """
        if self.saving:
            self._banner("info", "A save is already in progress.")
            return False
        if not self._check_editable():
            return False

        assert self.pair_id is not None
        pair_id, part = self.pair_id, self.part
        merged = self._draft().merged(fields)
        record = PartRecordSchema(pair_id=pair_id, part_name=part, **merged.editable_dump())

        self.saving = True
        self.status = None
        try:
            canonical = await self.store.upsert_part(record)
        except RecordPermissionError as e:
            self._banner("error", str(e))
            return False
        except StoreError as e:
            logger.warning(f"Save failed for {pair_id}/{part}: {e}")
            self._banner("error", str(e))
            return False
        finally:
            self.saving = False

        if (pair_id, part) == self._key():
            self._generation += 1
            self.canonical = canonical
            self.record = PartFields.model_validate(canonical.editable_dump())
            self._banner("success", SAVED_MESSAGE)
        else:
            logger.info(f"Saved {pair_id}/{part} after selection moved on; view left untouched")
        return True

    def dismiss_status(self) -> None:
        self.status = None

    def close(self) -> None:
        """Stop listening to session changes."""
        self._unsubscribe()

    # ========================================================================
    # HELPERS
    # ========================================================================

    def _key(self) -> tuple[str | None, PartName]:
        return self.pair_id, self.part

    def _draft(self) -> PartFields:
        return self.record if self.record is not None else PartFields()

    def _check_editable(self) -> bool:
        if self.pair_id is None:
            self._banner("error", "Select a pair first.")
            return False
        if not self.can_edit:
            self._banner("error", READ_ONLY_NOTICE)
            return False
        if self.load_failed:
            self._banner("error", LOAD_FAILED_MESSAGE)
            return False
        if self.saving:
            self._banner("info", "Please wait for the current save to finish.")
            return False
        return True

    def _banner(self, kind: str, message: str) -> None:
        self.status = StatusBanner(kind=kind, message=message)  # type: ignore[arg-type]

    def _on_session_change(self, email: str | None) -> None:
        logger.info("Session changed; resetting view", extra={"signed_in": email is not None})
        self._generation += 1
        self.pairs = []
        self.pair_id = None
        self.record = None
        self.canonical = None
        self.status = None
        self.load_failed = False
