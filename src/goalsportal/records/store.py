"""
Part Record Store

Relational store for roster pairs and Part records, bound to one viewer.
Row visibility mirrors the database's row-level policies:

- a viewer sees the pairs on which they hold any role (admins see all)
- participants of a pair may read all four parts of it
- only the role that owns a part may write it
- export procedures are admin-only
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import func, or_, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from goalsportal.access.roles import PartName, can_edit
from goalsportal.core.models import Admin, PartRecord, RosterPair
from goalsportal.core.schemas import PartRecordSchema, RosterPairSchema
from goalsportal.export.csv_export import part_export_row, roster_export_row

logger = logging.getLogger(__name__)

UPSERT_DIALECTS = {"postgresql": pg_insert, "sqlite": sqlite_insert}


class StoreError(Exception):
    """Store read/write failure."""

    pass


class RecordPermissionError(StoreError):
    """The viewer may not perform this operation."""

    pass


class RecordStore:
    """Store access on behalf of one signed-in viewer."""

    def __init__(self, db: AsyncSession, viewer_email: str | None):
        self.db = db
        self.viewer_email = viewer_email.strip().lower() if viewer_email else None
        self._is_admin: bool | None = None

    # ========================================================================
    # PROCEDURES
    # ========================================================================

    async def call_procedure(self, name: str) -> Any:
        """Run a named store procedure.

        Supported: ``is_admin``, ``admin_export``, ``admin_export_roster``.

        Raises:
            StoreError: For unknown procedure names
            RecordPermissionError: Export procedures called by a non-admin
        """
        if name == "is_admin":
            return await self.is_admin()
        if name == "admin_export":
            return await self.admin_export()
        if name == "admin_export_roster":
            return await self.admin_export_roster()
        raise StoreError(f"Unknown procedure: {name}")

    async def is_admin(self) -> bool:
        if self.viewer_email is None:
            return False
        if self._is_admin is None:
            result = await self._execute(
                select(Admin.email).where(func.lower(Admin.email) == self.viewer_email)
            )
            self._is_admin = result.scalars().first() is not None
        return self._is_admin

    async def admin_export(self) -> list[dict[str, Any]]:
        """Every Part record joined with its roster pair, flattened for CSV."""
        await self._require_admin()
        result = await self._execute(
            select(PartRecord, RosterPair)
            .join(RosterPair, PartRecord.pair_id == RosterPair.pair_id)
            .order_by(PartRecord.pair_id, PartRecord.part_name)
            .execution_options(populate_existing=True)
        )
        return [
            part_export_row(RosterPairSchema.model_validate(pair), self._to_schema(record))
            for record, pair in result.all()
        ]

    async def admin_export_roster(self) -> list[dict[str, Any]]:
        """The full roster, one row per pair."""
        await self._require_admin()
        result = await self._execute(select(RosterPair).order_by(RosterPair.pair_id))
        return [
            roster_export_row(RosterPairSchema.model_validate(pair))
            for pair in result.scalars().all()
        ]

    # ========================================================================
    # ROSTER
    # ========================================================================

    async def query_roster(self) -> list[RosterPairSchema]:
        """Pairs visible to the viewer, ordered by pair id."""
        if self.viewer_email is None:
            return []

        stmt = select(RosterPair).order_by(RosterPair.pair_id)
        if not await self.is_admin():
            stmt = stmt.where(self._participant_clause())

        result = await self._execute(stmt)
        return [RosterPairSchema.model_validate(pair) for pair in result.scalars().all()]

    async def get_pair(self, pair_id: str) -> RosterPairSchema | None:
        """A single pair, or None when it doesn't exist or isn't visible."""
        pair = await self._visible_pair(pair_id)
        return RosterPairSchema.model_validate(pair) if pair else None

    # ========================================================================
    # PARTS
    # ========================================================================

    async def query_part(self, pair_id: str, part_name: PartName | str) -> PartRecordSchema | None:
        """The stored record for (pair_id, part_name), or None if absent."""
        if await self._visible_pair(pair_id) is None:
            return None

        result = await self._execute(
            select(PartRecord)
            .where(PartRecord.pair_id == pair_id, PartRecord.part_name == str(part_name))
            .execution_options(populate_existing=True)
        )
        record = result.scalar_one_or_none()
        return self._to_schema(record) if record else None

    async def upsert_part(self, record: PartRecordSchema) -> PartRecordSchema:
        """Insert or update the record keyed on (pair_id, part_name).

        Raises:
            RecordPermissionError: If the viewer doesn't own this part of the pair
            StoreError: If the write fails
        """
        part = PartName(record.part_name)
        pair = await self._visible_pair(record.pair_id)
        if not can_edit(pair, part, self.viewer_email):
            logger.warning(
                f"Rejected write to {record.pair_id}/{part}",
                extra={"viewer": self.viewer_email},
            )
            raise RecordPermissionError(f"Not allowed to edit {part} for pair {record.pair_id}")

        insert = UPSERT_DIALECTS.get(self.db.get_bind().dialect.name)
        if insert is None:
            raise StoreError(f"Upsert not supported on {self.db.get_bind().dialect.name}")

        now = datetime.now(UTC)
        values = {
            **record.editable_dump(),
            "updated_by": self.viewer_email,
            "updated_at": now,
        }
        stmt = insert(PartRecord).values(
            id=uuid4(),
            pair_id=record.pair_id,
            part_name=str(part),
            created_at=now,
            **values,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["pair_id", "part_name"],
            set_={column: stmt.excluded[column] for column in values},
        )

        try:
            await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Upsert failed for {record.pair_id}/{part}: {e}")
            raise StoreError(f"Could not save {part}: {e.__class__.__name__}") from e

        logger.info(f"Saved {record.pair_id}/{part}", extra={"viewer": self.viewer_email})

        saved = await self.query_part(record.pair_id, part)
        if saved is None:
            raise StoreError(f"Saved {part} for pair {record.pair_id} could not be read back")
        return saved

    # ========================================================================
    # HELPERS
    # ========================================================================

    def _participant_clause(self):  # type: ignore[no-untyped-def]
        me = self.viewer_email
        return or_(
            func.lower(RosterPair.educator_email) == me,
            func.lower(RosterPair.evaluator_email) == me,
            func.lower(RosterPair.resolution_email) == me,
        )

    async def _visible_pair(self, pair_id: str) -> RosterPair | None:
        if self.viewer_email is None:
            return None
        stmt = select(RosterPair).where(RosterPair.pair_id == pair_id)
        if not await self.is_admin():
            stmt = stmt.where(self._participant_clause())
        result = await self._execute(stmt)
        return result.scalar_one_or_none()

    async def _require_admin(self) -> None:
        if not await self.is_admin():
            raise RecordPermissionError("Admin access required")

    async def _execute(self, stmt):  # type: ignore[no-untyped-def]
        try:
            return await self.db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error(f"Store query failed: {e}")
            raise StoreError(f"Store query failed: {e.__class__.__name__}") from e

    @staticmethod
    def _to_schema(record: PartRecord) -> PartRecordSchema:
        return PartRecordSchema.model_validate(record)
