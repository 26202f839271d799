"""
Import roster pairs (and admins) from CSV into the database.

Expected CSV columns:
    pair_id, school_name, educator_email, educator_name, evaluator_email,
    evaluator_name, resolution_email, resolution_name

Existing pairs are updated in place; Part records are never touched.

Usage:
    python -m scripts.import_roster roster.csv [--dry-run] [--admin ops@school.org ...]
"""

import argparse
import asyncio
import csv
import logging
import sys
from typing import Any

from goalsportal.core.database import AsyncSessionLocal
from goalsportal.core.models import Admin, RosterPair
from goalsportal.core.validation import ValidationError, normalize_email, validate_pair_id

logger = logging.getLogger(__name__)

ROLE_COLUMNS = ("educator", "evaluator", "resolution")


def parse_roster_row(row: dict[str, str]) -> dict[str, Any]:
    """Validate one CSV row and return RosterPair column values.

    Emails are lower-cased; blank names and emails become None.

    Raises:
        ValidationError: If pair_id or a non-blank email is invalid
    """
    values: dict[str, Any] = {
        "pair_id": validate_pair_id(row.get("pair_id")),
        "school_name": (row.get("school_name") or "").strip() or None,
    }

    for role in ROLE_COLUMNS:
        email = (row.get(f"{role}_email") or "").strip()
        values[f"{role}_email"] = normalize_email(email) if email else None
        values[f"{role}_name"] = (row.get(f"{role}_name") or "").strip() or None

    return values


def read_roster(csv_file: str) -> tuple[list[dict[str, Any]], list[str]]:
    """Parse the roster file.

    Returns:
        (valid rows, error messages for rejected lines)
    """
    rows: list[dict[str, Any]] = []
    errors: list[str] = []
    seen: set[str] = set()

    with open(csv_file, encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        for line_number, row in enumerate(reader, start=2):
            try:
                values = parse_roster_row(row)
            except ValidationError as e:
                errors.append(f"line {line_number}: {e}")
                continue

            if values["pair_id"] in seen:
                errors.append(f"line {line_number}: duplicate pair_id {values['pair_id']}")
                continue

            seen.add(values["pair_id"])
            rows.append(values)

    return rows, errors


async def import_roster(rows: list[dict[str, Any]], admins: list[str]) -> int:
    """Insert or update roster pairs and admin emails.

    Returns:
        Number of roster pairs written
    """
    async with AsyncSessionLocal() as db:
        for values in rows:
            await db.merge(RosterPair(**values))

        for email in admins:
            await db.merge(Admin(email=email))

        await db.commit()

    logger.info(f"Imported {len(rows)} roster pairs and {len(admins)} admins")
    return len(rows)


async def main() -> None:
    parser = argparse.ArgumentParser(description="Import roster CSV into database")
    parser.add_argument("csv_file", help="Path to roster CSV file")
    parser.add_argument("--dry-run", action="store_true", help="Validate only, don't write")
    parser.add_argument(
        "--admin", action="append", default=[], help="Admin email (repeatable)"
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    try:
        rows, errors = read_roster(args.csv_file)
        admins = [normalize_email(email) for email in args.admin]
    except (OSError, ValidationError) as e:
        logger.error(f"Error: {e}")
        sys.exit(1)

    for error in errors:
        logger.warning(error)

    if args.dry_run:
        logger.info(f"Dry run: {len(rows)} valid pairs, {len(errors)} rejected lines")
        sys.exit(0 if not errors else 1)

    count = await import_roster(rows, admins)
    sys.exit(0 if count > 0 and not errors else 1)


if __name__ == "__main__":
    asyncio.run(main())
