"""
Admin CSV Export
"""

from .csv_export import (
    PARTS_EXPORT_FILENAME,
    ROSTER_EXPORT_FILENAME,
    part_export_row,
    roster_export_row,
    to_csv,
)

__all__ = [
    "PARTS_EXPORT_FILENAME",
    "ROSTER_EXPORT_FILENAME",
    "part_export_row",
    "roster_export_row",
    "to_csv",
]
