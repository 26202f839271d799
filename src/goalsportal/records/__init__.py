"""
Part Records

Store access and the per-view record access controller.
"""

from .controller import RecordAccessController
from .store import RecordPermissionError, RecordStore, StoreError

__all__ = [
    "RecordAccessController",
    "RecordPermissionError",
    "RecordStore",
    "StoreError",
]
