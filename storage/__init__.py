"""
Storage Module
Section snapshots on disk
"""
from .snapshot_store import BACKUP_SUFFIX, SnapshotStore

__all__ = [
    "BACKUP_SUFFIX",
    "SnapshotStore",
]
