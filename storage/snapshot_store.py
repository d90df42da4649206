"""
Snapshot Store
JSON snapshot per section with one rolling backup, plus file-age tracking
"""
import json
import logging
import math
import os
import shutil
import tempfile
import time
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

from models import Section, SectionEnvelope
from utils.exceptions import StorageError


logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".backup"


class SnapshotStore:
    """
    The only component that touches snapshot files.

    ``save`` copies the current file to ``<name>.backup`` and then replaces the
    canonical file atomically, so a failed write never leaves a partial snapshot.
    """

    def __init__(
        self,
        data_dir: Union[str, Path],
        stale_minutes: int = 120,
        unhealthy_minutes: int = 240,
    ):
        self.data_dir = Path(data_dir)
        self.stale_minutes = stale_minutes
        self.unhealthy_minutes = unhealthy_minutes

    def path_for(self, name: Union[str, Section]) -> Path:
        if isinstance(name, Section):
            name = name.filename
        return self.data_dir / name

    @staticmethod
    def backup_path(path: Path) -> Path:
        return path.with_name(path.name + BACKUP_SUFFIX)

    def save(self, name: Union[str, Section], envelope: Union[SectionEnvelope, Dict[str, Any]]) -> Path:
        """Write a snapshot, keeping the previous one as the single backup."""
        path = self.path_for(name)
        payload = envelope.to_snapshot() if isinstance(envelope, SectionEnvelope) else envelope
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            if path.exists():
                shutil.copyfile(path, self.backup_path(path))
                logger.debug("Backed up %s", path.name)
            self._write_atomic(path, payload)
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Failed to save snapshot {path.name}", {"error": str(e)}) from e
        logger.info("Saved %s", path.name)
        return path

    def _write_atomic(self, path: Path, payload: Dict[str, Any]) -> None:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=self.data_dir)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def load(self, name: Union[str, Section]) -> Optional[Dict[str, Any]]:
        """Read a snapshot; None when missing or unreadable."""
        path = self.path_for(name)
        if not path.exists():
            logger.warning("Snapshot not found: %s", path)
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Error reading %s: %s", path, e)
            return None

    def age(self, name: Union[str, Section], now: Optional[float] = None) -> float:
        """Seconds since the snapshot was last modified; ``math.inf`` when missing."""
        path = self.path_for(name)
        try:
            mtime = path.stat().st_mtime
        except FileNotFoundError:
            return math.inf
        current = time.time() if now is None else now
        return max(0.0, current - mtime)

    def data_age(self, name: Union[str, Section], now: Optional[float] = None) -> Dict[str, Any]:
        """``{"minutes", "stale"}`` as attached to API responses."""
        minutes = self.age(name, now=now) / 60
        return {
            "minutes": round(minutes) if math.isfinite(minutes) else None,
            "stale": minutes > self.stale_minutes,
        }

    def health(self, sections: Iterable[Section] = tuple(Section), now: Optional[float] = None) -> Dict[str, Any]:
        """Per-file existence and age; healthy when every file exists and is fresh."""
        files = {}
        healthy = True
        for section in sections:
            minutes = self.age(section, now=now) / 60
            exists = math.isfinite(minutes)
            files[section.value] = {
                "exists": exists,
                "ageMinutes": round(minutes) if exists else None,
                "stale": minutes > self.stale_minutes,
            }
            healthy = healthy and exists and minutes < self.unhealthy_minutes
        return {"healthy": healthy, "dataFiles": files}
