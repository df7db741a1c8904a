import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Tuple

from .. import config
from ..models import CameraFile, epoch_seconds


class DirectoryCache:
    """
    (base_path, iso_date) -> directory, resolved at most once per run.
    """

    def __init__(self):
        self._entries: Dict[Tuple[Path, str], Path] = {}

    def get(self, base_path: Path, iso_date: str) -> Optional[Path]:
        return self._entries.get((base_path, iso_date))

    def put(self, base_path: Path, iso_date: str, directory: Path):
        self._entries[(base_path, iso_date)] = directory

    def __len__(self):
        return len(self._entries)


@dataclass
class SessionState:
    """Per-phase placement state. Never shared between phases."""
    current_directory: Optional[Path] = None
    last_timestamp: datetime = datetime.min


class SessionDirectoryResolver:
    def __init__(self,
                 minimum_day_break: int = config.MINIMUM_DAY_BREAK,
                 cache: Optional[DirectoryCache] = None,
                 dry_run: bool = False):
        """
        Args:
            minimum_day_break: Gap in seconds that starts a new session.
            dry_run: Plan new directories without creating them.
        """
        self.minimum_day_break = minimum_day_break
        self.cache = cache if cache is not None else DirectoryCache()
        self.dry_run = dry_run

    def assign_directory(self, base_path: Path, camera_file: CameraFile, state: SessionState) -> Path:
        """
        Picks the directory for the next file of a timestamp-sorted stream.

        A new directory is looked up only when the gap since the previous
        file exceeds the day break. A session running past midnight stays in
        the directory of the day it started.
        """
        gap = camera_file.epoch_seconds - epoch_seconds(state.last_timestamp)
        if state.current_directory is None or gap > self.minimum_day_break:
            state.current_directory = self.directory_for(base_path, camera_file.timestamp)

        state.last_timestamp = camera_file.timestamp
        return state.current_directory

    def directory_for(self, base_path: Path, timestamp: datetime) -> Path:
        iso = timestamp.strftime('%Y-%m-%d')

        cached = self.cache.get(base_path, iso)
        if cached is not None:
            return cached

        directory = self._find_existing(base_path, iso, timestamp.year)
        if directory is None:
            # No existing directory, so create one named by the ISO date.
            directory = base_path / iso
            if self.dry_run:
                logging.debug(f"[DRY RUN] Would create {directory}")
            else:
                directory.mkdir(exist_ok=True)
                logging.debug(f"Created {directory}")

        self.cache.put(base_path, iso, directory)
        return directory

    def _find_existing(self, base_path: Path, iso: str, year: int) -> Optional[Path]:
        # Existing directories may carry a description, e.g. "2024-01-01 Beach".
        for parent in (base_path, base_path / str(year)):
            if not parent.is_dir():
                continue
            matches = sorted(p for p in parent.glob(f"{iso}*") if p.is_dir())
            if matches:
                return matches[0]
        return None
