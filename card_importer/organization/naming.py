import logging
from pathlib import Path
from typing import Dict, Optional

from .. import config


def files_identical(a: Path, b: Path) -> bool:
    """Byte-for-byte comparison. Sizes are checked first since that's free."""
    if a.stat().st_size != b.stat().st_size:
        return False

    with open(a, 'rb') as fa, open(b, 'rb') as fb:
        while True:
            chunk_a = fa.read(config.COMPARE_CHUNK_SIZE)
            chunk_b = fb.read(config.COMPARE_CHUNK_SIZE)
            if chunk_a != chunk_b:
                return False
            if not chunk_a:
                return True


def numbered_name(path: Path, iteration: int) -> Path:
    """IMG_0001.jpg -> IMG_0001.2.jpg"""
    if not path.suffix:
        return path.with_name(f"{path.name}.{iteration}")
    return path.with_name(f"{path.stem}.{iteration}{path.suffix}")


class CollisionSafeNamer:
    """
    Finds a destination name that never clobbers a different file.

    Cameras reuse file numbers (card swaps, counter resets), so an existing
    IMG_0001.jpg in the target directory may be a different shot entirely.

    With track_planned set (dry runs), names handed out earlier in the phase
    count as taken even though nothing was written to them.
    """

    def __init__(self, comparator=files_identical, track_planned: bool = False):
        self.comparator = comparator
        self.track_planned = track_planned
        self.planned: Dict[Path, Path] = {}

    def forget_planned(self):
        self.planned.clear()

    def resolve_destination_name(self, source: Path, proposed: Path, iteration: int = 0) -> Optional[Path]:
        """
        Returns the path to write to, or None if an identical copy of
        source is already there.
        """
        while True:
            candidate = proposed if iteration == 0 else numbered_name(proposed, iteration)
            occupant = self.planned.get(candidate)
            if occupant is None and candidate.exists():
                occupant = candidate

            if occupant is None:
                if iteration:
                    logging.info(f"Name collision: {source.name} -> {candidate.name}")
                if self.track_planned:
                    self.planned[candidate] = source
                return candidate
            if self.comparator(source, occupant):
                logging.debug(f"Already present: {candidate}")
                return None
            iteration += 1
