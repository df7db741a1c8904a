from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional

if TYPE_CHECKING:
    from .organization.mover import TransferOperation

# Naive reference point for interval arithmetic. Kept naive so that
# datetime.min is representable (it seeds every phase's session state).
EPOCH = datetime(1970, 1, 1)


def epoch_seconds(ts: datetime) -> int:
    return int((ts - EPOCH).total_seconds())


@dataclass(frozen=True)
class CameraFile:
    """
    One image/video file discovered on a camera card.
    """
    path: Path
    timestamp: datetime     # resolved capture time (naive, local)

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def epoch_seconds(self) -> int:
        return epoch_seconds(self.timestamp)


@dataclass(frozen=True)
class PhaseSpec:
    """Configuration form of a phase: operation_kind is copy, move or mock."""
    title: str
    operation_kind: str
    base_path: Path


@dataclass
class Phase:
    title: str
    operation: "TransferOperation"
    base_path: Path


@dataclass
class TransferFailure:
    source: Path
    destination: Optional[Path]
    error: str


@dataclass
class PhaseReport:
    """
    Outcome of one phase. directory_counts is for reporting only; a directory
    claims a file even when the file was already present there.
    """
    title: str
    base_path: Path
    directory_counts: Dict[Path, int] = field(default_factory=dict)
    failures: List[TransferFailure] = field(default_factory=list)
    skipped: int = 0

    def claim(self, directory: Path):
        self.directory_counts[directory] = self.directory_counts.get(directory, 0) + 1

    @property
    def total_files(self) -> int:
        return sum(self.directory_counts.values())
