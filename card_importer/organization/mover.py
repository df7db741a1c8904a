import logging
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Tuple

from ..exceptions import FileOperationError


class TransferOperation:
    """
    Applies one file placement. A None destination means the file is
    already there, which is a no-op rather than an error.
    """
    kind = "abstract"

    def apply(self, source: Path, destination: Optional[Path]) -> bool:
        """Returns True if anything was transferred."""
        if destination is None:
            return False
        try:
            self._transfer(source, destination)
        except (OSError, shutil.Error) as e:
            raise FileOperationError(f"{self.kind} {source} -> {destination} failed: {e}") from e
        return True

    def _transfer(self, source: Path, destination: Path):
        raise NotImplementedError


class CopyOperation(TransferOperation):
    kind = "copy"

    def _transfer(self, source: Path, destination: Path):
        shutil.copy2(str(source), str(destination))


class MoveOperation(TransferOperation):
    kind = "move"

    def _transfer(self, source: Path, destination: Path):
        shutil.move(str(source), str(destination))


class MockOperation(TransferOperation):
    """
    Records what would happen without touching the archive.
    If log_file is set, the would-be commands are appended to it.
    """
    kind = "mock"

    def __init__(self, log_file: Optional[Path] = None):
        self.log_file = log_file
        self.planned: List[Tuple[Path, Optional[Path]]] = []

    def apply(self, source: Path, destination: Optional[Path]) -> bool:
        self.planned.append((source, destination))
        if destination is None:
            logging.debug(f"[MOCK] {source} already present")
            return False

        logging.info(f"[MOCK] mv {source} {destination}")
        if self.log_file:
            with self.log_file.open("a", encoding="utf-8") as f:
                f.write(f"mv {source} {destination}\n")
        return True


OPERATIONS = {
    "copy": CopyOperation,
    "move": MoveOperation,
    "mock": MockOperation,
}


def make_operation(kind: str, mock_log: Optional[Path] = None) -> TransferOperation:
    if kind not in OPERATIONS:
        raise ValueError(f"Unknown operation kind: {kind!r}")
    if kind == "mock":
        return MockOperation(mock_log)
    return OPERATIONS[kind]()


def unmount_card(card: Path) -> bool:
    try:
        result = subprocess.run(["umount", str(card)], capture_output=True, text=True)
    except OSError as e:
        logging.error(f"Failed to unmount {card}: {e}")
        return False
    if result.returncode != 0:
        logging.error(f"Failed to unmount {card}: {result.stderr.strip()}")
        return False
    logging.info(f"Unmounted {card}")
    return True
