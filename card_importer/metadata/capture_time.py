import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from ..exceptions import MetadataExtractionError, TimestampResolutionError
from ..models import CameraFile
from .extract import MetadataExtractor


class CaptureTimeResolver:
    """
    Decides when a camera file was shot.

    The filesystem change time is cheap and usually right, so it wins unless
    it lies in the future relative to the start of the run (some cameras never
    set their clock). Only then is the embedded date read from the file.

    Timestamps in the past are trusted as-is, even absurd ones such as a
    camera clock reset to 1970.
    """

    def __init__(self, probe: Optional[Callable[[Path], datetime]] = None):
        self.probe = probe or MetadataExtractor().get_embedded_capture_date

    def resolve(self, path: Path, fs_change_time: datetime, run_start_time: datetime) -> datetime:
        timestamp = fs_change_time
        if (run_start_time - timestamp).total_seconds() >= 0:
            return timestamp

        logging.info(f"{path.name}: filesystem time {timestamp} is in the future, reading embedded date")
        try:
            timestamp = self.probe(path)
        except (MetadataExtractionError, OSError, ValueError) as e:
            raise TimestampResolutionError(f"Cannot resolve capture time for {path}: {e}") from e

        if not isinstance(timestamp, datetime):
            raise TimestampResolutionError(f"Cannot resolve capture time for {path}: got {timestamp!r}")
        return timestamp

    def resolve_file(self, path: Path, run_start_time: datetime) -> CameraFile:
        fs_change_time = datetime.fromtimestamp(path.stat().st_ctime)
        return CameraFile(path=path, timestamp=self.resolve(path, fs_change_time, run_start_time))
