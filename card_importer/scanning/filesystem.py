import getpass
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .. import config
from ..metadata.capture_time import CaptureTimeResolver
from ..models import CameraFile


class MediaScanner:
    def __init__(self, resolver: Optional[CaptureTimeResolver] = None):
        self.resolver = resolver or CaptureTimeResolver()

    def list_card_mounts(self, media_root: Path) -> List[Path]:
        """
        Finds camera cards under the automount point.

        Desktop automounters put volumes under <media_root>/<user>/; if that
        directory doesn't exist the media root itself is searched.
        """
        user_root = media_root / self._login_name()
        search_root = user_root if user_root.is_dir() else media_root

        try:
            candidates = sorted(p for p in search_root.iterdir() if p.is_dir())
        except OSError as e:
            logging.warning(f"Cannot list {search_root}: {e}")
            return []

        return [p for p in candidates if (p / config.CAPTURE_DIR_NAME).is_dir()]

    def list_capture_files(self, card_root: Path) -> List[Path]:
        """
        All recognised image/video files in DCIM/<folder>/ on a card.
        De-duplicated, because case-folding filesystems can report a file twice.
        """
        capture_dir = card_root / config.CAPTURE_DIR_NAME
        seen = {}
        for folder in sorted(capture_dir.iterdir()):
            if not folder.is_dir():
                continue
            for path in sorted(folder.iterdir()):
                if path.name.startswith("._") or not path.is_file():
                    continue
                if path.suffix.lower() not in config.CAPTURE_EXTS:
                    continue
                seen.setdefault(os.path.normcase(str(path.resolve())), path.resolve())
        return list(seen.values())

    def load_camera_files(self, cards: List[Path], run_start_time: datetime) -> List[CameraFile]:
        camera_files = []
        for card in cards:
            paths = self.list_capture_files(card)
            if not paths:
                logging.warning(f"No files found on card {card.name}. Is that okay?")
                continue
            logging.info(f"{card.name}: {len(paths)} files")
            for path in paths:
                camera_files.append(self.resolver.resolve_file(path, run_start_time))
        return camera_files

    def _login_name(self) -> str:
        try:
            return getpass.getuser()
        except (KeyError, OSError):
            return ""
