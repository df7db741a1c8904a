import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from . import config
from .exceptions import FatalPreconditionError
from .models import PhaseReport, PhaseSpec
from .organization.mover import unmount_card
from .pipeline import run
from .scanning.filesystem import MediaScanner


class CardImporterApp:
    def __init__(self,
                 main_root: Path,
                 backup_root: Path,
                 media_root: Path = config.DEFAULT_MEDIA_ROOT,
                 scanner: Optional[MediaScanner] = None,
                 require_sentinels: bool = True):
        self.main_root = main_root
        self.backup_root = backup_root
        self.media_root = media_root
        self.scanner = scanner or MediaScanner()
        self.require_sentinels = require_sentinels
        self.unmount_failures: List[Path] = []

    def import_cards(self,
                     mock: bool = False,
                     mock_log: Optional[Path] = None,
                     minimum_day_break: int = config.MINIMUM_DAY_BREAK,
                     unmount: bool = True,
                     show_progress: bool = True) -> List[PhaseReport]:
        """
        Executes the import:
        1. Check the archives are mounted
        2. Find cards and files, resolve capture times
        3. Copy to main archive, then move to backup (or mock it)
        4. Unmount the cards
        """
        # The clock reading every capture time is checked against.
        run_start = datetime.now()

        self.check_archives()

        # --- Step 2: Discovery ---
        cards = self.scanner.list_card_mounts(self.media_root)
        if not cards:
            raise FatalPreconditionError("No cards found (did you remember to poke the keyboard?)")
        plural = "" if len(cards) == 1 else "s"
        logging.info(f"Found card{plural}: {', '.join(c.name for c in cards)}")

        camera_files = self.scanner.load_camera_files(cards, run_start)
        if not camera_files:
            raise FatalPreconditionError("No camera files found on any card.")

        # --- Step 3: Transfer ---
        reports = run(
            camera_files,
            self.phase_specs(mock),
            minimum_day_break=minimum_day_break,
            mock_log=mock_log,
            show_progress=show_progress,
        )

        # --- Step 4: Release media ---
        if unmount and not mock:
            self.unmount_failures = [card for card in cards if not unmount_card(card)]

        return reports

    def phase_specs(self, mock: bool) -> List[PhaseSpec]:
        if mock:
            return [PhaseSpec("Test mockup...", "mock", self.main_root)]
        return [
            PhaseSpec("Copy to Pictures...", "copy", self.main_root),
            PhaseSpec("Move to Backup...", "move", self.backup_root),
        ]

    def check_archives(self):
        for root, sentinel, label in (
            (self.main_root, config.MAIN_SENTINEL, "Pictures"),
            (self.backup_root, config.BACKUP_SENTINEL, "Backup"),
        ):
            if not root.is_dir():
                raise FatalPreconditionError(f"{label} archive {root} does not exist")
            if self.require_sentinels and not (root / sentinel).exists():
                raise FatalPreconditionError(f"{label} RAID not working?!? ({root / sentinel} missing)")
