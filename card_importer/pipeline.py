import logging
from pathlib import Path
from typing import Iterable, List, Optional, Set

from tqdm import tqdm

from . import config
from .exceptions import FileOperationError
from .models import CameraFile, Phase, PhaseReport, PhaseSpec, TransferFailure
from .organization.directories import SessionDirectoryResolver, SessionState
from .organization.mover import make_operation
from .organization.naming import CollisionSafeNamer


def build_phases(specs: Iterable[PhaseSpec], mock_log: Optional[Path] = None) -> List[Phase]:
    return [
        Phase(title=s.title, operation=make_operation(s.operation_kind, mock_log), base_path=s.base_path)
        for s in specs
    ]


class TransferPipeline:
    def __init__(self,
                 directories: Optional[SessionDirectoryResolver] = None,
                 namer: Optional[CollisionSafeNamer] = None,
                 show_progress: bool = True):
        self.directories = directories or SessionDirectoryResolver()
        self.namer = namer or CollisionSafeNamer()
        self.show_progress = show_progress

    def run(self, camera_files: List[CameraFile], phases: List[Phase]) -> List[PhaseReport]:
        """
        Runs each phase over the whole stream before starting the next one,
        so a copy has landed before a later phase moves the originals.

        A file that failed in one phase is left alone by every later phase,
        so it never leaves the card with fewer than two archived copies.

        camera_files must already be sorted by timestamp.
        """
        held: Set[Path] = set()
        reports = []
        for phase in phases:
            report = self.run_phase(camera_files, phase, held)
            held.update(f.source for f in report.failures)
            reports.append(report)
        return reports

    def run_phase(self,
                  camera_files: List[CameraFile],
                  phase: Phase,
                  held: Optional[Set[Path]] = None) -> PhaseReport:
        logging.info(phase.title)
        held = held or set()
        state = SessionState()
        report = PhaseReport(title=phase.title, base_path=phase.base_path)
        self.namer.forget_planned()

        for camera_file in tqdm(camera_files, desc=phase.title, disable=not self.show_progress):
            source = camera_file.path
            directory = None
            destination = None
            try:
                # Held files still advance the session so both archives group alike.
                directory = self.directories.assign_directory(phase.base_path, camera_file, state)
                if source in held:
                    raise FileOperationError(f"{source} kept on card, earlier phase failed")

                destination = self.namer.resolve_destination_name(source, directory / camera_file.filename)
                if not phase.operation.apply(source, destination):
                    report.skipped += 1
            except OSError as e:
                self._record_failure(report, source, destination, f"{source} -> {directory}: {e}")
            except FileOperationError as e:
                self._record_failure(report, source, destination, str(e))

            # The directory claims the file whether or not the transfer went through.
            if directory is not None and source not in held:
                report.claim(directory)

        logging.info(f"{phase.title}: {report.total_files} files into {len(report.directory_counts)} directories")
        if report.failures:
            logging.error(f"{phase.title}: {len(report.failures)} transfers failed")

        return report

    def _record_failure(self, report: PhaseReport, source: Path, destination: Optional[Path], error: str):
        logging.error(error)
        report.failures.append(TransferFailure(source, destination, error))


def run(camera_files: List[CameraFile],
        phase_specs: Iterable[PhaseSpec],
        minimum_day_break: int = config.MINIMUM_DAY_BREAK,
        mock_log: Optional[Path] = None,
        show_progress: bool = True) -> List[PhaseReport]:
    """
    Sorts the stream once and runs the configured phases over it.

    A run containing a mock phase never creates directories either, and
    remembers the names it hands out so numbering matches a real run.
    """
    specs = list(phase_specs)
    dry_run = any(s.operation_kind == "mock" for s in specs)
    ordered = sorted(camera_files, key=lambda f: f.timestamp)

    pipeline = TransferPipeline(
        directories=SessionDirectoryResolver(minimum_day_break, dry_run=dry_run),
        namer=CollisionSafeNamer(track_planned=dry_run),
        show_progress=show_progress,
    )
    return pipeline.run(ordered, build_phases(specs, mock_log))
