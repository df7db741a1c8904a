import argparse
import logging
import sys
from pathlib import Path

from . import config
from .core import CardImporterApp
from .exceptions import CardImporterError
from .reporting import print_summary, write_csv_report

def setup_logging(main_root: Path, verbose: bool, mock: bool = False):
    """
    Sets up logging to the console and, if the archive is there, a file in it.
    Mock runs only log to the console so the archive stays untouched.
    """
    log_level = logging.DEBUG if verbose else logging.INFO

    handlers = [logging.StreamHandler(sys.stdout)]
    if main_root.is_dir() and not mock:
        handlers.append(logging.FileHandler(main_root / config.LOG_FILENAME, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers
    )

    # Silence chatty libraries
    logging.getLogger("exifread").setLevel(logging.ERROR)

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Import camera cards into the picture archives")

    p.add_argument("--main", type=Path, default=config.DEFAULT_MAIN_ROOT, help="Main pictures directory")
    p.add_argument("--bak", type=Path, default=config.DEFAULT_BACKUP_ROOT, help="Backup pictures directory")
    p.add_argument("--media", type=Path, default=config.DEFAULT_MEDIA_ROOT, help="Media automount point")
    p.add_argument("--mock", action="store_true", help="Mock the actual transfers; nothing is written")
    p.add_argument("--mock-log", type=Path, default=None, help="Append the would-be commands to this file")
    p.add_argument("--day-break", type=int, default=config.MINIMUM_DAY_BREAK,
                   help="Seconds between shots that start a new day directory")
    p.add_argument("--no-sentinel", action="store_true", help="Don't require the RAID sanity files")
    p.add_argument("--no-unmount", action="store_true", help="Leave the cards mounted")
    p.add_argument("--report-csv", type=Path, default=None, help="Write a per-directory CSV report")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return p.parse_args(argv)

def main(argv=None):
    args = parse_args(argv)

    setup_logging(args.main, args.verbose, args.mock)
    logging.info("=== Card Import Started ===")

    app = CardImporterApp(
        main_root=args.main,
        backup_root=args.bak,
        media_root=args.media,
        require_sentinels=not args.no_sentinel,
    )

    try:
        reports = app.import_cards(
            mock=args.mock,
            mock_log=args.mock_log,
            minimum_day_break=args.day_break,
            unmount=not args.no_unmount,
        )
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        sys.exit(1)
    except CardImporterError as e:
        logging.error(str(e))
        sys.exit(1)
    except Exception:
        logging.exception("Fatal error during import.")
        sys.exit(1)

    print_summary(reports)
    if args.report_csv:
        write_csv_report(reports, args.report_csv)

    if any(r.failures for r in reports) or app.unmount_failures:
        logging.error("Import finished with errors.")
        sys.exit(2)
    logging.info("Import complete.")

if __name__ == "__main__":
    main()
