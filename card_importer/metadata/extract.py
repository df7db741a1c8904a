import logging
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Optional

import exifread
from pymediainfo import MediaInfo

from .. import config
from ..exceptions import MetadataExtractionError


class MetadataExtractor:
    """
    Reads the capture date embedded in a camera file.

    Only consulted when the filesystem timestamp fails the sanity check, so
    speed matters less than getting an answer.

    Strategies:
      - Stills/RAW: 'exifread' (fast, Python-native).
      - Video: 'pymediainfo'.
      - Everything: falls back to 'exiftool -b -createdate' (robust, needs
        the tool on PATH).
    """

    def get_embedded_capture_date(self, path: Path) -> datetime:
        ftype = config.EXT_TO_TYPE.get(path.suffix.lower(), 'other')

        dt = None
        if ftype in ('still', 'raw'):
            dt = self._extract_exifread(path)
        elif ftype == 'video':
            dt = self._extract_mediainfo(path)

        if dt is None:
            dt = self._extract_exiftool(path)

        if dt is None:
            raise MetadataExtractionError(f"No embedded capture date in {path}")
        return dt

    # --- Internal Extraction Helpers ---

    def _extract_exifread(self, path: Path) -> Optional[datetime]:
        try:
            with path.open('rb') as f:
                # details=False speeds up processing significantly
                tags = exifread.process_file(f, details=False)
        except Exception as e:
            logging.debug(f"ExifRead failed for {path}: {e}")
            return None

        for tag in config.DATE_TAGS:
            if tag in tags:
                dt = self._parse_exif_date(str(tags[tag]))
                if dt:
                    return dt
        return None

    def _extract_mediainfo(self, path: Path) -> Optional[datetime]:
        try:
            mi = MediaInfo.parse(str(path))
        except Exception as e:
            # libmediainfo missing or unreadable container
            logging.debug(f"MediaInfo failed for {path}: {e}")
            return None

        for track in mi.tracks:
            if track.track_type != "General":
                continue
            for field in config.MEDIAINFO_DATE_FIELDS:
                val = getattr(track, field, None)
                if val:
                    dt = self._parse_flexible_date(str(val))
                    if dt:
                        return dt
        return None

    def _extract_exiftool(self, path: Path) -> Optional[datetime]:
        """
        Wraps the 'exiftool' command line utility.
        -b prints the bare tag value, so the output is just the date string.
        """
        cmd = config.EXIFTOOL_CMD + [str(path)]
        try:
            out = subprocess.check_output(cmd, stderr=subprocess.DEVNULL, text=True)
        except (OSError, subprocess.CalledProcessError) as e:
            logging.warning(f"exiftool failed for {path}: {e}")
            return None

        return self._parse_exif_date(out)

    def _parse_exif_date(self, dt_str: str) -> Optional[datetime]:
        """Parses "YYYY:MM:DD HH:MM:SS", ignoring sub-seconds and zone suffixes."""
        clean = dt_str.strip()[:19]
        try:
            return datetime.strptime(clean, config.EXIFTOOL_DATE_FORMAT)
        except ValueError:
            return None

    def _parse_flexible_date(self, dt_str: str) -> Optional[datetime]:
        """
        Handles MediaInfo quirks ("UTC 2020-01-01 12:00:00", ISO strings).
        Returns a naive datetime object.
        """
        clean = dt_str.replace("UTC", "").strip()

        try:
            return datetime.fromisoformat(clean).replace(tzinfo=None)
        except ValueError:
            pass

        return self._parse_exif_date(clean.replace("-", ":", 2))
