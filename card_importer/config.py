"""
Configuration constants for the card importer.
"""
from pathlib import Path

# --- File Type Definitions ---
# Cooked stills. HEIC is what phones shoot nowadays.
COOKED_EXTS = {'.jpg', '.jpeg', '.tif', '.tiff', '.heic'}
RAW_EXTS = {
    '.dng',  # Adobe digital negative (Leica, DJI, Pentax, etc)
    '.crw',  # Old Canon
    '.cr2',
    '.cr3',
    '.rw2',  # Panasonic
    '.orf',  # Olympus
    '.arw',  # Sony
    '.nef',  # Nikon
    '.x3f',  # Sigma
    '.raf',  # Fuji
}
VIDEO_EXTS = {'.avi', '.mov', '.wmv', '.mp4'}

EXT_TO_TYPE = {}
for ext in COOKED_EXTS: EXT_TO_TYPE[ext] = 'still'
for ext in RAW_EXTS: EXT_TO_TYPE[ext] = 'raw'
for ext in VIDEO_EXTS: EXT_TO_TYPE[ext] = 'video'

CAPTURE_EXTS = frozenset(EXT_TO_TYPE)

# --- Media Discovery ---
# A mounted volume counts as a camera card if it has this directory.
CAPTURE_DIR_NAME = "DCIM"

# --- Session Bucketing ---
# Seconds between two shots before we consider it a "new day" for directory
# purposes. Shooting past midnight keeps landing in the previous day's
# directory until there has been a 4 hour break.
MINIMUM_DAY_BREAK = 4 * 3600

# --- Archive Roots ---
DEFAULT_MAIN_ROOT = Path("/mnt/pictures/Pictures")
DEFAULT_BACKUP_ROOT = Path("/mnt/pictures-bak/Pictures")
DEFAULT_MEDIA_ROOT = Path("/media")

# Marker files proving the archive volumes are really mounted.
MAIN_SENTINEL = "raid-sanity-main"
BACKUP_SENTINEL = "raid-sanity-backup"

LOG_FILENAME = "importer.log"

# --- Metadata Parsing ---
DATE_TAGS = [
    'EXIF DateTimeOriginal',
    'EXIF DateTimeDigitized',
    'Image DateTime',
]
MEDIAINFO_DATE_FIELDS = [
    "recorded_date",
    "encoded_date",
    "tagged_date",
]
EXIFTOOL_CMD = ["exiftool", "-b", "-createdate"]
EXIFTOOL_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"

# --- Content Comparison ---
COMPARE_CHUNK_SIZE = 64 * 1024  # 64 KB chunks for reading
