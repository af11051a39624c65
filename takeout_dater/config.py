"""
Configuration constants for the takeout date backfiller.
"""

# --- Sidecar Naming ---
# Google Takeout writes one of these next to every exported media file:
#   IMG_0001.jpg -> IMG_0001.jpg.supplemental-metadata.json
SIDECAR_SUFFIX = ".supplemental-metadata.json"

# --- File Type Definitions ---
# Anything not listed here is handled as a still image.
VIDEO_EXTS = {'.mp4', '.mov', '.avi', '.mkv', '.m4v', '.3gp', '.webm', '.flv', '.wmv'}

# --- Date Detection ---
# exifread tag names checked on still images
IMAGE_DATE_TAGS = [
    'EXIF DateTimeOriginal',
    'Image DateTime',
    'EXIF DateTimeDigitized',
]

# exiftool tag names read from videos
VIDEO_DATE_FIELDS = [
    'DateTimeOriginal',
    'CreateDate',
    'MediaCreateDate',
    'TrackCreateDate',
]

# QuickTime containers report unset dates as all zeros
ZERO_DATETIME = "0000:00:00 00:00:00"

# --- Date Writing ---
COMMON_WRITE_FIELDS = ['DateTimeOriginal', 'DateTime', 'CreateDate']
VIDEO_WRITE_FIELDS = ['MediaCreateDate', 'MediaModifyDate', 'TrackCreateDate', 'TrackModifyDate']

EXIF_DATETIME_FORMAT = "{year:04d}:{month:02d}:{day:02d} {hour:02d}:{minute:02d}:{second:02d}"

# --- External Tool ---
EXIFTOOL_EXECUTABLE = "exiftool"
EXIFTOOL_PROBE_TIMEOUT = 10   # seconds, for `exiftool -ver`
EXIFTOOL_TIMEOUT = 60         # seconds, per read/write invocation

EXIFTOOL_INSTALL_HINT = (
    "exiftool not found. Please install exiftool to update EXIF data.\n"
    "  macOS:  brew install exiftool\n"
    "  Linux:  sudo apt-get install libimage-exiftool-perl\n"
    "  Windows: https://exiftool.org/ (add it to PATH)"
)

# --- Performance ---
# None means "one worker per CPU" (resolved at run time)
DEFAULT_WORKERS = None

# Media paths hash onto this many locks; unrelated files may share one
PATH_LOCK_STRIPES = 64

# --- Reporting ---
REPORT_HEADERS = ["Sidecar Path", "Media Path", "Outcome", "Date Written", "Reason"]
