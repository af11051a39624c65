import logging
from pathlib import Path
from typing import Dict, List

import exifread

from .. import config
from ..exceptions import MetadataReadError, ToolInvocationFailed, ToolUnavailable
from ..models import MediaClass
from .exiftool import ExifTool


class MediaHandler:
    """
    Date capability for one media class:
      - has_date(path): does the file already carry a capture date?
      - write_date(path, exif_datetime): stamp "YYYY:MM:DD HH:MM:SS" into it.
    """
    media_class: MediaClass
    write_fields: List[str] = config.COMMON_WRITE_FIELDS

    def __init__(self, exiftool: ExifTool):
        self.exiftool = exiftool

    def has_date(self, path: Path) -> bool:
        raise NotImplementedError

    def write_date(self, path: Path, exif_datetime: str) -> None:
        """
        Overwrites the file in place via exiftool.

        Raises:
            ToolUnavailable: exiftool is not installed.
            ToolInvocationFailed: exiftool rejected the write (stderr attached).
        """
        values = {field: exif_datetime for field in self.write_fields}
        self.exiftool.write_fields(path, values)


class ImageHandler(MediaHandler):
    """
    Still images: dates are read in-process with 'exifread' (much faster than
    spawning exiftool) and written with exiftool.
    """
    media_class = MediaClass.IMAGE

    def has_date(self, path: Path) -> bool:
        try:
            f = path.open('rb')
        except OSError as e:
            raise MetadataReadError(f"Cannot open {path}: {e}") from e

        with f:
            try:
                # details=False skips MakerNotes and thumbnails
                tags = exifread.process_file(f, details=False)
            except Exception as e:
                # Unparseable EXIF is treated like no EXIF at all
                logging.debug(f"ExifRead failed for {path}: {e}")
                return False

        for tag in config.IMAGE_DATE_TAGS:
            if tag in tags and str(tags[tag]).strip():
                return True
        return False


class VideoHandler(MediaHandler):
    """
    Videos: exifread does not understand containers, so both directions go
    through exiftool, and the QuickTime media/track dates are written too.
    """
    media_class = MediaClass.VIDEO
    write_fields = config.COMMON_WRITE_FIELDS + config.VIDEO_WRITE_FIELDS

    def has_date(self, path: Path) -> bool:
        try:
            values = self.exiftool.read_fields(path, config.VIDEO_DATE_FIELDS)
        except (ToolUnavailable, ToolInvocationFailed) as e:
            # A failed probe counts as "no date" so the update is attempted
            logging.warning(f"Could not read video dates from {path}, assuming none: {e}")
            return False

        for value in values.values():
            value = value.strip()
            if value and value != config.ZERO_DATETIME:
                return True
        return False


def build_handlers(exiftool: ExifTool) -> Dict[MediaClass, MediaHandler]:
    return {
        MediaClass.IMAGE: ImageHandler(exiftool),
        MediaClass.VIDEO: VideoHandler(exiftool),
    }
