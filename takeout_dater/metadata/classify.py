from pathlib import Path
from typing import Union

from .. import config
from ..models import MediaClass


def classify_media(path: Union[str, Path]) -> MediaClass:
    """Video if the (case-insensitive) extension is a known video type, else image."""
    ext = Path(path).suffix.lower()
    if ext in config.VIDEO_EXTS:
        return MediaClass.VIDEO
    return MediaClass.IMAGE
