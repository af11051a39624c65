import json
import os
import time
from pathlib import Path
from typing import Dict, List, Tuple

import pytest
from PIL import Image

from takeout_dater import config
from takeout_dater.exceptions import ToolInvocationFailed, ToolUnavailable

# EXIF tag 0x0132 ("Image DateTime" in exifread)
EXIF_DATETIME_TAG = 0x0132


def make_jpeg(path: Path, exif_datetime: str = None) -> Path:
    """Writes a tiny JPEG, with an IFD0 DateTime when exif_datetime is given."""
    with Image.new("RGB", (8, 8), color="red") as im:
        if exif_datetime is None:
            im.save(path, "JPEG")
        else:
            exif = Image.Exif()
            exif[EXIF_DATETIME_TAG] = exif_datetime
            im.save(path, "JPEG", exif=exif.tobytes())
    return path


def write_sidecar(media_path: Path, timestamp="1511480066", raw: str = None) -> Path:
    sidecar = media_path.with_name(media_path.name + config.SIDECAR_SUFFIX)
    if raw is not None:
        sidecar.write_text(raw, encoding="utf-8")
    else:
        doc = {"title": media_path.name, "photoTakenTime": {"timestamp": timestamp, "formatted": "ignored"}}
        sidecar.write_text(json.dumps(doc), encoding="utf-8")
    return sidecar


def _key(path) -> Path:
    return Path(os.path.abspath(path))


class FakeExifTool:
    """
    In-memory stand-in for metadata.exiftool.ExifTool.

    Video tags live in `stored`. Writes to .jpg files are also stamped into
    the real file (IFD0 DateTime) so exifread sees them on the next pass.
    """

    def __init__(self, available: bool = True):
        self.available = available
        self.read_error = None
        self.write_error = None
        self.stored: Dict[Path, Dict[str, str]] = {}
        self.read_calls: List[Tuple[Path, List[str]]] = []
        self.write_calls: List[Tuple[Path, Dict[str, str]]] = []

    def probe(self) -> bool:
        return self.available

    def ensure_available(self):
        if not self.available:
            raise ToolUnavailable(config.EXIFTOOL_INSTALL_HINT)

    def read_fields(self, path, fields):
        self.read_calls.append((path, list(fields)))
        if not self.available:
            raise ToolUnavailable(config.EXIFTOOL_INSTALL_HINT)
        if self.read_error:
            raise self.read_error
        tags = self.stored.get(_key(path), {})
        return {f: tags[f] for f in fields if f in tags}

    def write_fields(self, path, values):
        self.ensure_available()
        self.write_calls.append((path, dict(values)))
        if self.write_error:
            raise self.write_error
        self.stored.setdefault(_key(path), {}).update(values)

        if Path(path).suffix.lower() in ('.jpg', '.jpeg'):
            make_jpeg(Path(path), values['DateTime'])


class SlowExifTool(FakeExifTool):
    """Pauses inside reads and writes so concurrent items overlap."""

    def __init__(self, delay: float):
        super().__init__()
        self.delay = delay

    def read_fields(self, path, fields):
        values = super().read_fields(path, fields)
        time.sleep(self.delay)
        return values

    def write_fields(self, path, values):
        time.sleep(self.delay)
        super().write_fields(path, values)


@pytest.fixture
def fake_exiftool():
    return FakeExifTool()


@pytest.fixture
def slow_exiftool():
    return SlowExifTool


@pytest.fixture
def jpeg_factory(tmp_path):
    def _make(name="IMG_0001.jpg", exif_datetime=None, directory=None):
        return make_jpeg((directory or tmp_path) / name, exif_datetime)
    return _make


@pytest.fixture
def failing_tool_error():
    return ToolInvocationFailed("exiftool failed: Error: File format error", stderr="Error: File format error")


@pytest.fixture
def sidecar_factory():
    return write_sidecar
