import re
from datetime import datetime, timedelta, timezone

from .. import config
from ..exceptions import InvalidTimestamp

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_INT_RE = re.compile(r"[+-]?[0-9]+")

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def decode_timestamp(text: str) -> datetime:
    """
    Converts Takeout's epoch-seconds string (e.g. "1511480066") into an
    aware UTC datetime.

    Raises:
        InvalidTimestamp: not a signed 64-bit integer, or outside the
                          range datetime can represent. Never clamps.
    """
    if not isinstance(text, str) or not _INT_RE.fullmatch(text):
        raise InvalidTimestamp(f"Invalid timestamp: {text!r}")

    seconds = int(text)
    if not INT64_MIN <= seconds <= INT64_MAX:
        raise InvalidTimestamp(f"Timestamp out of 64-bit range: {text}")

    try:
        return EPOCH + timedelta(seconds=seconds)
    except OverflowError as e:
        raise InvalidTimestamp(f"Timestamp out of datetime range: {text}") from e


def format_exif_datetime(dt: datetime) -> str:
    """Formats as EXIF datetime string (YYYY:MM:DD HH:MM:SS)."""
    # strftime('%Y') does not zero-pad years < 1000 on every platform
    return config.EXIF_DATETIME_FORMAT.format(
        year=dt.year, month=dt.month, day=dt.day,
        hour=dt.hour, minute=dt.minute, second=dt.second,
    )


def to_exif_datetime(text: str) -> str:
    return format_exif_datetime(decode_timestamp(text))
