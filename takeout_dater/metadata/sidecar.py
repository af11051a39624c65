"""
Reading Google Takeout supplemental-metadata sidecars.

Only one field is consumed:

    { "photoTakenTime": { "timestamp": "1511480066", ... }, ... }
"""
import json
from pathlib import Path

from ..exceptions import SidecarParseError


def read_photo_taken_timestamp(path: Path) -> str:
    """
    Returns the raw photoTakenTime.timestamp string from a sidecar.

    Raises:
        SidecarParseError: unreadable file, invalid JSON, or the field is
                           missing / not a string.
    """
    try:
        with path.open('r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise SidecarParseError(f"Cannot read sidecar {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SidecarParseError(f"Invalid JSON in {path}: {e}") from e

    taken = data.get('photoTakenTime') if isinstance(data, dict) else None
    if not isinstance(taken, dict) or 'timestamp' not in taken:
        raise SidecarParseError(f"Missing photoTakenTime.timestamp in {path}")

    timestamp = taken['timestamp']
    if not isinstance(timestamp, str):
        raise SidecarParseError(
            f"photoTakenTime.timestamp must be a string in {path}, got {type(timestamp).__name__}"
        )
    return timestamp
