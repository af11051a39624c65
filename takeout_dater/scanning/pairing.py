from pathlib import Path
from typing import Union

from .. import config
from ..exceptions import InvalidSidecarName


def resolve_media_path(sidecar_path: Union[str, Path]) -> Path:
    """
    IMG_0001.jpg.supplemental-metadata.json -> IMG_0001.jpg

    Pure string truncation; whether the media file exists is the caller's
    problem.
    """
    sidecar_path = Path(sidecar_path)
    name = sidecar_path.name

    if not name.endswith(config.SIDECAR_SUFFIX):
        raise InvalidSidecarName(f"Path does not end with {config.SIDECAR_SUFFIX}: {sidecar_path}")

    media_name = name[:-len(config.SIDECAR_SUFFIX)]
    if not media_name:
        raise InvalidSidecarName(f"Sidecar has no media file name: {sidecar_path}")

    try:
        return sidecar_path.with_name(media_name)
    except ValueError as e:
        # e.g. "..supplemental-metadata.json" would leave "."
        raise InvalidSidecarName(f"Sidecar has no usable media file name: {sidecar_path}") from e


def sidecar_path_for(media_path: Union[str, Path]) -> Path:
    media_path = Path(media_path)
    return media_path.with_name(media_path.name + config.SIDECAR_SUFFIX)
