import os
import logging
from pathlib import Path
from typing import Iterator, List

from .. import config


class SidecarScanner:
    def __init__(self, suffix: str = config.SIDECAR_SUFFIX):
        self.suffix = suffix

    def scan(self, root: Path) -> List[Path]:
        """
        Collects every supplemental-metadata sidecar under root.
        Symlinks (to files or directories) are never followed.
        """
        sidecars = list(self._walk_sidecars(Path(root)))
        logging.debug(f"Found {len(sidecars)} sidecars under {root}")
        return sidecars

    def _walk_sidecars(self, root: Path) -> Iterator[Path]:
        """
        Depth-first os.scandir walk. Within a directory its sidecars come
        first, then its subdirectories, each in case-insensitive name order.
        """
        pending = [root]
        while pending:
            directory = pending.pop()

            try:
                with os.scandir(directory) as it:
                    entries = sorted(it, key=lambda e: e.name.lower())
            except OSError as e:
                logging.warning(f"Cannot read directory {directory}: {e}")
                continue

            subdirs = []
            for entry in entries:
                if entry.is_dir(follow_symlinks=False):
                    subdirs.append(Path(entry.path))
                elif entry.name.endswith(self.suffix) and entry.is_file(follow_symlinks=False):
                    yield Path(entry.path)

            # Reversed so the first subdirectory is popped next
            pending.extend(reversed(subdirs))
