from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class MediaClass(Enum):
    """The two metadata-handling strategies. Closed set."""
    IMAGE = "image"
    VIDEO = "video"


class Outcome(Enum):
    UPDATED = "updated"
    SKIPPED = "skipped"     # media already dated
    FAILED = "failed"


@dataclass
class ProcessingResult:
    """
    What happened to one sidecar file.
    """
    sidecar_path: Path
    outcome: Outcome
    media_path: Optional[Path] = None

    # Populated for UPDATED
    exif_datetime: Optional[str] = None

    # Populated for FAILED
    reason: Optional[str] = None


@dataclass
class RunSummary:
    """
    Counters for a whole run. Only the aggregating thread calls record().
    """
    found: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0

    def record(self, result: ProcessingResult) -> None:
        if result.outcome is Outcome.UPDATED:
            self.updated += 1
        elif result.outcome is Outcome.SKIPPED:
            self.skipped += 1
        else:
            self.errors += 1
