import os
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, Generator, List, Optional

from tqdm import tqdm

from . import config
from .exceptions import MediaNotFound, TakeoutDaterError
from .metadata.classify import classify_media
from .metadata.exiftool import ExifTool
from .metadata.handlers import MediaHandler, build_handlers
from .metadata.sidecar import read_photo_taken_timestamp
from .metadata.timestamps import to_exif_datetime
from .models import MediaClass, Outcome, ProcessingResult, RunSummary
from .reporting import RunReporter
from .scanning.filesystem import SidecarScanner
from .scanning.pairing import resolve_media_path


class DateBackfillApp:
    def __init__(self,
                 exiftool: Optional[ExifTool] = None,
                 handlers: Optional[Dict[MediaClass, MediaHandler]] = None):
        self.exiftool = exiftool or ExifTool()
        self.handlers = handlers or build_handlers(self.exiftool)
        self.scanner = SidecarScanner()

        # Two sidecars naming the same file must not interleave their
        # check-then-write. Fixed stripes keep memory flat across runs.
        self._path_locks: List[threading.Lock] = [
            threading.Lock() for _ in range(config.PATH_LOCK_STRIPES)
        ]

    def run(self,
            root: Path,
            max_workers: Optional[int] = None,
            reporter: Optional[RunReporter] = None) -> RunSummary:
        """
        Executes the backfill over every sidecar under root.
        1. Scan (collect sidecars)
        2. Process each sidecar independently (parallel)
        3. Aggregate outcomes into a RunSummary

        Args:
            max_workers: Number of parallel workers (default: one per CPU).
                         1 or less processes sequentially.
        """
        sidecars = self.scanner.scan(root)
        summary = RunSummary(found=len(sidecars))

        if max_workers is None:
            max_workers = os.cpu_count() or 1

        logging.debug(f"Processing {len(sidecars)} sidecars with {max_workers} workers")

        pending = self._iter_results(sidecars, max_workers)
        results = tqdm(
            pending,
            total=len(sidecars),
            desc="Backfilling dates",
            unit="file",
            disable=None,  # off when not attached to a terminal
        )
        try:
            for result in results:
                summary.record(result)
                if reporter:
                    reporter.record(result)
        finally:
            # Closing the generator cancels sidecars still queued
            pending.close()
            results.close()

        logging.debug(f"Run complete: {summary}")
        return summary

    def _iter_results(self, sidecars: List[Path], max_workers: int) -> Generator[ProcessingResult, None, None]:
        if max_workers <= 1:
            for path in sidecars:
                yield self._process_guarded(path)
            return

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_path = {executor.submit(self.process_sidecar, p): p for p in sidecars}

            try:
                # Yield results as they complete
                for future in as_completed(future_to_path):
                    path = future_to_path[future]
                    try:
                        yield future.result()
                    except Exception as e:
                        yield self._unexpected_failure(path, e)
            except BaseException:
                # Interrupted: drop queued work, let in-flight writes finish
                executor.shutdown(wait=False, cancel_futures=True)
                raise

    def _process_guarded(self, path: Path) -> ProcessingResult:
        try:
            return self.process_sidecar(path)
        except Exception as e:
            return self._unexpected_failure(path, e)

    def _unexpected_failure(self, path: Path, error: Exception) -> ProcessingResult:
        logging.error(f"Unexpected error while processing {path}: {error!r}")
        return ProcessingResult(sidecar_path=path, outcome=Outcome.FAILED,
                                reason=f"Unexpected error: {error}")

    def process_sidecar(self, sidecar_path: Path) -> ProcessingResult:
        """
        Runs one sidecar through the pipeline:
          resolve media -> exists? -> already dated? -> parse JSON
          -> decode timestamp -> write.

        Domain errors become a FAILED result; nothing is retried.
        """
        media_path = None
        try:
            media_path = resolve_media_path(sidecar_path)

            if not media_path.is_file():
                raise MediaNotFound(f"Media file not found: {media_path}")

            with self._lock_for(media_path):
                return self._update_media(sidecar_path, media_path)

        except TakeoutDaterError as e:
            logging.debug(f"{sidecar_path} failed: {e}")
            return ProcessingResult(sidecar_path=sidecar_path, outcome=Outcome.FAILED,
                                    media_path=media_path, reason=str(e))

    def _update_media(self, sidecar_path: Path, media_path: Path) -> ProcessingResult:
        handler = self.handlers[classify_media(media_path)]

        # Check the media before touching the JSON: most re-runs stop here
        if handler.has_date(media_path):
            return ProcessingResult(sidecar_path=sidecar_path, outcome=Outcome.SKIPPED,
                                    media_path=media_path)

        timestamp = read_photo_taken_timestamp(sidecar_path)
        exif_datetime = to_exif_datetime(timestamp)

        handler.write_date(media_path, exif_datetime)
        logging.debug(f"Wrote {exif_datetime} to {media_path} ({handler.media_class.value})")

        return ProcessingResult(sidecar_path=sidecar_path, outcome=Outcome.UPDATED,
                                media_path=media_path, exif_datetime=exif_datetime)

    def _lock_for(self, media_path: Path) -> threading.Lock:
        key = os.path.normcase(os.path.abspath(media_path))
        return self._path_locks[hash(key) % len(self._path_locks)]
