import csv
import logging
import sys
from pathlib import Path
from typing import List

from tqdm import tqdm

from . import config
from .models import Outcome, ProcessingResult, RunSummary


class RunReporter:
    """
    Console output for a run: one line per sidecar as results arrive, then
    the summary block. Lines go through tqdm.write so they don't tear an
    active progress bar.
    """

    def __init__(self):
        self.results: List[ProcessingResult] = []

    def record(self, result: ProcessingResult):
        self.results.append(result)

        if result.outcome is Outcome.UPDATED:
            tqdm.write(f"Updated: {result.sidecar_path}", file=sys.stdout)
        elif result.outcome is Outcome.SKIPPED:
            tqdm.write(f"Skipped (already has EXIF date): {result.sidecar_path}", file=sys.stdout)
        else:
            tqdm.write(f"Error processing {result.sidecar_path}: {result.reason}", file=sys.stderr)

    def print_summary(self, summary: RunSummary):
        print("\nSummary:")
        print(f"  Metadata files found: {summary.found}")
        print(f"  Media files updated: {summary.updated}")
        print(f"  Errors: {summary.errors}")

    def write_csv(self, output_csv: Path):
        """
        One row per sidecar, so failures can be located and retried.
        """
        with open(output_csv, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(config.REPORT_HEADERS)

            for r in sorted(self.results, key=lambda r: str(r.sidecar_path)):
                writer.writerow([
                    str(r.sidecar_path),
                    str(r.media_path) if r.media_path else "",
                    r.outcome.value,
                    r.exif_datetime or "",
                    r.reason or "",
                ])

        logging.info(f"Report written to {output_csv} ({len(self.results)} rows)")
