import json
import logging
import subprocess
import threading
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from .. import config
from ..exceptions import ToolInvocationFailed, ToolUnavailable


class ExifTool:
    """
    Thin wrapper around the 'exiftool' command line utility.
    Must be installed and on the system PATH (or passed explicitly).

    Interface used by the rest of the app (and mirrored by test doubles):
      - probe() -> bool
      - ensure_available()
      - read_fields(path, fields) -> {field: raw value}
      - write_fields(path, {field: value})
    """

    def __init__(self,
                 executable: str = config.EXIFTOOL_EXECUTABLE,
                 timeout: float = config.EXIFTOOL_TIMEOUT):
        self.executable = executable
        self.timeout = timeout
        self.version: Optional[str] = None

        self._probed = False
        self._probe_lock = threading.Lock()

    def probe(self) -> bool:
        """
        Runs `exiftool -ver` once per instance and caches the answer.
        """
        with self._probe_lock:
            if self._probed:
                return self.version is not None
            self._probed = True

            try:
                result = subprocess.run(
                    [self.executable, '-ver'],
                    capture_output=True,
                    text=True,
                    timeout=config.EXIFTOOL_PROBE_TIMEOUT,
                )
            except (OSError, subprocess.TimeoutExpired) as e:
                logging.debug(f"exiftool probe failed: {e}")
                return False

            if result.returncode != 0:
                logging.debug(f"exiftool -ver exited with {result.returncode}: {result.stderr.strip()}")
                return False

            self.version = result.stdout.strip()
            logging.debug(f"Found exiftool {self.version} ({self.executable})")
            return True

    def ensure_available(self) -> None:
        if not self.probe():
            raise ToolUnavailable(config.EXIFTOOL_INSTALL_HINT)

    def read_fields(self, path: Path, fields: Sequence[str]) -> Dict[str, str]:
        """
        Reads the named tags in raw form.
        Tags the file does not carry are simply absent from the result.
        """
        # -j = JSON output
        # -n = No formatting (raw values, e.g. "0000:00:00 00:00:00" stays as-is)
        cmd = [self.executable, '-j', '-n']
        cmd.extend(f'-{field}' for field in fields)
        cmd.append(str(path))

        result = self._run(cmd, path)

        try:
            data_list = json.loads(result.stdout) if result.stdout.strip() else []
        except json.JSONDecodeError as e:
            raise ToolInvocationFailed(f"exiftool returned invalid JSON for {path}: {e}") from e

        if not data_list:
            return {}

        tags = data_list[0]
        return {field: str(tags[field]) for field in fields if field in tags}

    def write_fields(self, path: Path, values: Mapping[str, str]) -> None:
        """
        Writes the given tags in place. The original file is overwritten and
        no `_original` backup is kept.
        """
        self.ensure_available()

        cmd = [self.executable, '-overwrite_original']
        cmd.extend(f'-{field}={value}' for field, value in values.items())
        cmd.append(str(path))

        self._run(cmd, path)

    def _run(self, cmd: List[str], path: Path) -> subprocess.CompletedProcess:
        logging.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding='utf-8',
                errors='replace',
                timeout=self.timeout,
                stdin=subprocess.DEVNULL,
            )
        except FileNotFoundError as e:
            raise ToolUnavailable(config.EXIFTOOL_INSTALL_HINT) from e
        except subprocess.TimeoutExpired as e:
            raise ToolInvocationFailed(f"exiftool timed out after {self.timeout}s on {path}") from e
        except OSError as e:
            raise ToolInvocationFailed(f"exiftool could not be started: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.strip()
            raise ToolInvocationFailed(f"exiftool failed: {stderr}", stderr=stderr)

        return result
