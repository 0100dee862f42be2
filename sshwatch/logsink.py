"""Append-only, timestamp-prefixed audit log.

    [2024-05-01 13:37:00] Raw: May  1 13:37:00 host sshd[811]: ...
    [2024-05-01 13:37:00] Event: 🔍 SSH activity from 10.0.0.1 (Unknown) Subnet: 10.0.0.0/24

Opening the file is startup-fatal (OSError propagates); a failed write
afterwards is reported and skipped.
"""

import sys
import threading
from datetime import datetime
from pathlib import Path

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class LogSink:

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._file = open(self.path, "a", encoding="utf-8")
        self._lock = threading.Lock()

    def write(self, message: str) -> None:
        ts = datetime.now().strftime(TIMESTAMP_FORMAT)
        try:
            with self._lock:
                self._file.write(f"[{ts}] {message}\n")
                self._file.flush()
        except (OSError, ValueError) as e:
            # ValueError: write to a closed file
            print(f"Log write failed ({e})", file=sys.stderr)

    def close(self) -> None:
        self._file.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
