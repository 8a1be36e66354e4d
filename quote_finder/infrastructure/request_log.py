# quote_finder/infrastructure/request_log.py

import csv
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


HEADER = ["timestamp", "topic", "page_title", "page_url"]


class RequestLog:
    """
    Append-only CSV record of quote requests.
    Write failures are reported and swallowed; logging never fails a request.
    """

    def __init__(self, storage_dir: str):
        self._path = Path(storage_dir) / "logs" / "requests.csv"
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def record(self, topic: str, page_title: Optional[str], page_url: Optional[str]) -> None:
        row = [
            datetime.now(timezone.utc).isoformat(),
            topic,
            page_title or "Current Page",
            page_url or "Unknown URL",
        ]
        try:
            with self._lock:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                is_new = not self._path.exists()
                with open(self._path, "a", encoding="utf-8", newline="") as f:
                    writer = csv.writer(f)
                    if is_new:
                        writer.writerow(HEADER)
                    writer.writerow(row)
        except OSError as error:
            print(f"[RequestLog] Failed to write log row: {error}")
