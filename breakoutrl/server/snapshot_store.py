"""File-backed, bounded history of training snapshots.

The whole history is the unit of persistence: every append rewrites the
JSON file. An unreadable or unparseable file is treated as an empty history
and is replaced on the next successful append.
"""

import json
import logging
import random
import string
import threading
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 200

_ID_ALPHABET = string.digits + string.ascii_lowercase
_RECORD_KEYS = {"id", "timestamp", "episode", "stats", "snapshot"}


def generate_snapshot_id() -> str:
    """Millisecond timestamp plus a six character base36 suffix."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=6))
    return f"{int(time.time() * 1000)}-{suffix}"


def utc_timestamp() -> str:
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def clamp_limit(limit: int | None) -> int:
    if limit is None:
        return DEFAULT_PAGE_LIMIT
    return max(1, min(int(limit), MAX_PAGE_LIMIT))


class SnapshotStore:
    """Append-only snapshot log keeping at most max_snapshots records.

    Eviction is purely by insertion order: the oldest records are dropped
    first regardless of how often they were read. Appends within one process
    are serialized; separate processes sharing a file are not coordinated.
    """

    def __init__(self, path: Path | str, max_snapshots: int = 500):
        if max_snapshots < 1:
            raise ValueError("max_snapshots must be at least 1")
        self.path = Path(path)
        self.max_snapshots = max_snapshots
        self._lock = threading.Lock()
        self._ensure_file()

    def _ensure_file(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self.path.write_text("[]", encoding="utf-8")

    def load(self) -> list[dict[str, Any]]:
        self._ensure_file()
        try:
            records = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error("Failed to read snapshots file %s: %s", self.path, e)
            return []
        if not isinstance(records, list):
            logger.error("Snapshots file %s does not hold a list, ignoring it", self.path)
            return []

        valid = [
            record
            for record in records
            if isinstance(record, dict) and _RECORD_KEYS <= record.keys()
        ]
        if len(valid) != len(records):
            logger.error(
                "Dropped %d malformed records from %s", len(records) - len(valid), self.path
            )
        return valid

    def _save(self, records: list[dict[str, Any]]):
        self._ensure_file()
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(records, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)

    def append(
        self, episode: int | float, stats: dict[str, Any], snapshot: dict[str, Any]
    ) -> dict[str, str]:
        """Store a new record and evict the oldest beyond max_snapshots.

        Returns:
            {"id": ..., "timestamp": ...} of the stored record
        """
        record = {
            "id": generate_snapshot_id(),
            "timestamp": utc_timestamp(),
            "episode": episode,
            "stats": stats,
            "snapshot": snapshot,
        }
        with self._lock:
            records = self.load()
            records.append(record)
            if len(records) > self.max_snapshots:
                del records[: len(records) - self.max_snapshots]
            self._save(records)

        logger.info("Stored snapshot %s for episode %s", record["id"], episode)
        return {"id": record["id"], "timestamp": record["timestamp"]}

    def latest(self) -> dict[str, Any] | None:
        records = self.load()
        return records[-1] if records else None

    def page(self, limit: int | None = DEFAULT_PAGE_LIMIT) -> list[dict[str, Any]]:
        """Most recent records, oldest first, without their snapshot payload."""
        records = self.load()[-clamp_limit(limit):]
        return [
            {
                "id": record.get("id"),
                "timestamp": record.get("timestamp"),
                "episode": record.get("episode"),
                "stats": record.get("stats"),
            }
            for record in records
        ]

    def __len__(self):
        return len(self.load())
