"""In-memory file record store.

Holds every uploaded file (metadata and base64 payload) in a dict keyed by id.
Nothing is persisted: the store starts empty and its contents are lost when
the process exits. There is no quota, so memory grows with every upload.

One instance is created per app in main.py's lifespan and handed to routes
through app.dependencies.get_file_store.
"""
import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Optional

from app.models.file_record import FileRecord, NewFile

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FileStore:
    """Keyed collection of FileRecords with monotonic id assignment."""

    def __init__(self, clock: Callable[[], datetime] = _utcnow):
        self._files: dict[int, FileRecord] = {}
        self._next_id = 1
        self._clock = clock
        self._lock = threading.Lock()

    def create(self, new_file: NewFile) -> FileRecord:
        """Assign the next id and upload time, insert, and return the stored record."""
        with self._lock:
            record = FileRecord.from_new(new_file, id=self._next_id, upload_time=self._clock())
            self._next_id += 1
            self._files[record.id] = record
        logger.info("Stored file %d as %s (%d bytes)", record.id, record.file_name, record.file_size)
        return record

    def list(self) -> list[FileRecord]:
        """All live records, newest upload first. Equal timestamps fall back to id DESC."""
        with self._lock:
            records = list(self._files.values())
        return sorted(records, key=lambda r: (r.upload_time, r.id), reverse=True)

    def get_by_id(self, file_id: int) -> Optional[FileRecord]:
        with self._lock:
            return self._files.get(file_id)

    def get_by_stored_name(self, file_name: str) -> Optional[FileRecord]:
        """First live record (in list order) whose stored name matches."""
        for record in self.list():
            if record.file_name == file_name:
                return record
        return None

    def has_stored_name(self, file_name: str) -> bool:
        with self._lock:
            return any(r.file_name == file_name for r in self._files.values())

    def delete_by_id(self, file_id: int) -> bool:
        """Remove a record. Returns False when nothing was removed; ids are never reused."""
        with self._lock:
            removed = self._files.pop(file_id, None)
        if removed is None:
            return False
        logger.info("Deleted file %d (%s)", removed.id, removed.file_name)
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._files)
