# docchat/core/session_store.py
"""
In-memory document sessions: session id -> DocumentRecord with a sliding
idle timeout. At most one record is kept per session.
"""
import logging
import threading
import time
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class DocumentRecord(BaseModel):
    file_name: str
    chunks: List[str]
    summary: str = ""
    upload_time: datetime = Field(default_factory=datetime.now)

    def full_content(self) -> str:
        return "\n\n".join(self.chunks)


class DocumentSessionStore:
    def __init__(self, idle_timeout: timedelta = timedelta(minutes=20),
                 clock: Callable[[], float] = time.monotonic):
        self.idle_timeout = idle_timeout
        self._clock = clock
        self._records: Dict[str, Tuple[DocumentRecord, float]] = {}
        self._lock = threading.Lock()

    def _deadline(self) -> float:
        return self._clock() + self.idle_timeout.total_seconds()

    def get(self, session_id: Optional[str]) -> Optional[DocumentRecord]:
        """Return the live record for session_id and refresh its idle deadline."""
        if not session_id:
            return None
        with self._lock:
            entry = self._records.get(session_id)
            if entry is None:
                return None
            record, expires_at = entry
            if self._clock() >= expires_at:
                del self._records[session_id]
                logger.info("Document session expired (%s)", record.file_name)
                return None
            self._records[session_id] = (record, self._deadline())
            return record

    def put(self, session_id: str, record: DocumentRecord):
        self.purge_expired()
        with self._lock:
            self._records[session_id] = (record, self._deadline())

    def clear(self, session_id: Optional[str]) -> bool:
        if not session_id:
            return False
        with self._lock:
            return self._records.pop(session_id, None) is not None

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [sid for sid, (_, expires_at) in self._records.items() if now >= expires_at]
            for sid in expired:
                del self._records[sid]
        if expired:
            logger.info("Evicted %d expired document sessions", len(expired))
        return len(expired)

    def __len__(self):
        with self._lock:
            return len(self._records)
