"""In-memory cache for analysis reports (TTL 24 hours)."""

from __future__ import annotations

import hashlib
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from resume_analyzer.models.report import AnalysisReport

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 24 * 60 * 60


def fingerprint(document_text: str, job_title: str) -> str:
    """SHA-256 of the length-prefixed inputs.

    Length prefixes keep ("ab", "c") and ("a", "bc") apart.
    """
    digest = hashlib.sha256()
    for part in (document_text, job_title):
        encoded = part.encode("utf-8")
        digest.update(f"{len(encoded)}:".encode("ascii"))
        digest.update(encoded)
    return digest.hexdigest()


@dataclass
class CacheEntry:
    key: str
    report: AnalysisReport
    created_at: float


class ResultCache:
    """Process-local report cache with lazy TTL expiration.

    Entries are only evicted when looked up after expiry; there is no
    background sweep. Not safe for concurrent mutation of the same key from
    multiple threads; the orchestrator serializes identical requests.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def _expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.created_at >= self.ttl_seconds

    def get(self, document_text: str, job_title: str) -> AnalysisReport | None:
        """Get cached report if not expired."""
        key = fingerprint(document_text, job_title)
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("Cache miss: %s", key[:12])
            return None

        if self._expired(entry, self._clock()):
            logger.debug("Cache entry expired: %s", key[:12])
            del self._entries[key]
            return None

        logger.debug("Cache hit: %s", key[:12])
        return entry.report

    def set(self, document_text: str, job_title: str, report: AnalysisReport) -> None:
        """Cache a report, replacing any previous entry for the same inputs."""
        key = fingerprint(document_text, job_title)
        self._entries[key] = CacheEntry(key=key, report=report, created_at=self._clock())

    def remove(self, document_text: str, job_title: str) -> None:
        self._entries.pop(fingerprint(document_text, job_title), None)

    def clear(self) -> int:
        """Clear all cached entries. Returns count of removed entries."""
        count = len(self._entries)
        self._entries.clear()
        return count

    def stats(self) -> dict:
        """Return cache statistics."""
        now = self._clock()
        total = len(self._entries)
        expired = sum(1 for e in self._entries.values() if self._expired(e, now))
        return {"total": total, "expired": expired, "active": total - expired}
