"""
Process-local cache of file metadata keyed by file id.

Entries are added at most once per id and never expire: remote content is
immutable once it has an id. Cache misses go through a single-flight fetch so
that racing callers for the same id share one remote call.
"""

import threading
from concurrent.futures import Future
from typing import Callable, Dict, Optional

from common.logging_config import get_logger
from common.types import FileRecord

logger = get_logger(__name__)


class MetadataCache:
    """
    Thread-safe add-if-absent mapping of ``id -> FileRecord``.

    A single mutex guards the entry map and the in-flight map; the fetch
    itself runs outside the mutex so callers for different ids never wait on
    each other's remote call.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: Dict[int, FileRecord] = {}
        self._in_flight: Dict[int, Future] = {}

    def get(self, file_id: int) -> Optional[FileRecord]:
        """Return the cached record for ``file_id`` or None."""
        with self._lock:
            return self._entries.get(file_id)

    def __contains__(self, file_id: int) -> bool:
        with self._lock:
            return file_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get_or_fetch(self, file_id: int, fetch_fn: Callable[[int], FileRecord]) -> FileRecord:
        """
        Return the cached record, fetching it once on a miss.

        Concurrent callers for the same missing id wait for the first caller's
        fetch and receive the same record. If the fetch raises, every waiter
        sees the exception and nothing is cached.

        Args:
            file_id: File id to resolve
            fetch_fn: Loader invoked with ``file_id`` on a miss

        Returns:
            Cached or freshly fetched record
        """
        with self._lock:
            record = self._entries.get(file_id)
            if record is not None:
                return record

            future = self._in_flight.get(file_id)
            owner = future is None
            if owner:
                future = Future()
                self._in_flight[file_id] = future

        if not owner:
            logger.debug(f"Waiting for in-flight metadata fetch [file_id={file_id}]")
            return future.result()

        try:
            fetched = fetch_fn(file_id)
        except BaseException as e:
            with self._lock:
                del self._in_flight[file_id]
            future.set_exception(e)
            raise

        with self._lock:
            record = self._entries.setdefault(file_id, fetched)
            del self._in_flight[file_id]
        future.set_result(record)

        logger.debug(f"Cached metadata [file_id={file_id}]")
        return record

    def insert_if_absent(self, file_id: int, record: FileRecord) -> FileRecord:
        """
        Store ``record`` under ``file_id`` unless an entry already exists.

        Args:
            file_id: Final, service-assigned file id
            record: Record to store

        Returns:
            The record held by the cache for ``file_id`` after the call
        """
        with self._lock:
            existing = self._entries.setdefault(file_id, record)

        if existing is record:
            logger.debug(f"Cached uploaded record [file_id={file_id}]")
        return existing
