"""In-process storage for per-caller usage records."""

import threading
import zlib
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass, replace
from typing import Iterator, Protocol

from aws_lambda_powertools import Logger

logger = Logger(child=True)

ANONYMOUS_CALLER = "anonymous"

# Number of locks shared by all callers
LOCK_STRIPES = 64


def normalize_caller_id(caller_id: str | None) -> str:
    """Map a missing or blank caller id to the shared anonymous bucket."""
    if caller_id is None:
        return ANONYMOUS_CALLER
    caller_id = caller_id.strip()
    return caller_id or ANONYMOUS_CALLER


@dataclass
class UsageRecord:
    """Usage counters for a single caller."""

    caller_id: str
    window_start: int = 0
    window_requests: int = 0
    daily_start: int = 0
    daily_requests: int = 0
    daily_cost_units: int = 0


class UsageStore(Protocol):
    """Storage interface used by the quota tracker.

    Callers must hold ``lock(caller_id)`` around any read-modify-write
    of a record.
    """

    def lock(self, caller_id: str) -> AbstractContextManager[None]:
        """Context manager serializing access to one caller's record."""
        ...

    def get(self, caller_id: str) -> UsageRecord | None:
        """Return a copy of the caller's record, if any."""
        ...

    def put(self, record: UsageRecord) -> None:
        """Insert or replace a record."""
        ...

    def delete(self, caller_id: str) -> bool:
        """Remove a record. Returns True if one was removed."""
        ...

    def caller_ids(self) -> list[str]:
        """Snapshot of the caller ids currently stored."""
        ...

    def close(self) -> None:
        """Release store resources."""
        ...


class InMemoryUsageStore:
    """Dict-backed usage store guarded by striped locks.

    Records live for the lifetime of the process (one Lambda container).
    """

    def __init__(self, stripes: int = LOCK_STRIPES):
        """Initialize an empty store.

        Args:
            stripes: Number of record locks to spread callers across
        """
        self._records: dict[str, UsageRecord] = {}
        self._index_lock = threading.Lock()
        self._stripes = [threading.Lock() for _ in range(stripes)]

    def _stripe_for(self, caller_id: str) -> threading.Lock:
        # crc32 is stable across processes, unlike hash() on str
        index = zlib.crc32(caller_id.encode("utf-8")) % len(self._stripes)
        return self._stripes[index]

    @contextmanager
    def lock(self, caller_id: str) -> Iterator[None]:
        """Hold the lock covering ``caller_id`` for the duration of the block."""
        with self._stripe_for(caller_id):
            yield

    def get(self, caller_id: str) -> UsageRecord | None:
        record = self._records.get(caller_id)
        return replace(record) if record is not None else None

    def put(self, record: UsageRecord) -> None:
        with self._index_lock:
            self._records[record.caller_id] = replace(record)

    def delete(self, caller_id: str) -> bool:
        with self._index_lock:
            return self._records.pop(caller_id, None) is not None

    def caller_ids(self) -> list[str]:
        with self._index_lock:
            return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def close(self) -> None:
        """Nothing to flush for the in-memory store."""
        logger.debug("Usage store closed", extra={"records": len(self._records)})
