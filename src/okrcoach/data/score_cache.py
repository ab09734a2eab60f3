"""Pluggable caches for objective and key-result scores.

Scoring is pure, so a cache only ever saves work: a miss, an expired entry
or a broken backend all fall through to recomputation.
"""

import hashlib
import json
import logging
import sqlite3
import threading
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple, Union, TYPE_CHECKING

from okrcoach.data.db import connect
from okrcoach.data.cache_schema import create_cache
from okrcoach.data import cache_repo
from okrcoach.domain.exceptions import CacheError
from okrcoach.domain.models import ObjectiveScope, UserContext

if TYPE_CHECKING:
    from okrcoach.scoring.models import ObjectiveScore, KeyResultScore

logger = logging.getLogger(__name__)

OBJECTIVE = "objective"
KEY_RESULT = "key_result"

Score = Union["ObjectiveScore", "KeyResultScore"]


def _decode(kind: str, payload: Dict[str, Any]) -> Score:
    # the scorer imports this module, so resolve the models lazily
    from okrcoach.scoring.models import ObjectiveScore, KeyResultScore
    decoder = ObjectiveScore.from_dict if kind == OBJECTIVE else KeyResultScore.from_dict
    return decoder(payload)


def fingerprint(
    kind: str,
    text: str,
    context: Optional[UserContext] = None,
    scope: Optional[ObjectiveScope] = None,
) -> str:
    """Stable key over everything that can change a score."""
    material = {
        "kind": kind,
        "text": text,
        "context": (context or UserContext()).as_dict(),
        "scope": scope.value if scope is not None else None,
    }
    blob = json.dumps(material, sort_keys=True, ensure_ascii=False).encode("utf-8")
    return hashlib.sha256(blob).hexdigest()


class ScoreCache(ABC):
    """Interface shared by the cache backends."""

    @abstractmethod
    def get(self, kind: str, key: str) -> Optional[Score]:
        ...

    @abstractmethod
    def set(self, kind: str, key: str, score: Score) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...

    def close(self) -> None:
        pass


class NullScoreCache(ScoreCache):
    """Caching disabled."""

    def get(self, kind: str, key: str) -> Optional[Score]:
        return None

    def set(self, kind: str, key: str, score: Score) -> None:
        pass

    def clear(self) -> None:
        pass


class MemoryScoreCache(ScoreCache):
    """Thread-safe in-process cache with a TTL and LRU eviction."""

    def __init__(
        self,
        ttl_seconds: Optional[float] = 600,
        max_entries: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: "OrderedDict[Tuple[str, str], Tuple[Optional[float], Score]]" = OrderedDict()

    def get(self, kind: str, key: str) -> Optional[Score]:
        with self._lock:
            item = self._entries.get((kind, key))
            if item is None:
                return None
            expires_at, score = item
            if expires_at is not None and expires_at <= self._clock():
                del self._entries[(kind, key)]
                return None
            self._entries.move_to_end((kind, key))
            return score

    def set(self, kind: str, key: str, score: Score) -> None:
        expires_at = self._clock() + self.ttl_seconds if self.ttl_seconds else None
        with self._lock:
            self._entries[(kind, key)] = (expires_at, score)
            self._entries.move_to_end((kind, key))
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class SqliteScoreCache(ScoreCache):
    """Score cache persisted in a SQLite file, shared across runs."""

    def __init__(
        self,
        path: Union[str, Path],
        ttl_seconds: Optional[float] = 600,
        clock: Callable[[], float] = time.time,
    ):
        self.path = Path(path)
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        try:
            self._conn = create_cache(connect(str(self.path)))
        except sqlite3.Error as e:
            raise CacheError(
                f"Could not open score cache at {self.path}: {e}",
                operation="open",
            ) from e

    def get(self, kind: str, key: str) -> Optional[Score]:
        try:
            with self._lock:
                payload = cache_repo.get_payload(self._conn, kind, key, self._clock())
        except sqlite3.Error as e:
            raise CacheError(f"Cache lookup failed: {e}", operation="get", cache_key=key) from e
        if payload is None:
            return None
        return _decode(kind, payload)

    def set(self, kind: str, key: str, score: Score) -> None:
        try:
            with self._lock:
                cache_repo.upsert_payload(
                    self._conn, kind, key, score.as_dict(), self._clock(), self.ttl_seconds
                )
        except sqlite3.Error as e:
            raise CacheError(f"Cache write failed: {e}", operation="set", cache_key=key) from e

    def purge_expired(self) -> int:
        with self._lock:
            removed = cache_repo.purge_expired(self._conn, self._clock())
        if removed:
            logger.debug("Purged %d expired score cache entries", removed)
        return removed

    def clear(self) -> None:
        with self._lock:
            cache_repo.clear_all(self._conn)

    def __len__(self) -> int:
        with self._lock:
            return cache_repo.count_entries(self._conn)

    def close(self) -> None:
        with self._lock:
            self._conn.close()
