"""Persistence helpers: SQLite connection, schema and score caches."""

from .score_cache import (
    ScoreCache,
    NullScoreCache,
    MemoryScoreCache,
    SqliteScoreCache,
    fingerprint,
)

__all__ = [
    "ScoreCache",
    "NullScoreCache",
    "MemoryScoreCache",
    "SqliteScoreCache",
    "fingerprint",
]
