# data/cache_repo.py
import json
import sqlite3
from typing import Optional, Dict, Any

SELECT_SQL = """
    SELECT payload
    FROM score_cache
    WHERE kind = ? AND cache_key = ?
      AND (expires_at IS NULL OR expires_at > ?)
    LIMIT 1;
"""

UPSERT_SQL = """
    INSERT INTO score_cache (kind, cache_key, payload, created_at, expires_at)
    VALUES (?, ?, ?, ?, ?)
    ON CONFLICT(kind, cache_key) DO UPDATE SET
        payload    = excluded.payload,
        created_at = excluded.created_at,
        expires_at = excluded.expires_at;
"""

PURGE_SQL = "DELETE FROM score_cache WHERE expires_at IS NOT NULL AND expires_at <= ?;"


def get_payload(conn: sqlite3.Connection, kind: str, cache_key: str, now: float) -> Optional[Dict[str, Any]]:
    """Return the cached payload for (kind, key), or None when missing or expired."""
    row = conn.execute(SELECT_SQL, (kind, cache_key, now)).fetchone()
    if row is None:
        return None
    return json.loads(row[0])


def upsert_payload(
    conn: sqlite3.Connection,
    kind: str,
    cache_key: str,
    payload: Dict[str, Any],
    now: float,
    ttl_seconds: Optional[float],
) -> None:
    expires_at = now + ttl_seconds if ttl_seconds else None
    conn.execute(UPSERT_SQL, (kind, cache_key, json.dumps(payload, sort_keys=True), now, expires_at))
    conn.commit()


def purge_expired(conn: sqlite3.Connection, now: float) -> int:
    cur = conn.execute(PURGE_SQL, (now,))
    conn.commit()
    return cur.rowcount


def clear_all(conn: sqlite3.Connection) -> None:
    conn.execute("DELETE FROM score_cache;")
    conn.commit()


def count_entries(conn: sqlite3.Connection) -> int:
    return conn.execute("SELECT COUNT(*) FROM score_cache;").fetchone()[0]
