"""Functionality to create the score cache database"""
import sqlite3

def create_cache(con) -> sqlite3.Connection:
    """Open or create the score cache database with the required schema."""
    con.executescript("""
    CREATE TABLE IF NOT EXISTS score_cache (
        kind        TEXT NOT NULL,               -- 'objective' | 'key_result'
        cache_key   TEXT NOT NULL,               -- sha256 fingerprint of text + context
        payload     TEXT NOT NULL,               -- score as JSON
        created_at  REAL NOT NULL,
        expires_at  REAL,                        -- NULL never expires
        PRIMARY KEY (kind, cache_key)
    );

    CREATE INDEX IF NOT EXISTS idx_score_cache_expires ON score_cache(expires_at);
    """)

    return con
