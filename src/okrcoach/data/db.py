# data/db.py
import sqlite3

def connect(db_path: str, use_wal: bool = False) -> sqlite3.Connection:
    """Open a connection that may be shared between threads behind a lock."""
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.execute("PRAGMA busy_timeout = 30000;")

    if use_wal:
        conn.execute("PRAGMA journal_mode = WAL;")
        conn.execute("PRAGMA synchronous = NORMAL;")
    else:
        conn.execute("PRAGMA journal_mode = DELETE;")
        conn.execute("PRAGMA synchronous = NORMAL;")
        conn.execute("PRAGMA temp_store = MEMORY;")

    return conn
