# config/resolvers.py
from pathlib import Path
from typing import Optional, Union
from platformdirs import user_cache_dir

APP = "okrcoach"
SCHEMA_VERSION = 1  # increment when the score cache layout or scoring rules change

def default_cache_path() -> Path:
    p = Path(user_cache_dir(APP))
    p.mkdir(parents=True, exist_ok=True)
    return p / f"scores-v{SCHEMA_VERSION}.sqlite"

def resolve_cache_path(*, fresh: bool = False, cache_path: Optional[Union[str, Path]] = None) -> Path:
    """
    Decide which cache DB this run uses:
    - fresh=True: start from an empty DB at the given path (or the default one).
    - otherwise: reuse the DB at the given/default path, created if absent.
    """
    p = Path(cache_path) if cache_path else default_cache_path()
    if fresh:
        for suffix in ("", "-wal", "-shm"):
            stale = p.with_name(p.name + suffix)
            if stale.exists():
                stale.unlink()
    return p
