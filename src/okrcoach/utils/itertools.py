"""Iterator helpers for batch scoring."""

from itertools import islice
from typing import Iterable, Iterator, List, TypeVar

T = TypeVar('T')

def chunked(items: Iterable[T], size: int) -> Iterator[List[T]]:
    """Yield lists of at most ``size`` items; the last one may be shorter."""
    if size <= 0:
        raise ValueError("size must be positive")
    it = iter(items)
    while True:
        batch = list(islice(it, size))
        if not batch:
            return
        yield batch
