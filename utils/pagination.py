from itertools import islice
from typing import Iterable, Iterator, List, TypeVar

T = TypeVar("T")


def chunk_iter(items: Iterable[T], chunk_size: int) -> Iterator[List[T]]:
    """
    Lazily yield successive chunk_size-sized lists from items.
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    iterator = iter(items)
    while True:
        chunk = list(islice(iterator, chunk_size))
        if not chunk:
            return
        yield chunk
