"""Identifier allocation for a single request graph."""

from typing import List


class IdAllocator:
    """
    Monotonic id source shared by the object path and action lists of one graph.

    Every call to ``next()`` returns a value strictly greater than the previous
    one. Ids are never handed out twice by the same allocator.
    """

    def __init__(self, start: int = 1):
        if isinstance(start, bool) or not isinstance(start, int):
            raise TypeError(f"Allocator start must be an int, got {type(start).__name__}")
        self._next_id = start
        self._issued: List[int] = []

    def next(self) -> int:
        value = self._next_id
        self._next_id += 1
        self._issued.append(value)
        return value

    def peek(self) -> int:
        """Return the id the next call to ``next()`` will hand out."""
        return self._next_id

    @property
    def issued(self) -> List[int]:
        return list(self._issued)

    def __len__(self) -> int:
        return len(self._issued)

    def __repr__(self) -> str:
        return f"IdAllocator(next={self._next_id}, issued={len(self._issued)})"
