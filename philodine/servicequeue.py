"""A thread-safe FIFO queue that also allows removal from the middle."""

from __future__ import annotations

import threading
from collections import deque
from typing import Any, Callable, Iterator, Optional


class ServiceQueue:
    """FIFO queue guarded by a lock, with positional peek and removal."""

    def __init__(self, on_clear: Optional[Callable[[Any], None]] = None) -> None:
        self._items: deque = deque()
        self._lock = threading.Lock()
        self._on_clear = on_clear

    def enqueue(self, value: Any) -> None:
        """Append a value at the back."""
        with self._lock:
            self._items.append(value)

    def dequeue(self) -> Any:
        """Remove and return the front value, or None when empty."""
        with self._lock:
            if not self._items:
                return None
            return self._items.popleft()

    def dequeue_nth(self, n: int) -> Any:
        """Remove and return the value at position n, or None if there is none."""
        if n == 0:
            return self.dequeue()
        with self._lock:
            if len(self._items) < n + 1:
                return None
            value = self._items[n]
            del self._items[n]
            return value

    def peek(self, n: int = 0) -> Any:
        """Return the value at position n without removing it, or None."""
        with self._lock:
            if 0 <= n < len(self._items):
                return self._items[n]
            return None

    def for_each(self, func: Callable[[Any], None]) -> None:
        """Call func on every value, front to back, while holding the lock."""
        with self._lock:
            for item in self._items:
                func(item)

    def clear(self) -> None:
        """Remove every value, passing each to the clear callback if one was given."""
        with self._lock:
            items = list(self._items)
            self._items.clear()
        if self._on_clear is not None:
            for item in items:
                self._on_clear(item)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        with self._lock:
            snapshot = list(self._items)
        return iter(snapshot)