"""Sequential reader over a flat felt sequence.

Plays the role of the on-chain calldata cursor: every read consumes elements
from the front, and a read past the end is an error.
"""

from typing import Sequence


class ReaderExhausted(ValueError):
    """Raised when a read needs more elements than remain."""

    def __init__(self, needed: int, offset: int, remaining: int) -> None:
        super().__init__(
            f"need {needed} elements at offset {offset}, only {remaining} remain"
        )
        self.needed = needed
        self.offset = offset
        self.remaining = remaining


class FeltReader:
    """Cursor over a felt sequence."""

    def __init__(self, elements: Sequence[int]) -> None:
        self._elements = elements
        self.offset = 0

    @property
    def remaining(self) -> int:
        return len(self._elements) - self.offset

    def at_end(self) -> bool:
        return self.offset >= len(self._elements)

    def read(self) -> int:
        """Read one element."""
        return self.read_many(1)[0]

    def read_many(self, n: int) -> list[int]:
        """Read n elements."""
        if n > self.remaining:
            raise ReaderExhausted(n, self.offset, self.remaining)
        out = list(self._elements[self.offset:self.offset + n])
        self.offset += n
        return out

    def read_span(self) -> list[int]:
        """Read a length-prefixed run: one count element, then that many elements."""
        start = self.offset
        count = self.read()
        if count > self.remaining:
            self.offset = start
            raise ReaderExhausted(count, start + 1, self.remaining)
        return self.read_many(count)

    def read_rest(self) -> list[int]:
        return self.read_many(self.remaining)
