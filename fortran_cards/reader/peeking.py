"""
PeekingIterator
===============

Wraps any iterator with a single-slot lookahead buffer.

The tokenizer needs to inspect the *next* card's continuation marker before
deciding whether to close the current statement, without consuming the card
when it turns out to start the next statement.  Only one element of
lookahead is ever needed, so there is no general pushback stack.
"""
from __future__ import annotations

from typing import Generic, Iterable, Iterator, TypeVar

T = TypeVar("T")

_EMPTY = object()


class PeekingIterator(Generic[T]):
    """Iterator with :meth:`peek` and :meth:`has_next`."""

    def __init__(self, iterable: Iterable[T]) -> None:
        self._it: Iterator[T] = iter(iterable)
        self._slot: object = _EMPTY

    def __iter__(self) -> PeekingIterator[T]:
        return self

    def __next__(self) -> T:
        if self._slot is not _EMPTY:
            item, self._slot = self._slot, _EMPTY
            return item  # type: ignore[return-value]
        return next(self._it)

    def peek(self) -> T:
        """
        Return the next element without consuming it.

        Raises
        ------
        StopIteration
            When the underlying iterator is exhausted.
        """
        if self._slot is _EMPTY:
            self._slot = next(self._it)
        return self._slot  # type: ignore[return-value]

    def has_next(self) -> bool:
        if self._slot is not _EMPTY:
            return True
        try:
            self.peek()
        except StopIteration:
            return False
        return True
