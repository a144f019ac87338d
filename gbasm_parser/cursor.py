"""
Cursor
======

Forward-only cursor with one item of lookahead over any iterable.

Both the :class:`~gbasm_parser.lexer.lexer.Lexer` (over characters) and the
:class:`~gbasm_parser.parser.directive_parser.Parser` (over tokens) walk their
input through this class, so neither keeps its own position bookkeeping.

>>> c = Cursor("ab")
>>> c.current, c.peek()
('a', 'b')
>>> c.advance()
>>> c.current, c.peek()
('b', None)
>>> c.advance()
>>> c.exhausted
True
"""
from __future__ import annotations

from typing import Generic, Iterable, Iterator, Optional, TypeVar

T = TypeVar("T")

_MISSING = object()


class Cursor(Generic[T]):
    """
    Single-pass cursor.

    ``current`` is the item under examination (``None`` once the input is
    used up) and :meth:`peek` returns the item after it without consuming it.
    Items are pulled from the underlying iterator on demand, so a cursor over
    a generator never materialises more than two items at a time.
    """

    def __init__(self, items: Iterable[T]) -> None:
        self._items: Iterator[T] = iter(items)
        self._lookahead: object = _MISSING
        self.current: Optional[T] = self._pull()

    @property
    def exhausted(self) -> bool:
        return self.current is None

    def advance(self) -> None:
        """Move to the next item (no-op once exhausted)."""
        if self._lookahead is not _MISSING:
            self.current = self._lookahead  # type: ignore[assignment]
            self._lookahead = _MISSING
        else:
            self.current = self._pull()

    def peek(self) -> Optional[T]:
        """Return the item after ``current`` without consuming anything."""
        if self._lookahead is _MISSING:
            self._lookahead = self._pull()
        return self._lookahead  # type: ignore[return-value]

    def _pull(self) -> Optional[T]:
        return next(self._items, None)
