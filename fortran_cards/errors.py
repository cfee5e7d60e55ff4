"""
Exceptions raised by the card reader, tokenizer and statement builder.

* :class:`ReadError` – the underlying source cannot be read or decoded.
  Fatal: it propagates out of every stage and ends the read.
* :class:`LexError` – a malformed token inside one statement.  The tokenizer
  records it on the statement being built and carries on with the next one.
* :class:`IllegalStateError` – a finished statement builder was used again.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from .models import Position


class CardError(Exception):
    """Base class for all card lexer errors."""


class ReadError(CardError):
    """The source could not be read; ``line_number`` is the line being read, if known."""

    def __init__(self, message: str, line_number: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.line_number = line_number

    def __str__(self) -> str:
        if self.line_number is None:
            return self.message
        return f"line {self.line_number}: {self.message}"


class LexError(CardError):
    """
    A lexical error at a physical source position.

    Parameters
    ----------
    position:
        Card line and column of the offending text.  For an unterminated
        literal this is where the literal starts.
    text:
        The offending character or the partial literal.
    message:
        Short description of the problem.
    """

    def __init__(self, position: Position, text: str, message: str) -> None:
        super().__init__(f"{position}: {message}: {text!r}")
        self.position = position
        self.text = text
        self.message = message

    @property
    def line(self) -> int:
        return self.position.line

    @property
    def column(self) -> int:
        return self.position.column

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LexError):
            return NotImplemented
        return (self.position, self.text, self.message) == (
            other.position, other.text, other.message,
        )

    def __hash__(self) -> int:
        return hash((self.position, self.text, self.message))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "line": self.line,
            "column": self.column,
            "text": self.text,
            "message": self.message,
        }


class IllegalStateError(CardError):
    """A statement builder was modified or built after :meth:`build`."""
