"""
Core data models for the card lexer.

A FORTRAN source deck is a sequence of fixed-column 80-character records:

  - Columns  1–5  : Statement label
  - Column   6    : Continuation marker (blank or ``0`` = new statement)
  - Columns  7–72 : Statement body
  - Columns 73–80 : Identification / sequence field (ignored)

All models are frozen dataclasses so a finished :class:`Statement` cannot be
modified by the parser that consumes it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Tuple

if TYPE_CHECKING:
    from .errors import LexError


# ---------------------------------------------------------------------------
# Column layout (0-based slice bounds)
# ---------------------------------------------------------------------------

LABEL_FIELD = slice(0, 5)
CONTINUATION_COLUMN = 5
BODY_FIELD = slice(6, 72)
TRAILER_FIELD = slice(72, 80)

CARD_WIDTH = 80
BODY_WIDTH = BODY_FIELD.stop - BODY_FIELD.start     # 66
BODY_FIRST_COLUMN = BODY_FIELD.start + 1            # card column 7
END_COLUMN = BODY_FIELD.stop + 1                    # column 73, one past the body

# Column-6 characters that start a new statement
NEW_STATEMENT_MARKERS = {" ", "0"}

# Column-1 characters that make a card a comment card
COMMENT_MARKERS = {"C", "c", "*", "!"}


# ---------------------------------------------------------------------------
# Token kinds
# ---------------------------------------------------------------------------

TOKEN_KINDS = {
    "IDENTIFIER",  # Names, including words the parser treats as keywords
    "NUMBER",      # Integer / real / double-precision literals
    "STRING",      # Quoted character literals
    "OPERATOR",    # Operators and punctuation, dotted operators (.EQ.)
    "END",         # End-of-statement marker
}


@dataclass(frozen=True, order=True)
class Position:
    """Physical location of a token: card line number and 1-based card column."""

    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class Card:
    """One physical input line sliced into its fixed fields."""

    line_number: int
    label: str
    continuation_marker: str
    body: str
    trailer: str
    raw: str = field(default="", compare=False)

    @property
    def is_continuation(self) -> bool:
        return self.continuation_marker not in NEW_STATEMENT_MARKERS

    @property
    def is_blank(self) -> bool:
        return self.continuation_marker == " " and not (self.label or self.body.strip())

    @property
    def is_comment(self) -> bool:
        return self.raw[:1] in COMMENT_MARKERS

    def column_of(self, index: int) -> int:
        """Return the card column of body character *index*."""
        return BODY_FIRST_COLUMN + index

    def position_of(self, index: int) -> Position:
        return Position(self.line_number, self.column_of(index))

    def __repr__(self) -> str:
        return (
            f"Card(line={self.line_number}, label={self.label!r}, "
            f"cont={self.continuation_marker!r}, body={self.body.rstrip()!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "line_number": self.line_number,
            "label": self.label,
            "continuation_marker": self.continuation_marker,
            "body": self.body,
            "trailer": self.trailer,
        }


@dataclass(frozen=True)
class Token:
    """A single lexical unit of a statement."""

    kind: str
    lexeme: str
    position: Position

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.lexeme!r}, {self.position})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "lexeme": self.lexeme,
            "line": self.position.line,
            "column": self.position.column,
        }


# ---------------------------------------------------------------------------
# Statement – the final output unit
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Statement:
    """
    One logical statement: a primary card plus its continuation cards.

    Produced by :class:`~fortran_cards.lexer.statement_builder.StatementBuilder`.
    The last token is always the ``END`` marker.  A statement that hit a lex
    error is still emitted; its ``errors`` hold what went wrong and its
    ``tokens`` hold whatever was collected before the error.
    """

    cards: Tuple[Card, ...]
    tokens: Tuple[Token, ...]
    errors: Tuple["LexError", ...] = ()

    @property
    def label(self) -> str:
        return self.cards[0].label

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def line_span(self) -> Tuple[int, int]:
        return self.cards[0].line_number, self.cards[-1].line_number

    @property
    def lexemes(self) -> Tuple[str, ...]:
        return tuple(t.lexeme for t in self.tokens if t.kind != "END")

    def __repr__(self) -> str:
        first, last = self.line_span
        return (
            f"Statement(label={self.label!r}, lines={first}-{last}, "
            f"tokens={len(self.tokens)}, valid={self.is_valid})"
        )

    def to_dict(self) -> Dict[str, Any]:
        first, last = self.line_span
        return {
            "label": self.label,
            "first_line": first,
            "last_line": last,
            "cards": [c.to_dict() for c in self.cards],
            "tokens": [t.to_dict() for t in self.tokens],
            "errors": [e.to_dict() for e in self.errors],
        }
