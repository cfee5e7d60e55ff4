"""
Tokenizer
=========

Turns cards into tokens and assembles tokens into logical statements.

Token classes (scanned left to right, blanks skipped, longest match wins):

+------------+-------------------------------------------------------------+
| Kind       | Form                                                        |
+============+=============================================================+
| IDENTIFIER | Letter followed by letters, digits, ``_`` or ``$``          |
+------------+-------------------------------------------------------------+
| NUMBER     | ``12``, ``1.5``, ``1.``, ``.5``, ``1E10``, ``2.5D-3``       |
+------------+-------------------------------------------------------------+
| STRING     | ``'TEXT'`` or ``"TEXT"``; a doubled quote is a literal one  |
+------------+-------------------------------------------------------------+
| OPERATOR   | ``**`` ``//`` ``.EQ.``-style dotted names and the single    |
|            | characters ``= + - * / ( ) , : $ .``                        |
+------------+-------------------------------------------------------------+

Every dotted name is an OPERATOR, the logical constants ``.TRUE.`` and
``.FALSE.`` included; telling constants from operators is left to the parser.

A character literal still open at the end of a card's body continues on the
next card when that card is a continuation card: the literal keeps every
column up to column 72 and resumes at column 7 of the continuation card.
The resulting token is positioned where the literal opened.

Statement assembly
------------------
:meth:`Tokenizer.statements` peeks at the next card after each card:

* continuation marker set → consume it into the current statement;
* blank / ``0`` marker, or end of input → build the current statement.

A :class:`~fortran_cards.errors.LexError` is recorded on the statement being
built; the rest of that statement's continuation cards are consumed without
being tokenized, and scanning resumes with the next statement.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from ..errors import LexError
from ..models import Card, Position, Statement, Token
from ..reader.peeking import PeekingIterator
from .statement_builder import StatementBuilder

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"[A-Za-z][A-Za-z0-9_$]*")
_NUMBER_RE = re.compile(r"(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[EeDd][+-]?[0-9]+)?")
_DOTTED_RE = re.compile(r"\.[A-Za-z]+\.")

_DOUBLE_OPERATORS = ("**", "//")
_SINGLE_OPERATORS = set("=+-*/(),:$.")
_QUOTES = ("'", '"')
_BLANKS = (" ", "\t")


@dataclass
class _OpenLiteral:
    """A character literal that ran off the end of a card's body."""

    position: Position
    quote: str
    text: str


class _CardScanner:
    """
    Yields the tokens of one card's body.

    When the body ends inside a character literal, iteration stops and
    :attr:`open_literal` holds the partial literal so the next card can
    resume it.
    """

    def __init__(self, card: Card, open_literal: Optional[_OpenLiteral] = None) -> None:
        self.card = card
        self.open_literal = open_literal

    def __iter__(self) -> Iterator[Token]:
        body = self.card.body
        i = 0

        if self.open_literal is not None:
            literal, self.open_literal = self.open_literal, None
            token, i = self._string(i, literal.quote, literal.text, literal.position)
            if token is not None:
                yield token

        while i < len(body):
            ch = body[i]

            if ch in _BLANKS:
                i += 1
                continue

            position = self.card.position_of(i)

            if ch in _QUOTES:
                token, i = self._string(i + 1, ch, ch, position)
                if token is not None:
                    yield token
                continue

            match = _IDENTIFIER_RE.match(body, i)
            if match:
                yield Token("IDENTIFIER", match.group(), position)
                i = match.end()
                continue

            if ch == ".":
                dotted = _DOTTED_RE.match(body, i)
                if dotted:
                    yield Token("OPERATOR", dotted.group(), position)
                    i = dotted.end()
                    continue

            match = _NUMBER_RE.match(body, i)
            if match:
                end = self._number_end(body, i, match.end())
                yield Token("NUMBER", body[i:end], position)
                i = end
                continue

            if body[i:i + 2] in _DOUBLE_OPERATORS:
                yield Token("OPERATOR", body[i:i + 2], position)
                i += 2
                continue

            if ch in _SINGLE_OPERATORS:
                yield Token("OPERATOR", ch, position)
                i += 1
                continue

            raise LexError(position, ch, "unrecognized character")

    def _string(self, start: int, quote: str, prefix: str, position: Position):
        """
        Scan a literal body from index *start* up to its closing *quote*.

        Returns ``(token, next_index)``; *token* is ``None`` when the body
        ends first, in which case :attr:`open_literal` is set.
        """
        body = self.card.body
        i = start
        while i < len(body):
            if body[i] == quote:
                if body[i + 1:i + 2] == quote:
                    i += 2
                    continue
                return Token("STRING", prefix + body[start:i + 1], position), i + 1
            i += 1
        self.open_literal = _OpenLiteral(position, quote, prefix + body[start:])
        return None, len(body)

    @staticmethod
    def _number_end(body: str, i: int, end: int) -> int:
        # "1.EQ.2": the dot belongs to the operator, not the number
        if body[end - 1] == "." and end - 1 > i and _DOTTED_RE.match(body, end - 1):
            end -= 1
        return end


class Tokenizer:
    """
    Lexical analyser for fixed-column FORTRAN cards.

    Parameters
    ----------
    skip_comments:
        Drop comment cards (``C``, ``*`` or ``!`` in column 1) and blank
        cards before assembling statements.  They then neither produce
        statements nor break a continuation chain.  Off by default, which
        leaves comment handling to the parser.
    """

    def __init__(self, skip_comments: bool = False) -> None:
        self.skip_comments = skip_comments

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def tokenize(self, card: Card) -> Iterator[Token]:
        """
        Lazily yield the tokens of a single *card*.

        No ``END`` token is produced; that belongs to the statement.

        Raises
        ------
        LexError
            On an unrecognized character, or when the card ends inside a
            character literal (a lone card has nothing to continue onto).
        """
        scanner = _CardScanner(card)
        yield from scanner
        if scanner.open_literal is not None:
            raise _unterminated(scanner.open_literal)

    def statements(self, cards: Iterable[Card]) -> Iterator[Statement]:
        """
        Lazily assemble *cards* into statements.

        *cards* is normally the lookahead sequence returned by
        :class:`~fortran_cards.reader.card_reader.CardReader`; any other
        iterable is wrapped in a :class:`PeekingIterator` first.

        Lex errors are recorded on the statements they occur in; a
        :class:`~fortran_cards.errors.ReadError` from the card source
        propagates unchanged.
        """
        if not isinstance(cards, PeekingIterator):
            cards = PeekingIterator(cards)
        if self.skip_comments:
            cards = PeekingIterator(
                card for card in cards if not (card.is_comment or card.is_blank)
            )
        while cards.has_next():
            yield self._statement(cards)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _statement(self, cards: PeekingIterator[Card]) -> Statement:
        card = next(cards)
        if card.is_continuation:
            logger.warning(
                "Line %d: continuation card with no statement to continue; "
                "starting a new statement",
                card.line_number,
            )
        builder = StatementBuilder().add_card(card)
        literal: Optional[_OpenLiteral] = None

        try:
            while True:
                scanner = _CardScanner(card, literal)
                for token in scanner:
                    builder.add_token(token)
                literal = scanner.open_literal
                if not _continues(cards):
                    break
                card = next(cards)
                builder.add_card(card)
            if literal is not None:
                raise _unterminated(literal)
        except LexError as exc:
            logger.warning("Line %d, column %d: %s", exc.line, exc.column, exc.message)
            builder.add_error(exc)
            while _continues(cards):
                builder.add_card(next(cards))

        statement = builder.build()
        logger.debug("Built %r", statement)
        return statement


def _continues(cards: PeekingIterator[Card]) -> bool:
    """True when the next card exists and continues the current statement."""
    return cards.has_next() and cards.peek().is_continuation


def _unterminated(literal: _OpenLiteral) -> LexError:
    return LexError(literal.position, literal.text.rstrip(), "unterminated character literal")
