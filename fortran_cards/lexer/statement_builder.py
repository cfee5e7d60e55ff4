"""
StatementBuilder
================

Single-use accumulator for one logical statement.

The builder is *open* from construction until :meth:`StatementBuilder.build`
is called, after which it is *closed*: every further ``add_*`` or ``build``
call raises :class:`~fortran_cards.errors.IllegalStateError`.  A fresh builder
is created for each statement.
"""
from __future__ import annotations

import logging
from typing import List

from ..errors import IllegalStateError, LexError
from ..models import END_COLUMN, Card, Position, Statement, Token

logger = logging.getLogger(__name__)


class StatementBuilder:
    """Collects the cards, tokens and lex errors of one statement."""

    def __init__(self) -> None:
        self._cards: List[Card] = []
        self._tokens: List[Token] = []
        self._errors: List[LexError] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def card_count(self) -> int:
        return len(self._cards)

    def add_card(self, card: Card) -> StatementBuilder:
        """Add the next card of this statement (primary card first)."""
        self._check_open("add_card")
        if self._cards and card.label:
            logger.warning(
                "Line %d: label %r on a continuation card is ignored",
                card.line_number,
                card.label,
            )
        self._cards.append(card)
        return self

    def add_token(self, token: Token) -> StatementBuilder:
        self._check_open("add_token")
        self._tokens.append(token)
        return self

    def add_error(self, error: LexError) -> StatementBuilder:
        """Record a lex error; the statement is still built, marked invalid."""
        self._check_open("add_error")
        self._errors.append(error)
        return self

    def build(self) -> Statement:
        """
        Close the builder and return the finished statement.

        An ``END`` token is appended at column 73 of the last card, just past
        the body field, so it sorts after every token of the statement.

        Raises
        ------
        IllegalStateError
            If the builder is already closed or holds no card.
        """
        self._check_open("build")
        if not self._cards:
            raise IllegalStateError("cannot build a statement without cards")
        self._closed = True
        last = self._cards[-1]
        end = Token("END", "", Position(last.line_number, END_COLUMN))
        return Statement(
            cards=tuple(self._cards),
            tokens=tuple(self._tokens) + (end,),
            errors=tuple(self._errors),
        )

    def _check_open(self, operation: str) -> None:
        if self._closed:
            raise IllegalStateError(f"{operation}() called on a built statement")
