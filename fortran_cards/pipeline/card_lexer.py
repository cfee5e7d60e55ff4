"""
CardLexer
=========

High-level entry point: raw source in, logical statements out.

Pipeline stages:

1. :class:`~fortran_cards.reader.card_reader.CardReader`
   – split the source into fixed-column cards (one-card lookahead).
2. :class:`~fortran_cards.lexer.tokenizer.Tokenizer`
   – tokenize each card's body and join continuation cards.
3. :class:`~fortran_cards.lexer.statement_builder.StatementBuilder`
   – freeze each logical statement.

Every stage is a generator, so the parser pulls statements one at a time and
nothing is read ahead of the statement being built except the next card.
Calling a ``statements_from_*`` method again restarts from the beginning of
whatever source it is given.
"""
from __future__ import annotations

import logging
from typing import IO, Iterable, Iterator, Optional

from ..lexer.tokenizer import Tokenizer
from ..models import Card, Statement
from ..reader.card_reader import CardReader

logger = logging.getLogger(__name__)


class CardLexer:
    """
    Facade over the card reader and the tokenizer.

    Parameters
    ----------
    encoding:
        Default encoding used by :meth:`statements_from_bytes`.
    skip_comments:
        Drop comment and blank cards before statement assembly.
        See :class:`~fortran_cards.lexer.tokenizer.Tokenizer`.
    """

    def __init__(self, encoding: str = "utf-8", skip_comments: bool = False) -> None:
        self.reader = CardReader(encoding=encoding)
        self.tokenizer = Tokenizer(skip_comments=skip_comments)

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def statements_from_text(
        self,
        source: str,
        source_name: str = "<inline>",
    ) -> Iterator[Statement]:
        """Lex FORTRAN source supplied as a **string**."""
        return self._run(self.reader.read_text(source), source_name)

    def statements_from_bytes(
        self,
        stream: IO[bytes],
        encoding: Optional[str] = None,
        source_name: str = "<bytes>",
    ) -> Iterator[Statement]:
        """Lex FORTRAN source from a binary stream, decoded with *encoding*."""
        return self._run(self.reader.read_bytes(stream, encoding), source_name)

    def statements_from_stream(
        self,
        stream: IO[str],
        source_name: str = "<stream>",
    ) -> Iterator[Statement]:
        """Lex FORTRAN source from an already-decoded text stream."""
        return self._run(self.reader.read_stream(stream), source_name)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _run(self, cards: Iterable[Card], source_name: str) -> Iterator[Statement]:
        count = 0
        invalid = 0
        for statement in self.tokenizer.statements(cards):
            count += 1
            if not statement.is_valid:
                invalid += 1
            yield statement
        logger.info(
            "Lexed %d statement%s from %s (%d with errors)",
            count,
            "" if count == 1 else "s",
            source_name,
            invalid,
        )
