"""
FORTRAN Cards
=============

Front end of a compiler for fixed-column (punched card) FORTRAN source.
Splits raw source into 80-column cards and joins primary and continuation
cards into tokenized logical statements for the parser.

Quick start
-----------
>>> from fortran_cards import CardLexer
>>> lexer = CardLexer()
>>> for stmt in lexer.statements_from_text("   10 X = 1\\n     1  + 2\\n"):
...     print(stmt.label, stmt.lexemes)
10 ('X', '=', '1', '+', '2')
"""

from .errors import CardError, IllegalStateError, LexError, ReadError
from .lexer.statement_builder import StatementBuilder
from .lexer.tokenizer import Tokenizer
from .models import TOKEN_KINDS, Card, Position, Statement, Token
from .pipeline.card_lexer import CardLexer
from .reader.card_reader import CardReader
from .reader.peeking import PeekingIterator

__version__ = "0.1.0"
__all__ = [
    "Card",
    "CardError",
    "CardLexer",
    "CardReader",
    "IllegalStateError",
    "LexError",
    "PeekingIterator",
    "Position",
    "ReadError",
    "Statement",
    "StatementBuilder",
    "TOKEN_KINDS",
    "Token",
    "Tokenizer",
]
