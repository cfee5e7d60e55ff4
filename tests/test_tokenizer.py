"""
Tests for single-card tokenization.

Covers token classification, maximal munch, dotted operators, character
literals and lexical errors.
"""
from __future__ import annotations

import pytest

from fortran_cards.errors import LexError
from fortran_cards.lexer.tokenizer import Tokenizer
from fortran_cards.models import Position
from fortran_cards.reader.card_reader import CardReader


@pytest.fixture
def tokenizer():
    return Tokenizer()


def _card(body, line_number=1):
    return CardReader.card_from_line("      " + body, line_number)


def _lex(tokenizer, body):
    return [(t.kind, t.lexeme) for t in tokenizer.tokenize(_card(body))]


def _lexemes(tokenizer, body):
    return [t.lexeme for t in tokenizer.tokenize(_card(body))]


# ─────────────────────────────────────────────────────────────────────────────
# Token classes
# ─────────────────────────────────────────────────────────────────────────────


class TestTokenClasses:
    def test_simple_assignment(self, tokenizer):
        assert _lex(tokenizer, "X = 1") == [
            ("IDENTIFIER", "X"),
            ("OPERATOR", "="),
            ("NUMBER", "1"),
        ]

    def test_positions_are_card_columns(self, tokenizer):
        tokens = list(tokenizer.tokenize(_card("X = 1", line_number=4)))
        assert [t.position for t in tokens] == [
            Position(4, 7),
            Position(4, 9),
            Position(4, 11),
        ]

    def test_blank_body_has_no_tokens(self, tokenizer):
        assert _lex(tokenizer, "") == []

    def test_no_end_token_for_a_single_card(self, tokenizer):
        kinds = [k for k, _ in _lex(tokenizer, "CALL FOO(1, 2)")]
        assert "END" not in kinds

    def test_identifiers_are_maximal(self, tokenizer):
        assert _lexemes(tokenizer, "ALPHA1=BETA_2+C$D") == [
            "ALPHA1", "=", "BETA_2", "+", "C$D",
        ]

    def test_keywords_are_plain_identifiers(self, tokenizer):
        kinds = {k for k, _ in _lex(tokenizer, "GOTO 10")}
        assert kinds == {"IDENTIFIER", "NUMBER"}

    @pytest.mark.parametrize(
        "text",
        ["12", "1.5", "1.", ".5", "1E10", "1.5E-3", "2.D0", "6.02d+23"],
    )
    def test_numbers(self, tokenizer, text):
        assert _lex(tokenizer, text) == [("NUMBER", text)]

    def test_number_then_identifier(self, tokenizer):
        assert _lex(tokenizer, "10I") == [("NUMBER", "10"), ("IDENTIFIER", "I")]

    def test_tabs_are_blanks(self, tokenizer):
        assert _lexemes(tokenizer, "X\t=\t1") == ["X", "=", "1"]

    def test_trailer_is_never_tokenized(self, tokenizer):
        card = CardReader.card_from_line("      X = 1".ljust(72) + "@@@@0001", 1)
        assert [t.lexeme for t in tokenizer.tokenize(card)] == ["X", "=", "1"]


# ─────────────────────────────────────────────────────────────────────────────
# Operators
# ─────────────────────────────────────────────────────────────────────────────


class TestOperators:
    def test_double_character_operators(self, tokenizer):
        assert _lexemes(tokenizer, "A**2//B") == ["A", "**", "2", "//", "B"]

    def test_punctuation(self, tokenizer):
        assert _lexemes(tokenizer, "CALL F(A, B(1:2))") == [
            "CALL", "F", "(", "A", ",", "B", "(", "1", ":", "2", ")", ")",
        ]

    def test_dotted_operator(self, tokenizer):
        assert _lex(tokenizer, "IF (I.EQ.1) GOTO 10") == [
            ("IDENTIFIER", "IF"),
            ("OPERATOR", "("),
            ("IDENTIFIER", "I"),
            ("OPERATOR", ".EQ."),
            ("NUMBER", "1"),
            ("OPERATOR", ")"),
            ("IDENTIFIER", "GOTO"),
            ("NUMBER", "10"),
        ]

    def test_number_does_not_swallow_dotted_operator(self, tokenizer):
        assert _lexemes(tokenizer, "1.EQ.2") == ["1", ".EQ.", "2"]

    def test_adjacent_dotted_operators(self, tokenizer):
        assert _lexemes(tokenizer, "X.AND..NOT.Y") == ["X", ".AND.", ".NOT.", "Y"]

    def test_logical_constants_are_dotted_names(self, tokenizer):
        assert _lex(tokenizer, "L = .TRUE..OR..FALSE.") == [
            ("IDENTIFIER", "L"),
            ("OPERATOR", "="),
            ("OPERATOR", ".TRUE."),
            ("OPERATOR", ".OR."),
            ("OPERATOR", ".FALSE."),
        ]

    def test_lone_dot_is_an_operator(self, tokenizer):
        assert _lex(tokenizer, "A.B") == [
            ("IDENTIFIER", "A"),
            ("OPERATOR", "."),
            ("IDENTIFIER", "B"),
        ]


# ─────────────────────────────────────────────────────────────────────────────
# Character literals
# ─────────────────────────────────────────────────────────────────────────────


class TestLiterals:
    def test_single_quoted(self, tokenizer):
        assert _lex(tokenizer, "PRINT *, 'HELLO, WORLD'") == [
            ("IDENTIFIER", "PRINT"),
            ("OPERATOR", "*"),
            ("OPERATOR", ","),
            ("STRING", "'HELLO, WORLD'"),
        ]

    def test_double_quoted(self, tokenizer):
        assert _lex(tokenizer, 'X = "A\'B"') == [
            ("IDENTIFIER", "X"),
            ("OPERATOR", "="),
            ("STRING", '"A\'B"'),
        ]

    def test_doubled_quote_stays_inside_literal(self, tokenizer):
        assert _lex(tokenizer, "'IT''S' X") == [
            ("STRING", "'IT''S'"),
            ("IDENTIFIER", "X"),
        ]

    def test_literal_position_is_opening_quote(self, tokenizer):
        tokens = list(tokenizer.tokenize(_card("A = 'B C'")))
        assert tokens[-1].position == Position(1, 11)

    def test_literal_keeps_inner_blanks(self, tokenizer):
        assert _lexemes(tokenizer, "'  A  '") == ["'  A  '"]


# ─────────────────────────────────────────────────────────────────────────────
# Lexical errors
# ─────────────────────────────────────────────────────────────────────────────


class TestLexErrors:
    def test_unrecognized_character(self, tokenizer):
        with pytest.raises(LexError) as exc_info:
            list(tokenizer.tokenize(_card("X = @")))
        err = exc_info.value
        assert err.position == Position(1, 11)
        assert err.text == "@"
        assert err.line == 1
        assert err.column == 11

    def test_tokens_before_error_are_yielded(self, tokenizer):
        tokens = tokenizer.tokenize(_card("X = #"))
        assert next(tokens).lexeme == "X"
        assert next(tokens).lexeme == "="
        with pytest.raises(LexError):
            next(tokens)

    def test_unterminated_literal_on_lone_card(self, tokenizer):
        with pytest.raises(LexError) as exc_info:
            list(tokenizer.tokenize(_card("MSG = 'OPEN")))
        err = exc_info.value
        assert err.position == Position(1, 13)
        assert err.text == "'OPEN"
        assert "unterminated" in err.message

    def test_non_ascii_letter_rejected(self, tokenizer):
        with pytest.raises(LexError):
            list(tokenizer.tokenize(_card("É = 1")))

    def test_error_to_dict(self, tokenizer):
        with pytest.raises(LexError) as exc_info:
            list(tokenizer.tokenize(_card("?")))
        assert exc_info.value.to_dict() == {
            "line": 1,
            "column": 7,
            "text": "?",
            "message": "unrecognized character",
        }
