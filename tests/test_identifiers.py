"""Test identifier lexing, classification helpers, and boundaries."""

from lenfront.tokens import TokenType, is_ident_char, is_ident_start

from .conftest import assert_types, assert_values


class TestClassification:
    def test_letters_start(self):
        assert is_ident_start("a")
        assert is_ident_start("Z")
        assert is_ident_start("_")

    def test_digits_do_not_start(self):
        assert not is_ident_start("0")
        assert is_ident_char("0")

    def test_unicode_letters(self):
        assert is_ident_start("é")
        assert is_ident_start("λ")

    def test_non_ident(self):
        for ch in '()-+"{}:;, \t\n':
            assert not is_ident_char(ch), f"Expected '{ch}' to NOT be ident_char"


class TestIdentifierLexing:
    def test_simple_word(self, lex):
        tokens = lex("hello")
        assert_types(tokens, [TokenType.IDENTIFIER])
        assert_values(tokens, ["hello"])

    def test_underscore_and_digits(self, lex):
        tokens = lex("foo_bar2 _x")
        assert_values(tokens, ["foo_bar2", "_x"])

    def test_hyphen_splits(self, lex):
        tokens = lex("foo-bar")
        assert_types(tokens, [TokenType.IDENTIFIER, TokenType.SYMBOL, TokenType.IDENTIFIER])

    def test_ident_in_parens(self, lex):
        tokens = lex("(foo+1)")
        assert_values(tokens, ["(", "foo", "+", "1", ")"])

    def test_unicode_identifier(self, lex):
        tokens = lex("λx café")
        assert_values(tokens, ["λx", "café"])

    def test_span(self, lex):
        tokens = lex("  abc")
        assert tokens[0].span.start.column == 3
        assert tokens[0].span.end.column == 6
        assert tokens[0].span.start.offset == 2
