"""Test string literals, escapes, and unterminated strings."""

from lenfront.tokens import TokenType

from .conftest import assert_types


class TestStrings:
    def test_two_strings(self, lex):
        tokens = lex(' "foo" "bar" ')
        assert_types(tokens, [TokenType.STRING, TokenType.STRING])
        assert tokens[0].value == "foo"
        assert tokens[0].raw == '"foo"'

    def test_empty_string(self, lex):
        tokens = lex('""')
        assert_types(tokens, [TokenType.STRING])
        assert tokens[0].value == ""

    def test_string_with_symbols(self, lex):
        tokens = lex('"a + (b)"')
        assert_types(tokens, [TokenType.STRING])
        assert tokens[0].value == "a + (b)"

    def test_comment_marker_inside_string(self, lex):
        tokens = lex('"http://x"')
        assert_types(tokens, [TokenType.STRING])


class TestEscapes:
    def test_simple_escapes(self, lex):
        tokens = lex(r'"\\ \" \n \t \r \0"')
        assert tokens[0].value == '\\ " \n \t \r \0'

    def test_hex_escape(self, lex):
        assert lex(r'"\x41"')[0].value == "A"

    def test_unicode_escape(self, lex):
        assert lex(r'"\U0001F600"')[0].value == "\U0001f600"

    def test_invalid_escape_kept(self, lex, lex_diags):
        tokens = lex(r'"a\qb"')
        assert_types(tokens, [TokenType.STRING])
        assert tokens[0].value == "a\\qb"
        diags = lex_diags(r'"a\qb"')
        assert len(diags) == 1
        assert "\\q" in diags[0].message
        assert diags[0].span.start.column == 3

    def test_incomplete_hex_escape(self, lex, lex_diags):
        tokens = lex(r'"\x4"')
        assert tokens[0].value == "\\x4"
        assert "expected 2 hex digits, got 1" in lex_diags(r'"\x4"')[0].message

    def test_out_of_range_codepoint(self, lex, lex_diags):
        tokens = lex(r'"\UFFFFFFFF"')
        assert tokens[0].value == "\ufffd"
        assert "out of range" in lex_diags(r'"\UFFFFFFFF"')[0].message

    def test_surrogate_codepoint(self, lex):
        assert lex(r'"\U0000D800"')[0].value == "\ufffd"


class TestUnterminated:
    def test_single_error_at_opening_quote(self, lex, lex_diags):
        tokens = lex('"abc')
        assert_types(tokens, [TokenType.ERROR])
        assert tokens[0].raw == '"abc'
        diags = lex_diags('"abc')
        assert len(diags) == 1
        assert diags[0].message == "unterminated string literal"
        assert diags[0].span.start.offset == 0
        assert diags[0].span.start.column == 1

    def test_stops_at_end_of_line(self, lex, lex_diags):
        tokens = lex('x = "abc\ny')
        assert_types(
            tokens,
            [TokenType.IDENTIFIER, TokenType.BIND, TokenType.ERROR, TokenType.IDENTIFIER],
        )
        assert tokens[2].raw == '"abc'
        assert len(lex_diags('x = "abc\ny')) == 1

    def test_bad_escape_inside_unterminated_not_reported(self, lex_diags):
        diags = lex_diags(r'"a\q')
        assert [d.message for d in diags] == ["unterminated string literal"]

    def test_trailing_backslash(self, lex):
        tokens = lex('"abc\\')
        assert_types(tokens, [TokenType.ERROR])
        assert tokens[0].raw == '"abc\\'

    def test_lone_quote(self, lex):
        assert_types(lex('"'), [TokenType.ERROR])
