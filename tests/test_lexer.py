"""Tests for the line tokenizer."""

import re

import pytest

from whoischeck import Lexer, Severity, TokenKind
from whoischeck.tokens import (
    EOF,
    AwipLine,
    EmptyLine,
    Field,
    LastUpdateLine,
    MultipleNameServersLine,
    NonEmptyLine,
    RoidLine,
)


def messages(remarks):
    """Render remarks the legacy way."""
    return [str(remark) for remark in remarks]


def tokenize(text, check_eol=True):
    """Collect (line_no, token, remarks) for every line including EOF."""
    lexer = Lexer(text, check_eol=check_eol)
    records = []
    while True:
        token, remarks = lexer.peek()
        records.append((lexer.line_no(), token, remarks))
        if token.kind is TokenKind.EOF:
            return records
        lexer.advance()


class TestEmptyInput:
    """Tests for inputs without lines."""

    def test_empty_text_is_eof(self):
        """Test that empty text yields a single EOF on line 1."""
        lexer = Lexer("")

        token, remarks = lexer.peek()
        assert token == EOF()
        assert remarks == []
        assert lexer.line_no() == 1

    def test_missing_text(self):
        """Test that a missing text is a programming error."""
        with pytest.raises(ValueError, match="text: missing argument"):
            Lexer(None)

    def test_bom_only(self):
        """Test that a lone BOM is reported on the EOF token."""
        token, remarks = Lexer("\ufeff").peek()

        assert token.kind is TokenKind.EOF
        assert messages(remarks) == ["line 1: found BOM"]


class TestLineEndings:
    """Tests for EOL handling."""

    def test_crlf_field(self):
        """Test a plain field line with CRLF."""
        token, remarks = Lexer("A: B\r\n").peek()

        assert token == Field(key="A", translations=(), value="B")
        assert remarks == []

    def test_lf_reported(self):
        """Test that a bare LF is reported when checking EOL."""
        token, remarks = Lexer("line1\n").peek()

        assert token == NonEmptyLine(text="line1")
        assert messages(remarks) == ["line 1: expected CRLF, got 'LF'"]
        assert remarks[0].severity is Severity.ERROR

    def test_lf_not_reported_without_check(self):
        """Test that a bare LF is accepted when not checking EOL."""
        token, remarks = Lexer("line1\n", check_eol=False).peek()

        assert token == NonEmptyLine(text="line1")
        assert remarks == []

    def test_cr_reported(self):
        """Test that a bare CR is a line break and is reported."""
        records = tokenize("a\rb\r\n")

        assert [r[1] for r in records] == [NonEmptyLine("a"), NonEmptyLine("b"), EOF()]
        assert messages(records[0][2]) == ["line 1: expected CRLF, got 'CR'"]
        assert records[1][2] == []

    def test_final_line_without_terminator(self):
        """Test that a final line lacking an EOL is still tokenized."""
        records = tokenize("A: B\r\nC: D")

        assert records[1][1] == Field("C", (), "D")
        assert messages(records[1][2]) == ["line 2: expected CRLF, got ''"]
        assert records[2][1] == EOF()

    def test_check_eol_toggle(self):
        """Test getting and setting check_eol."""
        lexer = Lexer("x\n")

        assert lexer.check_eol() is True
        assert lexer.check_eol(False) is True
        assert lexer.check_eol() is False
        assert lexer.check_eol(None) is False

        _, remarks = lexer.peek()
        assert remarks == []


class TestWhitespace:
    """Tests for whitespace scrubbing."""

    def test_nine_leading_spaces_allowed(self):
        """Test that nine leading spaces are fine."""
        token, remarks = Lexer(" " * 9 + "X\r\n").peek()

        assert token == NonEmptyLine("X")
        assert remarks == []

    def test_ten_leading_spaces(self):
        """Test that ten leading spaces are reported but still stripped."""
        token, remarks = Lexer(" " * 10 + "X\r\n").peek()

        assert token == NonEmptyLine("X")
        assert messages(remarks) == ["line 1: too much leading space"]

    def test_tab_is_reported(self):
        """Test that a tab is homogenized and reported."""
        token, remarks = Lexer("A:\tB\r\n").peek()

        assert token == Field("A", (), "B")
        assert messages(remarks) == ["line 1: whitespace other than SPACE (U+0020)"]

    def test_tab_counts_as_leading_space(self):
        """Test that each whitespace character counts towards indentation."""
        _, remarks = Lexer("\t" * 10 + "X\r\n").peek()

        assert messages(remarks) == [
            "line 1: whitespace other than SPACE (U+0020)",
            "line 1: too much leading space",
        ]

    def test_control_separators_are_not_whitespace(self):
        """Test that U+001C..U+001F are kept as text."""
        token, remarks = Lexer("a\x1fb\r\n").peek()

        assert token == NonEmptyLine("a\x1fb")
        assert remarks == []

    def test_unicode_space_is_reported(self):
        """Test that a no-break space is homogenized and reported."""
        token, remarks = Lexer("A:\xa0B\r\n").peek()

        assert token == Field("A", (), "B")
        assert messages(remarks) == ["line 1: whitespace other than SPACE (U+0020)"]

    def test_trailing_space(self):
        """Test that trailing space after a value is reported."""
        token, remarks = Lexer("A: B \r\n").peek()

        assert token == Field("A", (), "B")
        assert messages(remarks) == ["line 1: trailing space not allowed"]

    def test_empty_field_single_space(self):
        """Test that one space after the colon of an empty field is allowed."""
        token, remarks = Lexer("A: \r\n").peek()

        assert token == Field("A", (), None)
        assert remarks == []

    def test_empty_field_two_spaces(self):
        """Test that two spaces after the colon of an empty field are reported."""
        token, remarks = Lexer("A:  \r\n").peek()

        assert token == Field("A", (), None)
        assert messages(remarks) == ["line 1: trailing space not allowed"]

    def test_trailing_space_on_non_field(self):
        """Test that trailing space on other lines is reported."""
        token, remarks = Lexer("hello \r\n").peek()

        assert token == NonEmptyLine("hello")
        assert messages(remarks) == ["line 1: trailing space not allowed"]

    def test_blank_line_with_spaces(self):
        """Test that a whitespace-only line is an empty line with trailing space."""
        token, remarks = Lexer("   \r\n").peek()

        assert token == EmptyLine()
        assert remarks == []

    def test_remarks_in_discovery_order(self):
        """Test that remarks keep the order in which they were found."""
        _, remarks = Lexer("\ufeff" + " " * 10 + "A:\tB \n").peek()

        assert [r.message for r in remarks] == [
            "found BOM",
            "expected CRLF, got 'LF'",
            "whitespace other than SPACE (U+0020)",
            "too much leading space",
            "trailing space not allowed",
        ]


class TestClassification:
    """Tests for the line classification rules."""

    def test_empty_line(self):
        """Test an empty line."""
        token, _ = Lexer("\r\n").peek()
        assert token == EmptyLine()

    def test_multiple_name_servers(self):
        """Test the multiple name servers line."""
        token, remarks = Lexer("Query matched more than one name server:\r\n").peek()

        assert token == MultipleNameServersLine()
        assert remarks == []

    @pytest.mark.parametrize("database", ["WHOIS", "Whois"])
    def test_last_update_line(self, database):
        """Test the last update line."""
        line = f">>> Last update of {database} database: 2014-01-01T00:00:00Z <<<\r\n"
        token, remarks = Lexer(line).peek()

        assert token == LastUpdateLine(timestamp="2014-01-01T00:00:00Z")
        assert remarks == []

    @pytest.mark.parametrize(
        "url",
        [
            "https://icann.org/epp",
            "https://www.icann.org/resources/pages/epp-status-codes-2014-06-16-en",
        ],
    )
    def test_awip_line(self, url):
        """Test the AWIP line with an accepted URL."""
        line = f"For more information on Whois status codes, please visit {url}\r\n"
        token, remarks = Lexer(line).peek()

        assert token == AwipLine()
        assert remarks == []

    def test_awip_line_illegal_url(self):
        """Test that an unexpected AWIP URL is reported without changing the kind."""
        line = "For more information on Whois status codes, please visit http://example.com\r\n"
        token, remarks = Lexer(line).peek()

        assert token.kind is TokenKind.AWIP_LINE
        assert messages(remarks) == ["line 1: illegal url"]

    def test_field_with_translations(self):
        """Test a field with translated keys."""
        token, _ = Lexer("Domain Name (Nom/Nombre): EXAMPLE.TLD\r\n").peek()

        assert token == Field("Domain Name", ("Nom", "Nombre"), "EXAMPLE.TLD")

    def test_field_translations_trailing_separator(self):
        """Test that trailing empty translations are dropped."""
        token, _ = Lexer("Key (a/b/): v\r\n").peek()

        assert token == Field("Key", ("a", "b"), "v")

    def test_field_value_with_colons(self):
        """Test that the value extends to the end of the line."""
        token, _ = Lexer("Updated Date: 2014-01-01T00:00:00Z\r\n").peek()

        assert token == Field("Updated Date", (), "2014-01-01T00:00:00Z")

    def test_field_value_keeps_extra_space(self):
        """Test that only one space after the colon is consumed."""
        token, _ = Lexer("A:  B\r\n").peek()

        assert token == Field("A", (), " B")

    def test_colon_without_space_is_not_a_field(self):
        """Test that a colon directly followed by text is not a field."""
        token, _ = Lexer("A:B\r\n").peek()

        assert token == NonEmptyLine("A:B")

    def test_double_angle_is_not_a_field(self):
        """Test that keys may not start with >>."""
        token, _ = Lexer(">> Note: something\r\n").peek()

        assert token == NonEmptyLine(">> Note: something")

    def test_roid_line(self):
        """Test a roid line."""
        token, _ = Lexer("D1234567-LRMS (ns1.example.tld)\r\n").peek()

        assert token == RoidLine(roid="D1234567-LRMS", hostname="ns1.example.tld")

    def test_roid_line_is_greedy(self):
        """Test that the rightmost closing parenthesis ends the hostname."""
        token, _ = Lexer("a (b) (c)\r\n").peek()

        assert token == RoidLine(roid="a (b)", hostname="c")

    def test_non_empty_line(self):
        """Test the fallback rule."""
        token, _ = Lexer("Some free text.\r\n").peek()

        assert token == NonEmptyLine("Some free text.")

    def test_notice_with_colon_is_a_field(self):
        """Test that a field-shaped notice is classified as a field."""
        token, _ = Lexer("TERMS OF USE: You are not authorized\r\n").peek()

        assert token == Field("TERMS OF USE", (), "You are not authorized")

    def test_legacy_values(self):
        """Test the legacy (kind, value, messages) view."""
        lexer = Lexer("Key (T): v\n")

        assert lexer.peek_legacy() == (
            "field",
            ("Key", ["T"], "v"),
            ["line 1: expected CRLF, got 'LF'"],
        )


class TestLookahead:
    """Tests for peek/advance semantics."""

    def test_peek_is_stable(self):
        """Test that peeking twice returns the same token."""
        lexer = Lexer("A: B\r\nC: D\r\n")

        assert lexer.peek() == lexer.peek()
        assert lexer.line_no() == 1

    def test_line_numbers(self):
        """Test that line numbers increase by one per line."""
        records = tokenize("a\r\n\r\nb\r\n")

        assert [r[0] for r in records] == [1, 2, 3, 3]
        assert [r[1].kind for r in records] == [
            TokenKind.NON_EMPTY_LINE,
            TokenKind.EMPTY_LINE,
            TokenKind.NON_EMPTY_LINE,
            TokenKind.EOF,
        ]

    def test_advance_before_peek(self):
        """Test that advancing first computes the first line."""
        lexer = Lexer("a\r\nb\r\n")
        lexer.advance()

        assert lexer.peek()[0] == NonEmptyLine("a")
        lexer.advance()
        assert lexer.peek()[0] == NonEmptyLine("b")
        assert lexer.line_no() == 2

    def test_advance_past_eof_is_idempotent(self):
        """Test that EOF is a terminal state."""
        lexer = Lexer("\ufeffa\r\n")
        lexer.advance()
        lexer.advance()
        eof = lexer.peek()

        lexer.advance()
        lexer.advance()

        assert lexer.peek() == eof
        assert eof[0] == EOF()
        assert lexer.line_no() == 1

    def test_bom_reported_on_first_line(self):
        """Test that the BOM remark belongs to the first line."""
        records = tokenize("\ufeffA: B\r\nC: D\r\n")

        assert messages(records[0][2]) == ["line 1: found BOM"]
        assert records[0][1] == Field("A", (), "B")
        assert records[1][2] == []

    def test_peek_returns_copy_of_remarks(self):
        """Test that callers cannot alter the cached remarks."""
        lexer = Lexer("x\n")
        lexer.peek()[1].clear()

        assert len(lexer.peek()[1]) == 1


class TestMatches:
    """Tests for matching the unclassified line."""

    def test_matches_scrubbed_line(self):
        """Test matching against the scrubbed line."""
        lexer = Lexer("   # comment\t\r\n")

        assert lexer.matches(r"^# comment$")
        assert lexer.matches(re.compile("comment"))
        assert not lexer.matches("^ ")

    def test_matches_at_eof(self):
        """Test that nothing matches at EOF."""
        assert Lexer("").matches(".*") is False

    def test_matches_requires_pattern(self):
        """Test that a pattern is required."""
        with pytest.raises(ValueError, match="pattern"):
            Lexer("x").matches("")
