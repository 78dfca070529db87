"""Line-oriented tokenizer for WHOIS responses.

The lexer breaks its input into one token per line. Token values are
scrubbed, and anything mildly illegal encountered along the way is reported
as a `Remark` on the line's token rather than aborting tokenization.

    lexer = Lexer("Domain Name: EXAMPLE.TLD\\r\\n")
    token, remarks = lexer.peek()
    while token.kind is not TokenKind.EOF:
        ...
        lexer.advance()
        token, remarks = lexer.peek()
"""

import logging
import re
from typing import Optional, Pattern, Union

from whoischeck.models import Remark, Severity
from whoischeck.tokens import (
    EOF,
    AwipLine,
    EmptyLine,
    Field,
    LastUpdateLine,
    MultipleNameServersLine,
    NonEmptyLine,
    RoidLine,
    Token,
    TokenKind,
    legacy_value,
)

logger = logging.getLogger(__name__)

BOM = "\ufeff"

MAX_LEADING_SPACE = 9

ACCEPTED_AWIP_URLS = frozenset(
    {
        "https://icann.org/epp",
        "https://www.icann.org/resources/pages/epp-status-codes-2014-06-16-en",
    }
)

MULTIPLE_NAME_SERVERS_TEXT = "Query matched more than one name server:"

# Line splitting
LINE_RE = re.compile(r"([^\r\n]*)(\r\n?|\n)")
# Perl \s, which excludes U+001C..U+001F
WHITESPACE_RE = re.compile(r"[\t\n\x0b\f\r \x85\xa0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000]")
LEADING_SPACE_RE = re.compile(r"^( *)")
TRAILING_SPACE_RE = re.compile(r"( *)$")

# Classification
LAST_UPDATE_RE = re.compile(r">>> Last update of (?:WHOIS|Whois) database: (.*) <<<")
AWIP_RE = re.compile(r"For more information on Whois status codes, please visit (.*)")
FIELD_RE = re.compile(r"(?!>>)([^:()]+)(?: \(([^()]+)\))?:(?: (.*))?")
ROID_LINE_RE = re.compile(r"(.*) \((.*)\)")


class Lexer:
    """Tokenizer with a single cached lookahead line."""

    def __init__(self, text: str, check_eol: bool = True) -> None:
        """
        Initialize lexer over a fully materialized response.

        Args:
            text: Complete response text
            check_eol: Whether to report line endings other than CRLF

        Raises:
            ValueError: If text is missing
        """
        if text is None:
            raise ValueError("text: missing argument")

        self._text = text
        self._check_eol = bool(check_eol)
        self._line_no: Optional[int] = None
        self._lookahead: Optional[tuple[Token, list[Remark]]] = None
        self._lookahead_line: Optional[str] = None

    def check_eol(self, value: Optional[bool] = None) -> bool:
        """
        Get or set whether unexpected EOL representations are reported.

        The expected EOL is CRLF. A bare LF or CR is still recognized as a line
        break, but reported when this setting is on.

        Args:
            value: New setting, or None to leave it unchanged

        Returns:
            The previous setting
        """
        old_value = self._check_eol
        if value is not None:
            self._check_eol = bool(value)
        return old_value

    def line_no(self) -> int:
        """Get the current line number."""
        if self._lookahead is None:
            self.advance()
        assert self._line_no is not None
        return self._line_no

    def peek(self) -> tuple[Token, list[Remark]]:
        """Get the token at the current line together with its remarks."""
        if self._lookahead is None:
            self.advance()
        assert self._lookahead is not None
        token, remarks = self._lookahead
        return token, list(remarks)

    def peek_legacy(self) -> tuple[str, object, list[str]]:
        """
        Get the current line as a (kind name, value, messages) triplet.

        Deprecated view of `peek` where remarks are rendered as
        "line <n>: <message>" strings.
        """
        token, remarks = self.peek()
        return token.kind.value, legacy_value(token), [str(remark) for remark in remarks]

    def matches(self, pattern: Union[str, Pattern[str]]) -> bool:
        """
        Test whether the current scrubbed but unclassified line matches.

        Args:
            pattern: Regular expression, searched anywhere in the line

        Returns:
            False at EOF, otherwise whether the pattern matches

        Raises:
            ValueError: If pattern is missing
        """
        if not pattern:
            raise ValueError("Missing argument: pattern")

        if self._lookahead is None:
            self.advance()
        if self._lookahead_line is None:
            return False
        return re.search(pattern, self._lookahead_line) is not None

    def advance(self) -> None:
        """Consume the current line and compute the next lookahead."""
        remarks: list[Remark] = []

        if self._line_no is None and self._text.startswith(BOM):
            self._text = self._text[len(BOM):]
            remarks.append(Remark(Severity.ERROR, 1, "found BOM"))

        if self._text == "":
            if self._lookahead is not None and self._lookahead[0].kind is TokenKind.EOF:
                logger.debug(f"Advance past EOF at line {self._line_no} ignored")
                return
            if self._line_no is None:
                self._line_no = 1
            self._lookahead_line = None
            self._lookahead = (EOF(), remarks)
            return

        self._line_no = (self._line_no or 0) + 1
        line_no = self._line_no

        match = LINE_RE.match(self._text)
        if match:
            line, eol = match.group(1), match.group(2)
            self._text = self._text[match.end():]
        else:
            line, eol = self._text, ""
            self._text = ""

        if eol != "\r\n" and self._check_eol:
            eol_name = eol.replace("\r", "CR").replace("\n", "LF")
            remarks.append(Remark(Severity.ERROR, line_no, f"expected CRLF, got '{eol_name}'"))

        # Homogenize whitespace
        homogenized = WHITESPACE_RE.sub(" ", line)
        if homogenized.count(" ") > line.count(" "):
            remarks.append(
                Remark(Severity.ERROR, line_no, "whitespace other than SPACE (U+0020)")
            )
        line = homogenized

        lead_space = LEADING_SPACE_RE.match(line).group(1)
        line = line[len(lead_space):]
        if len(lead_space) > MAX_LEADING_SPACE:
            remarks.append(Remark(Severity.ERROR, line_no, "too much leading space"))

        trail_space = TRAILING_SPACE_RE.search(line).group(1)
        if trail_space:
            line = line[: -len(trail_space)]

        token, trail_space = self._classify(line, trail_space, line_no, remarks)

        if trail_space:
            remarks.append(Remark(Severity.ERROR, line_no, "trailing space not allowed"))

        self._lookahead_line = line
        self._lookahead = (token, remarks)

    def _classify(
        self, line: str, trail_space: str, line_no: int, remarks: list[Remark]
    ) -> tuple[Token, str]:
        """
        Classify a scrubbed line; the first matching rule wins.

        Returns the token and the trailing space still to be reported.
        """
        if line == "":
            return EmptyLine(), trail_space

        if line == MULTIPLE_NAME_SERVERS_TEXT:
            return MultipleNameServersLine(), trail_space

        match = LAST_UPDATE_RE.fullmatch(line)
        if match:
            return LastUpdateLine(timestamp=match.group(1)), trail_space

        match = AWIP_RE.fullmatch(line)
        if match:
            if match.group(1) not in ACCEPTED_AWIP_URLS:
                remarks.append(Remark(Severity.ERROR, line_no, "illegal url"))
            return AwipLine(), trail_space

        match = FIELD_RE.fullmatch(line)
        if match:
            key, translations, value = match.groups()
            if value is None:
                # One space separates the colon from an empty value
                if trail_space.endswith(" "):
                    trail_space = trail_space[:-1]
            return Field(key, _split_translations(translations), value), trail_space

        # Greedy: the rightmost closing parenthesis ends the hostname
        match = ROID_LINE_RE.fullmatch(line)
        if match:
            return RoidLine(roid=match.group(1), hostname=match.group(2)), trail_space

        return NonEmptyLine(text=line), trail_space


def _split_translations(translations: Optional[str]) -> tuple[str, ...]:
    """Split a `/`-separated translation list, dropping trailing empty entries."""
    if not translations:
        return ()
    parts = translations.split("/")
    while parts and parts[-1] == "":
        parts.pop()
    return tuple(parts)
