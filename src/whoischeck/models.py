"""Data models for whoischeck."""

from dataclasses import dataclass, field
from typing import Any, Optional
from enum import Enum

from whoischeck.tokens import Token, TokenKind


class Severity(str, Enum):
    """Severity level of a remark."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Remark:
    """Diagnostic attached to a single line."""

    severity: Severity
    line: int
    message: str

    def __str__(self) -> str:
        """Legacy rendering, e.g. "line 3: trailing space not allowed"."""
        return f"line {self.line}: {self.message}"


@dataclass
class Examples:
    """Type definition examples."""

    match: list[str] = field(default_factory=list)
    nomatch: list[str] = field(default_factory=list)


@dataclass
class TypeDefinition:
    """Compiled regex-backed base type."""

    name: str
    label: str
    pattern: str
    compiled: Any  # re.Pattern
    description: str = ""
    flags: list[str] = field(default_factory=list)
    examples: Optional[Examples] = None

    @property
    def message(self) -> str:
        """Error message for values that are not of this type."""
        return f"must be a valid {self.label}"


@dataclass
class TokenRecord:
    """One classified line together with its remarks."""

    line_no: int
    token: Token
    remarks: list[Remark] = field(default_factory=list)

    @property
    def kind(self) -> TokenKind:
        return self.token.kind


@dataclass
class LexResult:
    """Result from tokenizing a whole response."""

    tokens: list[TokenRecord] = field(default_factory=list)

    @property
    def remarks(self) -> list[Remark]:
        """All remarks in line order."""
        return [remark for record in self.tokens for remark in record.remarks]

    @property
    def has_errors(self) -> bool:
        """Return True if any ERROR remark was produced."""
        return any(remark.severity == Severity.ERROR for remark in self.remarks)


@dataclass
class ValidationResult:
    """Result from validating a value against a named type."""

    value: Optional[str]
    type_name: str
    is_valid: bool
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RedactionDB:
    """Policy-approved redaction strings, stored scrubbed and case-sensitive."""

    privacy: frozenset[str] = frozenset()
    contact: frozenset[str] = frozenset()

    def __len__(self) -> int:
        return len(self.privacy) + len(self.contact)
