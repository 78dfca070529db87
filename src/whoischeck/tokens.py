"""Line token variants produced by the lexer."""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Union


class TokenKind(str, Enum):
    """Kind of a line token."""

    AWIP_LINE = "awip line"
    EMPTY_LINE = "empty line"
    FIELD = "field"
    LAST_UPDATE_LINE = "last update line"
    MULTIPLE_NAME_SERVERS_LINE = "multiple name servers line"
    NON_EMPTY_LINE = "non-empty line"
    ROID_LINE = "roid line"
    EOF = "EOF"


@dataclass(frozen=True)
class AwipLine:
    """Pointer to the status code explainer page."""

    kind: ClassVar[TokenKind] = TokenKind.AWIP_LINE

    @property
    def value(self) -> None:
        return None


@dataclass(frozen=True)
class EmptyLine:
    kind: ClassVar[TokenKind] = TokenKind.EMPTY_LINE

    @property
    def value(self) -> None:
        return None


@dataclass(frozen=True)
class Field:
    """`Key (Translation1/Translation2): Value` line."""

    key: str
    translations: tuple[str, ...] = ()
    value: Optional[str] = None

    kind: ClassVar[TokenKind] = TokenKind.FIELD


@dataclass(frozen=True)
class LastUpdateLine:
    timestamp: str

    kind: ClassVar[TokenKind] = TokenKind.LAST_UPDATE_LINE

    @property
    def value(self) -> str:
        return self.timestamp


@dataclass(frozen=True)
class MultipleNameServersLine:
    kind: ClassVar[TokenKind] = TokenKind.MULTIPLE_NAME_SERVERS_LINE

    @property
    def value(self) -> None:
        return None


@dataclass(frozen=True)
class NonEmptyLine:
    """Any line no other rule claims."""

    text: str

    kind: ClassVar[TokenKind] = TokenKind.NON_EMPTY_LINE

    @property
    def value(self) -> str:
        return self.text


@dataclass(frozen=True)
class RoidLine:
    """`<roid> (<hostname>)` line."""

    roid: str
    hostname: str

    kind: ClassVar[TokenKind] = TokenKind.ROID_LINE

    @property
    def value(self) -> tuple[str, str]:
        return (self.roid, self.hostname)


@dataclass(frozen=True)
class EOF:
    kind: ClassVar[TokenKind] = TokenKind.EOF

    @property
    def value(self) -> None:
        return None


Token = Union[
    AwipLine,
    EmptyLine,
    Field,
    LastUpdateLine,
    MultipleNameServersLine,
    NonEmptyLine,
    RoidLine,
    EOF,
]


def legacy_value(token: Token) -> object:
    """Return the token value in the (kind, value, remarks) triplet shape.

    Fields become a `(key, translations, value)` triple, roid lines a
    `(roid, hostname)` pair, and the remaining kinds their scalar value.
    """
    if isinstance(token, Field):
        return (token.key, list(token.translations), token.value)
    return token.value
