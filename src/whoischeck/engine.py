"""Core tokenizing and validation engine."""

import logging
from typing import Optional

from whoischeck.lexer import Lexer
from whoischeck.models import LexResult, TokenRecord, ValidationResult
from whoischeck.redaction import create_registry
from whoischeck.registry import TypeRegistry
from whoischeck.tokens import TokenKind

logger = logging.getLogger(__name__)


class Engine:
    """
    Core engine for WHOIS response conformance checks.

    The engine tokenizes responses with a Lexer and validates field values
    against the named types of a TypeRegistry.
    """

    def __init__(self, registry: Optional[TypeRegistry] = None, check_eol: bool = True) -> None:
        """
        Initialize engine with type registry.

        Args:
            registry: TypeRegistry with base and redaction types. If None, the
                      built-in types are loaded on first validation.
            check_eol: Whether to report line endings other than CRLF
        """
        self._registry = registry
        self.check_eol = check_eol

    @property
    def registry(self) -> TypeRegistry:
        """Get the type registry, loading the built-in types if none was given."""
        if self._registry is None:
            self._registry = create_registry()
        return self._registry

    def lex(self, text: str) -> LexResult:
        """
        Tokenize a complete response.

        Args:
            text: Response text

        Returns:
            LexResult with one record per line, ending with the EOF record
        """
        lexer = Lexer(text, check_eol=self.check_eol)
        records: list[TokenRecord] = []

        while True:
            token, remarks = lexer.peek()
            records.append(TokenRecord(line_no=lexer.line_no(), token=token, remarks=remarks))
            if token.kind is TokenKind.EOF:
                break
            lexer.advance()

        result = LexResult(tokens=records)
        logger.debug(f"Tokenized {len(records)} records with {len(result.remarks)} remarks")
        return result

    def validate(self, value: Optional[str], type_name: str) -> ValidationResult:
        """
        Validate a field value against a named type.

        Args:
            value: Field value, or None for an empty field
            type_name: Registered type name (e.g., "roid or redacted")

        Returns:
            ValidationResult with the error messages, if any

        Raises:
            ValueError: If type not found
        """
        errors = self.registry.validate_type(type_name, value)

        return ValidationResult(
            value=value,
            type_name=type_name,
            is_valid=not errors,
            errors=errors,
        )
