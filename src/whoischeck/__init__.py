"""
whoischeck: Tokenizer and value types for WHOIS response conformance checks.

This package breaks WHOIS responses into classified line tokens with
formatting diagnostics, and validates field values against named types,
including types that accept policy-approved redaction strings.
"""

__version__ = "0.1.0"

from whoischeck.engine import Engine
from whoischeck.lexer import Lexer
from whoischeck.registry import load_types, TypeRegistry
from whoischeck.redaction import (
    add_redaction_types,
    create_registry,
    load_redaction_db,
    parse_redaction_db,
    scrub,
    RedactionDBError,
)
from whoischeck.models import LexResult, RedactionDB, Remark, Severity, ValidationResult
from whoischeck.tokens import TokenKind

__all__ = [
    "Engine",
    "Lexer",
    "load_types",
    "TypeRegistry",
    "add_redaction_types",
    "create_registry",
    "load_redaction_db",
    "parse_redaction_db",
    "scrub",
    "RedactionDBError",
    "LexResult",
    "RedactionDB",
    "Remark",
    "Severity",
    "ValidationResult",
    "TokenKind",
]
