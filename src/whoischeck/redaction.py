"""Redaction strings database and the "... or redacted" field types.

Registries and operators may approve placeholder strings that stand in for
withheld personal data. The database lists such strings one per line:

    # type,string
    privacy,Redacted for privacy purposes
    contact,"Contact the registrar, please"

The types registered by `add_redaction_types` accept either a regular value
of some base type or one of these strings.
"""

import logging
import re
from pathlib import Path
from typing import Iterable, Optional, Union

from whoischeck.models import RedactionDB
from whoischeck.registry import TypeRegistry, load_types
from whoischeck.validators import EitherValidator

logger = logging.getLogger(__name__)

DEFAULT_PRIVACY_REDACT_STRING = "REDACTED FOR PRIVACY"
DEFAULT_CONTACT_REDACT_STRING = (
    "Please query the RDDS service of the Registrar of Record identified in this "
    "output for information on how to contact the Registrant, Admin, or Tech "
    "contact of the queried domain name."
)

REDACT_STRING = "redact string"
EMAIL_REDACT_STRING = "email redact string"

# Horizontal whitespace
HSPACE_RE = re.compile(r"[\t \xa0\u1680\u180e\u2000-\u200a\u202f\u205f\u3000]+")

# One CSV field and its separator; blanks around the field are not part of it
CSV_FIELD_RE = re.compile(r'[ \t]*(?:"((?:[^"]|"")*)"|([^,"]*?))[ \t]*(,|\Z)')

# type name, base type, base type described for the error message
OR_REDACTED_TYPES = [
    ("roid or redacted", "roid", "a ROID"),
    ("token or redacted", "token", "a Token"),
    ("postal code or redacted", "postal code", "a Postal code"),
    ("country code or redacted", "country code", "a Country code"),
    ("phone number or redacted", "phone number", "a Phone number"),
]


class RedactionDBError(ValueError):
    """Raised when a redaction database record is malformed."""

    def __init__(self, message: str, line_no: int) -> None:
        self.line_no = line_no
        super().__init__(message)


def scrub(value: Optional[str]) -> Optional[str]:
    """
    Replace each run of horizontal whitespace with a single SPACE (U+0020).

    Differences in amounts of whitespace are within the bounds of what is
    substantially similar with regard to redaction strings.

        >>> scrub("scrub   multiple   spaces \\t and\\ttabs")
        'scrub multiple spaces and tabs'
    """
    if value is None:
        return None
    return HSPACE_RE.sub(" ", value)


def parse_redaction_db(lines: Iterable[str]) -> RedactionDB:
    """
    Parse the lines of a redaction database.

    Empty lines and lines starting with "#" are ignored. Every other line is a
    comma separated `type,string` record where type is "privacy" or "contact"
    (case-insensitive) and string may be quoted.

    Args:
        lines: Raw database lines, with or without line terminators

    Returns:
        RedactionDB with the privacy and contact strings

    Raises:
        RedactionDBError: If any record is malformed; nothing is returned then
    """
    privacy: set[str] = set()
    contact: set[str] = set()

    for line_no, line in enumerate(lines, start=1):
        line = line.rstrip("\r\n")

        if line == "" or line.startswith("#"):
            continue

        fields = _split_record(line, line_no)

        if len(fields) < 2:
            raise RedactionDBError(f"Invalid record on line {line_no}", line_no)

        string_type, string, extra_fields = fields[0], fields[1], fields[2:]

        if scrub(string) != string:
            raise RedactionDBError(
                f"Illegal whitespace in redaction string on line {line_no}", line_no
            )

        if string_type.lower() == "privacy":
            privacy.add(string)
        elif string_type.lower() == "contact":
            contact.add(string)
        else:
            raise RedactionDBError(f"Unknown string type on line {line_no}", line_no)

        if extra_fields:
            raise RedactionDBError(f"Extra fields on line {line_no}", line_no)

    return RedactionDB(privacy=frozenset(privacy), contact=frozenset(contact))


def load_redaction_db(path: Union[str, Path]) -> RedactionDB:
    """
    Load a redaction database file.

    Args:
        path: Path to a UTF-8 text file; any line ending is accepted

    Returns:
        RedactionDB with the privacy and contact strings

    Raises:
        FileNotFoundError: If the file does not exist
        RedactionDBError: If any record is malformed
    """
    path = Path(path)
    logger.info(f"Loading redaction strings from {path}")

    with open(path, "r", encoding="utf-8-sig") as f:
        db = parse_redaction_db(f.readlines())

    logger.info(
        f"Loaded {len(db.privacy)} privacy and {len(db.contact)} contact redaction strings"
    )
    return db


def add_redaction_types(registry: TypeRegistry, db: Optional[RedactionDB] = None) -> None:
    """
    Add the types for redacted fields to a registry.

    The two default redaction strings match case-insensitively; the strings
    from the database match case-sensitively. The registry must already hold
    the base types roid, token, postal code, country code, phone number,
    email address and http url.

    Args:
        registry: TypeRegistry to extend
        db: Additional approved redaction strings
    """
    if db is None:
        db = RedactionDB()

    def validate_redact_string(value: Optional[str]) -> list[str]:
        value = scrub(value)
        if value is not None and (
            value.lower() == DEFAULT_PRIVACY_REDACT_STRING.lower() or value in db.privacy
        ):
            return []
        return ["must be a valid Redact String"]

    def validate_email_redact_string(value: Optional[str]) -> list[str]:
        value = scrub(value)
        if value is not None and (
            value.lower() == DEFAULT_CONTACT_REDACT_STRING.lower() or value in db.contact
        ):
            return []
        return ["must be a valid Email redact string"]

    registry.add_type(REDACT_STRING, validate_redact_string)
    registry.add_type(EMAIL_REDACT_STRING, validate_email_redact_string)

    for name, base_type, described in OR_REDACTED_TYPES:
        registry.add_type(
            name,
            EitherValidator(
                registry,
                (base_type, REDACT_STRING),
                f"must be either {described} or a Redact String",
            ),
        )

    registry.add_type(
        "email web or redacted",
        EitherValidator(
            registry,
            ("email address", "http url", EMAIL_REDACT_STRING),
            "must be either an Email address, an HTTP URL or an Email redact string",
        ),
    )


def create_registry(redaction_db: Optional[RedactionDB] = None) -> TypeRegistry:
    """Load the built-in base types and add the redaction types on top."""
    registry = load_types()
    add_redaction_types(registry, redaction_db)
    return registry


def _split_record(line: str, line_no: int) -> list[str]:
    """
    Split a comma separated record into its fields.

    Fields may be quoted, with "" standing for a literal quote. Spaces and
    tabs around a field are ignored. A quote inside an unquoted field, or
    text after a closing quote, makes the record unparseable.
    """
    fields = []
    pos = 0
    while True:
        match = CSV_FIELD_RE.match(line, pos)
        if match is None:
            raise RedactionDBError(
                f"Unparseable record on line {line_no}, column {pos + 1}", line_no
            )
        quoted, unquoted, separator = match.groups()
        fields.append(quoted.replace('""', '"') if quoted is not None else unquoted)
        if not separator:
            return fields
        pos = match.end()
