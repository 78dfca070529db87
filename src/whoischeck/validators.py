"""Validators that back the named types of a TypeRegistry."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable, Optional, Protocol

from whoischeck.models import TypeDefinition

if TYPE_CHECKING:
    from whoischeck.registry import TypeRegistry


class Validator(Protocol):
    """Anything that can validate a single field value."""

    def validate(self, value: Optional[str]) -> list[str]:
        """Return error messages; an empty list means the value is valid."""
        ...


@dataclass
class PatternValidator:
    """Full-match a value against a compiled base type."""

    definition: TypeDefinition

    def validate(self, value: Optional[str]) -> list[str]:
        if value is None or not self.definition.compiled.fullmatch(value):
            return [self.definition.message]
        return []


@dataclass
class FunctionValidator:
    """Adapt a plain `value -> messages` callable."""

    func: Callable[[Optional[str]], Iterable[str]]

    def validate(self, value: Optional[str]) -> list[str]:
        return list(self.func(value))


@dataclass
class EitherValidator:
    """
    Accept a value if any of the alternative types accepts it.

    All alternatives are evaluated, and they are looked up by name at
    validation time so that later registrations are honored.
    """

    registry: "TypeRegistry"
    alternatives: tuple[str, ...]
    message: str

    def validate(self, value: Optional[str]) -> list[str]:
        errors = [self.registry.validate_type(name, value) for name in self.alternatives]
        if all(errors):
            return [self.message]
        return []
