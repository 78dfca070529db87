"""Type registry for loading and managing named value types."""

import re
import logging
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, Union

import yaml
import jsonschema

from whoischeck.models import TypeDefinition, Examples
from whoischeck.validators import FunctionValidator, PatternValidator, Validator

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"
DEFAULT_TYPE_FILES = [DATA_DIR / "base_types.yml"]
SCHEMA_PATH = DATA_DIR / "type-schema.json"

REGEX_FLAGS = {
    "IGNORECASE": re.IGNORECASE,
    "MULTILINE": re.MULTILINE,
    "DOTALL": re.DOTALL,
    "UNICODE": re.UNICODE,
    "VERBOSE": re.VERBOSE,
}


class TypeRegistry:
    """Registry mapping type names to validators."""

    def __init__(self) -> None:
        """Initialize empty type registry."""
        self.types: dict[str, Validator] = {}  # name -> Validator
        self.definitions: dict[str, TypeDefinition] = {}  # name -> regex-backed base type
        self._version: int = 0

    def add_type(
        self,
        name: str,
        validator: Union[Validator, Callable[[Optional[str]], Iterable[str]]],
    ) -> None:
        """
        Add a named type to the registry.

        Args:
            name: Type name, e.g. "roid or redacted"
            validator: Validator instance, or a plain callable returning messages
        """
        if not hasattr(validator, "validate"):
            validator = FunctionValidator(validator)

        if name in self.types:
            logger.warning(f"Type {name} already exists, overwriting")

        self.types[name] = validator
        self._version += 1
        logger.debug(f"Registered type {name!r}")

    def add_definition(self, definition: TypeDefinition) -> None:
        """Add a regex-backed base type to the registry."""
        self.definitions[definition.name] = definition
        self.add_type(definition.name, PatternValidator(definition))

    def get_type(self, name: str) -> Optional[Validator]:
        """Get validator by type name."""
        return self.types.get(name)

    def validate_type(self, name: str, value: Optional[str]) -> list[str]:
        """
        Validate a value against a named type.

        Args:
            name: Type name
            value: Field value, or None for an empty field

        Returns:
            Error messages in order; empty if the value is valid

        Raises:
            ValueError: If type not found
        """
        validator = self.get_type(name)
        if validator is None:
            raise ValueError(f"Type not found: {name}")
        return validator.validate(value)

    def names(self) -> list[str]:
        """Get all type names in registration order."""
        return list(self.types.keys())

    @property
    def version(self) -> int:
        """Get current registry version (increments on changes)."""
        return self._version

    def __contains__(self, name: object) -> bool:
        return name in self.types

    def __len__(self) -> int:
        """Return number of types."""
        return len(self.types)

    def __repr__(self) -> str:
        """String representation."""
        return f"TypeRegistry(types={len(self.types)})"


def load_types(
    paths: Optional[list[str]] = None,
    validate_schema: bool = True,
    validate_examples: bool = True,
) -> TypeRegistry:
    """
    Load base types from YAML files into a registry.

    Args:
        paths: List of file paths to load. If None, loads the built-in types.
        validate_schema: Whether to validate against JSON schema
        validate_examples: Whether to validate examples against patterns

    Returns:
        TypeRegistry with loaded types

    Raises:
        ValueError: If type validation fails
    """
    registry = TypeRegistry()

    type_paths = [Path(p) for p in paths] if paths is not None else DEFAULT_TYPE_FILES

    for path in type_paths:
        if not path.exists():
            logger.warning(f"Type file not found: {path}")
            continue

        logger.info(f"Loading types from {path}")
        data = _load_yaml_file(path)

        if validate_schema:
            _validate_schema(data)

        for definition in _parse_type_file(data):
            if validate_examples and definition.examples:
                _validate_examples(definition)
            registry.add_definition(definition)

    logger.info(f"Loaded {len(registry)} types")
    return registry


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def _validate_schema(data: dict[str, Any]) -> None:
    """Validate type file data against JSON schema."""
    if not SCHEMA_PATH.exists():
        logger.warning("Type schema not found, skipping validation")
        return

    with open(SCHEMA_PATH, "r", encoding="utf-8") as f:
        schema = yaml.safe_load(f)

    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        raise ValueError(f"Type schema validation failed: {e.message}") from e


def _parse_type_file(data: dict[str, Any]) -> list[TypeDefinition]:
    """Parse type file data into TypeDefinition objects."""
    return [_compile_type(type_data) for type_data in data.get("types", [])]


def _compile_type(data: dict[str, Any]) -> TypeDefinition:
    """Compile a single type definition."""
    name = data["name"]
    pattern_str = data["pattern"]

    flags = 0
    for flag_name in data.get("flags", []):
        try:
            flags |= REGEX_FLAGS[flag_name]
        except KeyError:
            raise ValueError(f"Unknown regex flag {flag_name} in type {name}") from None

    try:
        compiled = re.compile(pattern_str, flags)
    except re.error as e:
        raise ValueError(f"Failed to compile type {name}: {e}") from e

    examples = None
    if "examples" in data:
        examples = Examples(
            match=data["examples"].get("match", []),
            nomatch=data["examples"].get("nomatch", []),
        )

    return TypeDefinition(
        name=name,
        label=data.get("label", name),
        pattern=pattern_str,
        compiled=compiled,
        description=data.get("description", ""),
        flags=data.get("flags", []),
        examples=examples,
    )


def _validate_examples(definition: TypeDefinition) -> None:
    """Validate type examples match/nomatch expectations."""
    if not definition.examples:
        return

    errors = []

    for example in definition.examples.match:
        if not definition.compiled.fullmatch(example):
            errors.append(f"Example should match but doesn't: '{example}'")

    for example in definition.examples.nomatch:
        if definition.compiled.fullmatch(example):
            errors.append(f"Example should NOT match but does: '{example}'")

    if errors:
        error_msg = f"Type {definition.name} example validation failed:\n" + "\n".join(errors)
        raise ValueError(error_msg)

    logger.debug(f"Type {definition.name} examples validated successfully")
