"""Command-line interface for whoischeck."""

import json
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from whoischeck import __version__
from whoischeck.engine import Engine
from whoischeck.models import LexResult
from whoischeck.redaction import RedactionDBError, create_registry, load_redaction_db
from whoischeck.tokens import legacy_value


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _build_engine(redaction_db: Optional[Path], check_eol: bool = True) -> Engine:
    """Create an engine, exiting with status 2 on a bad redaction database."""
    db = None
    if redaction_db:
        try:
            db = load_redaction_db(redaction_db)
        except RedactionDBError as e:
            click.echo(f"Error: {redaction_db}: {e}", err=True)
            sys.exit(2)
    return Engine(create_registry(db), check_eol=check_eol)


redaction_db_option = click.option(
    "--redaction-db",
    "-r",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    envvar="WHOISCHECK_REDACTION_DB",
    help="Redaction strings database (defaults to $WHOISCHECK_REDACTION_DB)",
)


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """whoischeck: Check WHOIS responses for format conformance."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose)


@main.command()
@click.option(
    "--text",
    "-t",
    help="Response text to tokenize (use --file for file input)",
)
@click.option(
    "--file",
    "-f",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Response file to tokenize",
)
@click.option(
    "--check-eol/--no-check-eol",
    default=True,
    help="Report line endings other than CRLF",
)
@click.option(
    "--output",
    "-o",
    type=click.Choice(["json", "text"]),
    default="text",
    help="Output format",
)
def lex(
    text: Optional[str],
    file: Optional[Path],
    check_eol: bool,
    output: str,
) -> None:
    """Tokenize a response and report formatting remarks."""
    if text is None and file is None:
        click.echo("Error: Must provide --text or --file", err=True)
        sys.exit(2)

    if file:
        # Decode by hand; line endings are significant
        try:
            text = file.read_bytes().decode("utf-8")
        except UnicodeDecodeError as e:
            click.echo(f"Error: {file}: {e}", err=True)
            sys.exit(2)
    assert text is not None

    result = Engine(check_eol=check_eol).lex(text)

    if output == "json":
        click.echo(json.dumps(_lex_result_data(result), indent=2))
    else:
        for record in result.tokens:
            value = legacy_value(record.token)
            value_preview = f" {value!r}" if value is not None else ""
            click.echo(f"{record.line_no:>5} {record.kind.value}{value_preview}")
            for remark in record.remarks:
                click.echo(f"      {remark.severity.value}: {remark.message}")
        click.echo(f"{len(result.remarks)} remarks")

    sys.exit(1 if result.has_errors else 0)


def _lex_result_data(result: LexResult) -> dict:
    return {
        "has_errors": result.has_errors,
        "tokens": [
            {
                "line": record.line_no,
                "kind": record.kind.value,
                "value": legacy_value(record.token),
                "remarks": [
                    {"severity": r.severity.value, "line": r.line, "message": r.message}
                    for r in record.remarks
                ],
            }
            for record in result.tokens
        ],
    }


@main.command()
@click.option(
    "--type",
    "type_name",
    required=True,
    help='Type name (e.g., "roid or redacted")',
)
@click.option(
    "--value",
    required=True,
    help="Field value to validate",
)
@redaction_db_option
def validate(
    type_name: str,
    value: str,
    redaction_db: Optional[Path],
) -> None:
    """Validate a field value against a named type."""
    engine = _build_engine(redaction_db)

    try:
        result = engine.validate(value, type_name)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)

    if result.is_valid:
        click.echo(f"✓ Valid {type_name}")
        sys.exit(0)

    click.echo(f"✗ Invalid {type_name}")
    for error in result.errors:
        click.echo(f"  {error}")
    sys.exit(1)


@main.command("check-db")
@click.argument(
    "path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
def check_db(path: Path) -> None:
    """Check a redaction strings database."""
    try:
        db = load_redaction_db(path)
    except RedactionDBError as e:
        click.echo(f"Error: {path}: {e}", err=True)
        sys.exit(2)

    click.echo(f"{len(db.privacy)} privacy strings, {len(db.contact)} contact strings")


@main.command("list-types")
@redaction_db_option
def list_types(redaction_db: Optional[Path]) -> None:
    """List available types."""
    registry = _build_engine(redaction_db).registry

    click.echo(f"Loaded {len(registry)} types\n")

    for name in registry.names():
        definition = registry.definitions.get(name)
        description = definition.description if definition else ""
        click.echo(f"  {name:<26} {description}")


if __name__ == "__main__":
    main()
