"""Click CLI entry point for the ledger command.

Handles argument parsing, config loading, and error display. All business
logic is delegated to ``importer``, ``categorizer``, ``config``, and
``export`` modules.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from statement_ledger import __version__
from statement_ledger.models import AppConfig, FileResult, RuleSet
from statement_ledger.parsers import BANK_TYPES


def _configure_logging(verbose: bool, debug: bool) -> None:
    """Set up logging based on verbosity flags."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        force=True,
    )


def _load_app_config(root: Path) -> AppConfig:
    """Load config.toml if present, else defaults. Exits on a broken file."""
    from statement_ledger.config import load_config

    try:
        return load_config(root)
    except FileNotFoundError:
        return AppConfig()
    except Exception as exc:
        click.echo(f"Error loading configuration: {exc}", err=True)
        sys.exit(1)


def _process_file(
    file_path: Path,
    bank_type: str,
    rule_set: RuleSet | None,
    output_dir: Path,
    verbose: bool,
) -> FileResult:
    """Import one statement file and write its artifacts."""
    from statement_ledger.export import write_converted_csv, write_parsed_json
    from statement_ledger.importer import extract_text, read_statement

    if verbose:
        click.echo(f"Processing: {file_path.name}")

    try:
        csv_text = read_statement(file_path)
        transactions = extract_text(csv_text, bank_type, rule_set)
        base_name = file_path.stem
        csv_path = write_converted_csv(csv_text, output_dir, base_name)
        json_path = write_parsed_json(transactions, output_dir, base_name)
    except (OSError, ValueError) as exc:
        click.echo(f"Error: {file_path.name}: {exc}", err=True)
        return FileResult(file_name=file_path.name, error=str(exc))

    if verbose:
        click.echo(f"  Found {len(transactions)} transactions")
        click.echo(f"  Wrote {csv_path.name} and {json_path.name}")

    return FileResult(
        file_name=file_path.name,
        transactions=transactions,
        csv_path=str(csv_path),
        json_path=str(json_path),
    )


@click.group()
@click.version_option(version=__version__, prog_name="statement-ledger")
def cli() -> None:
    """Bank statement ingestion and classification for a personal ledger."""


@cli.command()
@click.option(
    "--bank-type",
    type=click.Choice(BANK_TYPES),
    default=None,
    help="Statement format family. Defaults to config.toml, else hdfc.",
)
@click.option("--clean", is_flag=True, default=False, help="Delete source files after processing.")
@click.option(
    "--user-rules", is_flag=True, default=False, help="Classify with rules.toml instead of built-in tables."
)
@click.option("--save", is_flag=True, default=False, help="Merge results into the JSON ledger.")
@click.option("--uploads-dir", type=click.Path(file_okay=False), default=None, help="Input directory.")
@click.option("--output-dir", type=click.Path(file_okay=False), default=None, help="Output directory.")
@click.option("--verbose", is_flag=True, default=False, help="Detailed progress output.")
@click.option("--debug", is_flag=True, default=False, help="Developer-level diagnostics.")
def process(
    bank_type: str | None,
    clean: bool,
    user_rules: bool,
    save: bool,
    uploads_dir: str | None,
    output_dir: str | None,
    verbose: bool,
    debug: bool,
) -> None:
    """Convert and parse every statement file in the uploads directory."""
    _configure_logging(verbose, debug)
    root = Path.cwd()
    config = _load_app_config(root)

    bank_type = bank_type or config.bank_type
    if bank_type not in BANK_TYPES:
        click.echo(
            f"Error: unknown bank type {bank_type!r} in configuration. "
            f"Expected one of: {', '.join(BANK_TYPES)}.",
            err=True,
        )
        sys.exit(1)

    uploads = Path(uploads_dir) if uploads_dir else root / config.uploads_dir
    output = Path(output_dir) if output_dir else root / config.parsed_dir

    if not uploads.is_dir():
        click.echo(f"Error: no uploads directory found at {uploads}", err=True)
        sys.exit(1)

    files = sorted(p for p in uploads.iterdir() if p.is_file())
    if not files:
        click.echo(f"No files found in {uploads}.")
        return

    # Load user rules
    rule_set: RuleSet | None = None
    if user_rules:
        from statement_ledger.config import load_rules

        try:
            rule_set = load_rules(root)
        except Exception as exc:
            click.echo(f"Error loading rules: {exc}", err=True)
            sys.exit(1)
        if rule_set is None:
            click.echo("No user rules configured; using built-in tables.")

    if verbose:
        click.echo(f"Reading files from: {uploads}")
        click.echo(f"Saving parsed files to: {output}")

    results = [_process_file(path, bank_type, rule_set, output, verbose) for path in files]

    # Merge into the ledger
    save_result = None
    if save:
        from statement_ledger.export import save_to_ledger

        extracted = [t for r in results if r.ok for t in r.transactions]
        try:
            save_result = save_to_ledger(extracted, root / config.ledger_file)
        except Exception as exc:
            click.echo(f"Error saving to ledger: {exc}", err=True)
            sys.exit(1)

    from statement_ledger.export import print_summary

    print_summary(results, save_result)

    if clean and any(r.ok for r in results):
        for path in files:
            path.unlink(missing_ok=True)
            if verbose:
                click.echo(f"Deleted: {path.name}")
        click.echo(f"Cleaned up {len(files)} source file(s).")


@cli.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--bank-type",
    type=click.Choice(BANK_TYPES),
    default=None,
    help="Table used where the rules leave a gap. Defaults to config.toml, else hdfc.",
)
@click.option("--verbose", is_flag=True, default=False, help="Show each re-tagged file.")
def retag(files: tuple[str, ...], bank_type: str | None, verbose: bool) -> None:
    """Re-apply the current rules to parsed JSON files (or the ledger)."""
    _configure_logging(verbose, debug=False)
    root = Path.cwd()
    bank_type = bank_type or _load_app_config(root).bank_type

    from statement_ledger.config import load_rules

    try:
        rule_set = load_rules(root)
    except Exception as exc:
        click.echo(f"Error loading rules: {exc}", err=True)
        sys.exit(1)

    if rule_set is None:
        click.echo(
            "Error: No rules configured. Run 'ledger seed-rules' to load the defaults.",
            err=True,
        )
        sys.exit(1)

    from statement_ledger.categorizer import retag as retag_transactions
    from statement_ledger.export import load_parsed_json, write_transactions
    from statement_ledger.tables import TABLES

    table = TABLES.get(bank_type)
    if table is None:
        click.echo(f"Error: unknown bank type {bank_type!r} in configuration.", err=True)
        sys.exit(1)

    total = 0
    for name in files:
        path = Path(name)
        try:
            transactions = load_parsed_json(path)
            updated, count = retag_transactions(transactions, rule_set, table)
            write_transactions(path, updated)
        except (OSError, ValueError) as exc:
            click.echo(f"Error: {path.name}: {exc}", err=True)
            sys.exit(1)
        total += count
        if verbose:
            click.echo(f"  {path.name}: {count} transactions")

    click.echo(f"Re-tagged {total} transaction(s) in {len(files)} file(s).")


@cli.command("seed-rules")
def seed_rules_command() -> None:
    """Load the default category and tag rules into rules.toml."""
    from statement_ledger.config import seed_rules

    root = Path.cwd()
    try:
        written = seed_rules(root)
    except Exception as exc:
        click.echo(f"Error seeding rules: {exc}", err=True)
        sys.exit(1)

    if written:
        click.echo(f"Default rules written to {root / 'rules.toml'}")
    else:
        click.echo("Rules already configured; nothing to do.")


@cli.command()
@click.option(
    "--dir", "target_dir", default=".", type=click.Path(), help="Directory to initialize."
)
def init(target_dir: str) -> None:
    """Initialize a new data directory with the standard structure."""
    from statement_ledger.config import initialize

    target = Path(target_dir).resolve()

    try:
        initialize(target)
    except Exception as exc:
        click.echo(f"Error initializing project: {exc}", err=True)
        sys.exit(1)

    click.echo(f"Initialized statement ledger project in {target}")
