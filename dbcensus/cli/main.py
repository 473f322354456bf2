"""Command-line interface for dbcensus - database catalog census."""
import argparse
import asyncio
import logging
import sys

from dbcensus.config.connection import load_coordinates
from dbcensus.core.describe import describe_table
from dbcensus.core.report import count_rows
from dbcensus.core.utils import parse_identifier
from dbcensus.dal import get_db, list_supported_databases, open_connection
from dbcensus.output.json import render_json
from dbcensus.output.text import (
    render_report_text,
    render_table_description_text,
    render_tables_text,
)

logger = logging.getLogger(__name__)


async def run_tables(args):
    """List tables of the requested schemas."""
    db = get_db(args.db)
    coords = load_coordinates(args.db, args.conn_file)

    async with open_connection(db, coords) as conn:
        tables = await conn.get_schema_tables(args.schema)

    if args.format == "json":
        print(render_json(tables))
    else:
        print(render_tables_text(tables))


async def run_report(args):
    """Count rows of every table in the requested schemas."""
    db = get_db(args.db)
    coords = load_coordinates(args.db, args.conn_file)

    async with open_connection(db, coords) as conn:
        tables = await conn.get_schema_tables(args.schema)
        report = await count_rows(conn, tables, skip_errors=args.skip_errors)

    if args.format == "json":
        print(render_json(report))
    else:
        print(render_report_text(report))


async def run_describe(args):
    """Show columns and constraints of one table."""
    schema, table = parse_identifier(args.table)
    if not schema:
        raise ValueError(f"Table must be given as SCHEMA.TABLE, got: '{args.table}'")

    db = get_db(args.db)
    coords = load_coordinates(args.db, args.conn_file)

    async with open_connection(db, coords) as conn:
        description = await describe_table(conn, schema, table)

    if args.format == "json":
        print(render_json(description))
    else:
        print(render_table_description_text(description))


COMMANDS = {
    "tables": run_tables,
    "report": run_report,
    "describe": run_describe,
}


async def run_command(args):
    """Async execution wrapper for all commands."""
    try:
        await COMMANDS[args.command](args)
        sys.exit(0)
    except Exception as e:  # pylint: disable=broad-except
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _add_common_arguments(parser):
    parser.add_argument(
        "--db", required=True,
        choices=list_supported_databases(),
        help="Database type"
    )
    parser.add_argument(
        "--conn-file",
        help="Path to connection config file, YAML or JSON (default: ~/.dbcensus/{db}.yaml)"
    )
    parser.add_argument(
        "--format", choices=["text", "json"], default="text",
        help="Output format (default: text)"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging"
    )


def _add_schema_argument(parser):
    parser.add_argument(
        "--schema", action="append", required=True,
        help="Schema to inspect (repeat for several schemas)"
    )


def main():
    """Parse command line arguments and execute appropriate command."""
    parser = argparse.ArgumentParser(
        description="dbcensus - inspect Oracle and PostgreSQL catalogs",
        epilog="Examples:\n"
               "  dbcensus tables --db postgres --schema public\n"
               "  dbcensus report --db oracle --schema SALES --conn-file coordinates.json\n"
               "  dbcensus describe --db oracle SALES.ORDERS",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    subparsers = parser.add_subparsers(dest="command")

    tables_parser = subparsers.add_parser(
        "tables",
        help="List tables in one or more schemas"
    )
    _add_common_arguments(tables_parser)
    _add_schema_argument(tables_parser)

    report_parser = subparsers.add_parser(
        "report",
        help="Count rows of every table in one or more schemas"
    )
    _add_common_arguments(report_parser)
    _add_schema_argument(report_parser)
    report_parser.add_argument(
        "--skip-errors", action="store_true",
        help="Report tables that cannot be counted and continue with the rest"
    )

    describe_parser = subparsers.add_parser(
        "describe",
        help="Show columns and constraints of a table"
    )
    _add_common_arguments(describe_parser)
    describe_parser.add_argument("table", help="Table identifier (SCHEMA.TABLE)")

    args = parser.parse_args()

    if args.command not in COMMANDS:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    asyncio.run(run_command(args))

if __name__ == "__main__":
    main()
