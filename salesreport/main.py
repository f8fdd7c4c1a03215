"""Main entry point with CLI."""
import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import orjson

from salesreport.config import config, Config
from salesreport.errors import ReportError
from salesreport.logging_conf import setup_logging
from salesreport.jobs.importer import import_records
from salesreport.report.composer import ReportComposer
from salesreport.report.search import SearchEngine
from salesreport.store.records import RecordStore

import logging

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Sales report service")
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help=f"SQLite database path (default: {config.DB_PATH})",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Verbose (DEBUG) logs",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=config.HOST, help=f"Bind host (default: {config.HOST})")
    serve.add_argument("--port", type=int, default=config.PORT, help=f"Bind port (default: {config.PORT})")

    imp = sub.add_parser("import", help="Import the sale feed into the store")
    imp.add_argument(
        "--source",
        default=None,
        help=f"Feed URL or local JSON file (default: {config.FEED_URL})",
    )
    imp.add_argument(
        "--replace",
        action="store_true",
        help="Delete existing records before importing",
    )

    report = sub.add_parser("report", help="Print the combined report for a month")
    report.add_argument("--month", required=True, help="Month (1-12)")
    report.add_argument("--year", required=True, help="Year")

    search = sub.add_parser("search", help="Print one page of search results")
    search.add_argument("--query", default="", help="Substring of title or description")
    search.add_argument("--page", default="1", help="Page number (default: 1)")
    search.add_argument(
        "--per-page",
        default=None,
        help=f"Records per page (default: {config.DEFAULT_PER_PAGE})",
    )

    return parser.parse_args(argv)


def _print_json(data) -> None:
    sys.stdout.write(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode() + "\n")


async def run_command(args: argparse.Namespace, store: RecordStore) -> None:
    """Run a non-server command against ``store``."""
    await store.initialize()

    if args.command == "import":
        result = await import_records(store, source=args.source, replace=args.replace)
        _print_json({"message": "Transactions imported successfully!", "count": result.count})
    elif args.command == "report":
        report = await ReportComposer(store).combined_report(args.month, args.year)
        _print_json(report.model_dump(mode="json", by_alias=True))
    elif args.command == "search":
        page = await SearchEngine(store).search(args.query, args.page, args.per_page)
        _print_json(page.model_dump(mode="json", by_alias=True))


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    # Setup logging
    setup_logging()

    args = parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    if args.db:
        config.DB_PATH = args.db

    try:
        Config.validate()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    if args.command == "serve":
        import uvicorn
        from salesreport.api.main import create_app

        logger.info(f"Serving on {args.host}:{args.port} (db: {config.DB_PATH})")
        uvicorn.run(create_app(RecordStore(config.DB_PATH)), host=args.host, port=args.port)
        return

    try:
        asyncio.run(run_command(args, RecordStore(config.DB_PATH)))
    except ReportError as e:
        logger.error(f"{e.message}" + (f": {e.error}" if e.error else ""))
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(1)


if __name__ == "__main__":
    main()
