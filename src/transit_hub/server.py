import argparse
import asyncio
import logging
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel

from transit_hub.app import mcp
from transit_hub.data.config import get_planner_config


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str


@mcp.tool()
def health() -> HealthResponse:
    """Check if the Transit Hub MCP server is running and healthy.

    Returns the server status, version, and current timestamp.
    """
    from transit_hub import __version__

    return HealthResponse(
        status="ok",
        version=__version__,
        timestamp=datetime.now(UTC).isoformat(),
    )


async def run_ingest(dataset_path: Path, db_path: Path) -> None:
    """Run dataset ingestion."""
    from transit_hub.data.dataset_loader import DatasetLoader

    loader = DatasetLoader(db_path)
    row_counts = await loader.ingest(dataset_path)

    print("\nIngestion complete. Row counts:")
    for table, count in row_counts.items():
        print(f"  {table}: {count:,}")


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="transit-hub",
        description="Transit Hub route planning MCP server",
    )
    subparsers = parser.add_subparsers(dest="command")

    # ingest command
    ingest_parser = subparsers.add_parser(
        "ingest",
        help="Ingest stops/hubs/routes CSV exports into a SQLite database",
    )
    ingest_parser.add_argument(
        "dataset_path",
        type=Path,
        help="Path to a directory or ZIP with stops.csv, hubs.csv, routes.csv, route_stops.csv",
    )
    ingest_parser.add_argument(
        "--db",
        type=Path,
        default=get_planner_config().db_path,
        help="SQLite database path (default: data/transit.db or TRANSIT_HUB_DB_PATH env var)",
    )
    ingest_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    if args.command == "ingest":
        log_level = logging.DEBUG if args.verbose else logging.INFO
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

        asyncio.run(run_ingest(args.dataset_path, args.db))
    else:
        # Default: register tools and run MCP server
        import transit_hub.tools  # noqa: F401

        mcp.run()


if __name__ == "__main__":
    main()
