"""Dataset loader for ingesting stop/hub/route CSV exports into SQLite."""

import csv
import io
import logging
import zipfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, TextIO

import aiosqlite

logger = logging.getLogger(__name__)

# Schema definitions
SCHEMA_SQL = """
-- hubs
CREATE TABLE hubs (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    latitude REAL NOT NULL,
    longitude REAL NOT NULL,
    address TEXT,
    transport_type TEXT,
    image_url TEXT
);

-- routes
CREATE TABLE routes (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    start_point TEXT,
    end_point TEXT,
    cost REAL,
    transport_type TEXT NOT NULL,
    hub_id TEXT
);

-- stops
CREATE TABLE stops (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    latitude REAL NOT NULL,
    longitude REAL NOT NULL,
    order_number INTEGER,
    route_id TEXT,
    cost REAL,
    image_url TEXT
);

-- route_stops (many-to-many, ordered)
CREATE TABLE route_stops (
    route_id TEXT NOT NULL,
    stop_id TEXT NOT NULL,
    order_number INTEGER
);
"""

INDEX_SQL = """
CREATE INDEX idx_routes_hub ON routes(hub_id);
CREATE INDEX idx_route_stops_route ON route_stops(route_id);
CREATE INDEX idx_route_stops_stop ON route_stops(stop_id);
"""

# Table definitions: table_name -> (csv_filename, columns)
TABLE_DEFINITIONS: dict[str, tuple[str, list[str]]] = {
    "hubs": (
        "hubs.csv",
        ["id", "name", "latitude", "longitude", "address", "transport_type", "image_url"],
    ),
    "routes": (
        "routes.csv",
        ["id", "name", "start_point", "end_point", "cost", "transport_type", "hub_id"],
    ),
    "stops": (
        "stops.csv",
        ["id", "name", "latitude", "longitude", "order_number", "route_id", "cost", "image_url"],
    ),
    "route_stops": (
        "route_stops.csv",
        ["route_id", "stop_id", "order_number"],
    ),
}

# Columns that must be non-empty for a row to be inserted
REQUIRED_COLUMNS: dict[str, list[str]] = {
    "hubs": ["id", "name", "latitude", "longitude"],
    "routes": ["id", "name", "transport_type"],
    "stops": ["id", "name", "latitude", "longitude"],
    "route_stops": ["route_id", "stop_id"],
}

# Columns that must parse as numbers when present
NUMERIC_COLUMNS: dict[str, dict[str, type]] = {
    "hubs": {"latitude": float, "longitude": float},
    "routes": {"cost": float},
    "stops": {"latitude": float, "longitude": float, "order_number": int, "cost": float},
    "route_stops": {"order_number": int},
}

# Chunk size for bulk inserts
CHUNK_SIZE = 10000


def _parse_number(value: str, kind: type) -> float | int:
    """Parse a CSV number; integer columns accept whole floats such as '3.0'.

    Raises:
        ValueError: If the value is not a number of the given kind.
    """
    number = float(value)
    if kind is int:
        if not number.is_integer():
            raise ValueError(f"Expected an integer, got {value!r}")
        return int(number)
    return number


async def _count_rows(db: aiosqlite.Connection, table_name: str) -> int:
    async with db.execute(f"SELECT COUNT(*) FROM {table_name}") as cursor:
        row = await cursor.fetchone()
    return row[0] if row else 0


class DatasetLoader:
    """Builds the transit SQLite database from stop/hub/route CSV exports."""

    def __init__(self, db_path: Path):
        """Initialize the loader.

        Args:
            db_path: Path where the SQLite database will be created.
        """
        self.db_path = Path(db_path)

    async def ingest(self, dataset_path: Path) -> dict[str, int]:
        """Load hubs.csv, routes.csv, stops.csv and route_stops.csv into SQLite.

        The database is built next to the target and moved into place only
        once it passes the integrity check, so a failed ingest leaves any
        existing database untouched.

        Args:
            dataset_path: Directory or ZIP archive holding the CSV exports.

        Returns:
            Inserted row counts per table.

        Raises:
            FileNotFoundError: If the dataset path doesn't exist.
            ValueError: If stops or routes are missing, or a header lacks columns.
        """
        dataset_path = Path(dataset_path)
        if not dataset_path.exists():
            raise FileNotFoundError(f"Dataset path not found: {dataset_path}")

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        staging_db = self.db_path.with_suffix(".tmp.db")
        staging_db.unlink(missing_ok=True)

        try:
            row_counts = await self._build(staging_db, dataset_path)
        except Exception:
            staging_db.unlink(missing_ok=True)
            raise

        staging_db.replace(self.db_path)
        logger.info(f"Dataset ingestion complete: {self.db_path}")
        return row_counts

    async def _build(self, staging_db: Path, dataset_path: Path) -> dict[str, int]:
        """Create schema, load every table, index and verify."""
        async with aiosqlite.connect(staging_db) as db:
            await db.execute("PRAGMA journal_mode=OFF")
            await db.execute("PRAGMA synchronous=OFF")
            await db.executescript(SCHEMA_SQL)

            row_counts = await self._load_all_tables(db, dataset_path)

            logger.info("Creating indexes...")
            await db.executescript(INDEX_SQL)
            await db.commit()
            await self._verify_integrity(db)
        return row_counts

    async def _load_all_tables(
        self, db: aiosqlite.Connection, dataset_path: Path
    ) -> dict[str, int]:
        archive = None
        if dataset_path.is_file() and dataset_path.suffix == ".zip":
            archive = zipfile.ZipFile(dataset_path)
        row_counts: dict[str, int] = {}
        try:
            for table_name, (csv_filename, columns) in TABLE_DEFINITIONS.items():
                with self._open_csv(dataset_path, archive, csv_filename) as text:
                    if text is None:
                        logger.warning(f"Optional file {csv_filename} not found")
                        row_counts[table_name] = 0
                        continue
                    row_counts[table_name] = await self._load_rows(
                        db, table_name, columns, csv.reader(text), csv_filename
                    )
        finally:
            if archive is not None:
                archive.close()
        return row_counts

    @contextmanager
    def _open_csv(
        self, dataset_path: Path, archive: zipfile.ZipFile | None, csv_filename: str
    ) -> Iterator[TextIO | None]:
        """Open a CSV export from the dataset directory or archive (None if absent)."""
        if archive is not None:
            if csv_filename not in archive.namelist():
                yield None
                return
            with archive.open(csv_filename) as raw:
                yield io.TextIOWrapper(raw, encoding="utf-8-sig", newline="")
            return

        csv_path = dataset_path / csv_filename
        if not csv_path.exists():
            yield None
            return
        with open(csv_path, encoding="utf-8-sig", newline="") as f:
            yield f

    async def _load_rows(
        self,
        db: aiosqlite.Connection,
        table_name: str,
        columns: list[str],
        reader: Iterator[list[str]],
        filename: str,
    ) -> int:
        """Insert the valid rows of one CSV export in chunks."""
        logger.info(f"Loading {table_name} from {filename}...")
        insert_sql = (
            f"INSERT INTO {table_name} ({', '.join(columns)}) "
            f"VALUES ({', '.join('?' for _ in columns)})"
        )
        header_index = self._build_header_index(reader, columns, filename)

        inserted = 0
        skipped = 0
        batch: list[tuple[Any, ...]] = []
        for record in reader:
            values = self._parse_row(table_name, columns, record, header_index)
            if values is None:
                skipped += 1
                continue
            batch.append(values)
            if len(batch) >= CHUNK_SIZE:
                await db.executemany(insert_sql, batch)
                inserted += len(batch)
                batch = []

        if batch:
            await db.executemany(insert_sql, batch)
            inserted += len(batch)
        await db.commit()

        message = f"  {table_name}: {inserted:,} rows"
        if skipped:
            message += f", skipped {skipped:,} invalid"
        logger.info(message)
        return inserted

    def _parse_row(
        self,
        table_name: str,
        columns: list[str],
        record: list[str],
        header_index: dict[str, int],
    ) -> tuple[Any, ...] | None:
        """Insert values for one CSV record, or None if the record is invalid.

        Empty cells become NULL. A record is invalid when a required cell is
        empty or a numeric cell does not parse.
        """
        cells = {
            col: record[idx].strip() if idx < len(record) else ""
            for col, idx in header_index.items()
        }
        if any(not cells[col] for col in REQUIRED_COLUMNS.get(table_name, [])):
            return None

        numeric = NUMERIC_COLUMNS.get(table_name, {})
        values: list[Any] = []
        for col in columns:
            cell = cells[col]
            if not cell:
                values.append(None)
            elif col in numeric:
                try:
                    values.append(_parse_number(cell, numeric[col]))
                except ValueError:
                    logger.debug(f"Skipping {table_name} row: {col}={cell!r} is not a number")
                    return None
            else:
                values.append(cell)
        return tuple(values)

    def _build_header_index(
        self, reader: Iterator[list[str]], columns: list[str], filename: str
    ) -> dict[str, int]:
        """Map each expected column to its position in the CSV header.

        Header names are matched case-insensitively after trimming whitespace.
        """
        header = next(reader, None)
        if header is None:
            raise ValueError(f"{filename} is empty")
        expected = set(columns)
        header_index: dict[str, int] = {}
        for idx, name in enumerate(header):
            cleaned = name.strip().lower()
            if cleaned in expected and cleaned not in header_index:
                header_index[cleaned] = idx
        missing = [col for col in columns if col not in header_index]
        if missing:
            raise ValueError(f"{filename} missing columns: {', '.join(missing)}")
        return header_index

    async def _verify_integrity(self, db: aiosqlite.Connection) -> None:
        """Require stops and routes to plan over; warn on dangling route_stops."""
        logger.info("Verifying database integrity...")

        for table_name in ("stops", "routes"):
            if await _count_rows(db, table_name) == 0:
                raise ValueError(f"No {table_name} loaded - check dataset")

        async with db.execute(
            "SELECT COUNT(*) FROM route_stops rs LEFT JOIN stops s ON s.id = rs.stop_id "
            "WHERE s.id IS NULL"
        ) as cursor:
            row = await cursor.fetchone()
        if row and row[0]:
            logger.warning(f"{row[0]:,} route_stops rows reference unknown stops")

        logger.info("Database integrity verified")


async def get_table_counts(db_path: Path) -> dict[str, int]:
    """Row counts for every dataset table.

    Args:
        db_path: Path to the SQLite database.
    """
    async with aiosqlite.connect(db_path) as db:
        return {table_name: await _count_rows(db, table_name) for table_name in TABLE_DEFINITIONS}
