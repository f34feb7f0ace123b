"""DuckDB session management and table initialization."""

from __future__ import annotations

import duckdb

from detonation_scanner.config import settings
from detonation_scanner.utils.logger import logger

_connection: duckdb.DuckDBPyConnection | None = None


def get_db() -> duckdb.DuckDBPyConnection:
    """Return the singleton DuckDB connection, creating tables on first call."""
    global _connection  # noqa: PLW0603
    if _connection is None:
        db_path = str(settings.DB_PATH)
        logger.info("Opening DuckDB at %s", db_path)
        _connection = duckdb.connect(db_path)
        _init_tables(_connection)
    return _connection


def close_db() -> None:
    """Close the singleton connection; the next ``get_db()`` reopens it."""
    global _connection  # noqa: PLW0603
    if _connection is not None:
        _connection.close()
        _connection = None


def _init_tables(conn: duckdb.DuckDBPyConnection) -> None:
    """Create tables if they don't exist."""
    conn.execute("""
        CREATE TABLE IF NOT EXISTS saved_scans (
            id           VARCHAR PRIMARY KEY,
            name         VARCHAR NOT NULL,
            description  VARCHAR,
            mode         VARCHAR NOT NULL,
            filters_json VARCHAR NOT NULL,
            notes        VARCHAR,
            created_at   TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
    """)

    conn.execute("""
        CREATE TABLE IF NOT EXISTS watchlist (
            id             VARCHAR PRIMARY KEY,
            ticker         VARCHAR NOT NULL,
            from_scan_mode VARCHAR NOT NULL,
            added_at       TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            result_json    VARCHAR NOT NULL
        );
    """)

    conn.execute("""
        CREATE TABLE IF NOT EXISTS scan_history (
            id              VARCHAR PRIMARY KEY,
            run_at          TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            mode            VARCHAR NOT NULL,
            data_mode       VARCHAR NOT NULL,
            filters_summary VARCHAR DEFAULT '',
            result_count    INTEGER DEFAULT 0
        );
    """)

    logger.info("DuckDB tables initialized")
