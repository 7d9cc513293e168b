"""SQLite connection and migration helpers."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

import aiosqlite

from mlr_citations.exceptions import StoreUnavailableError

SCHEMA_PATH = Path(__file__).with_name("schema.sql")


async def _init_connection(db: aiosqlite.Connection) -> None:
    await db.execute("PRAGMA journal_mode = WAL")
    await db.execute("PRAGMA synchronous = NORMAL")
    await db.execute("PRAGMA foreign_keys = ON")
    await db.execute("PRAGMA temp_store = MEMORY")


async def run_migrations(db: aiosqlite.Connection) -> None:
    schema_sql = SCHEMA_PATH.read_text(encoding="utf-8")
    await db.executescript(schema_sql)
    await db.commit()


async def _connect(path: Path) -> aiosqlite.Connection:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        db = await aiosqlite.connect(str(path))
    except (OSError, aiosqlite.Error) as exc:
        raise StoreUnavailableError(f"Cannot open evidence store at {path}: {exc}") from exc
    try:
        db.row_factory = aiosqlite.Row
        await _init_connection(db)
        await run_migrations(db)
    except aiosqlite.Error as exc:
        await db.close()
        raise StoreUnavailableError(f"Cannot initialise evidence store at {path}: {exc}") from exc
    return db


@asynccontextmanager
async def get_db(db_path: str = "data/evidence.db") -> AsyncIterator[aiosqlite.Connection]:
    """Open the evidence store, creating the schema if needed.

    Raises StoreUnavailableError when the database cannot be opened.
    """
    db = await _connect(Path(db_path))
    try:
        yield db
    finally:
        await db.close()
