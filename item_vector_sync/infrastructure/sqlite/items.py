from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Generator, List, Optional, Union

from ...domain.errors import ItemStoreError
from ...domain.interfaces import ItemRepository
from ...domain.models import Item
from ..logging import get_logger

logger = get_logger("item_vector_sync.sqlite")

_COLUMNS = "id, name, description, created_at, updated_at"


def _parse_ts(value: object) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        logger.debug("Unparseable timestamp %r; treating as missing", value)
        return None


def _row_to_item(row: sqlite3.Row) -> Item:
    return Item(
        id=int(row["id"]),
        name=row["name"],
        description=row["description"],
        created_at=_parse_ts(row["created_at"]),
        updated_at=_parse_ts(row["updated_at"]),
    )


def read_only_uri(db_path: Union[str, Path]) -> str:
    """SQLite URI opening ``db_path`` read-only; a missing file is an error, never created."""
    return f"{Path(db_path).resolve().as_uri()}?mode=ro"


class SqliteItemRepository(ItemRepository):
    """Read-only access to the ``items`` table of a SQLite database."""

    def __init__(self, db_path: Union[str, Path]) -> None:
        self._db_path = str(db_path)

    @contextmanager
    def _connect(self) -> Generator[sqlite3.Connection, None, None]:
        try:
            conn = sqlite3.connect(read_only_uri(self._db_path), uri=True)
        except sqlite3.Error as ex:
            logger.error("Item store unavailable | path=%s | error=%s", self._db_path, ex)
            raise ItemStoreError(f"Cannot open item store {self._db_path}", str(ex)) from ex
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        except sqlite3.Error as ex:
            logger.error("Item store query failed | path=%s | error=%s", self._db_path, ex)
            raise ItemStoreError(f"Cannot read items from {self._db_path}", str(ex)) from ex
        finally:
            conn.close()

    def all(self) -> List[Item]:
        with self._connect() as conn:
            rows = conn.execute(f"SELECT {_COLUMNS} FROM items ORDER BY id").fetchall()
        return [_row_to_item(r) for r in rows]

    def get(self, item_id: int) -> Optional[Item]:
        with self._connect() as conn:
            row = conn.execute(f"SELECT {_COLUMNS} FROM items WHERE id = ?", (int(item_id),)).fetchone()
        return _row_to_item(row) if row else None
