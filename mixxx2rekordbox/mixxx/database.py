"""
In-memory access to a Mixxx library database.

The database file is loaded from bytes into a private SQLite connection, so
the exporter never touches the user's ``mixxxdb.sqlite`` on disk. A
MixxxDatabase is owned by exactly one export and must be closed when that
export ends; use it as a context manager.
"""

import sqlite3
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..core.exceptions import DatabaseError
from ..utils.logging_config import get_logger


@dataclass
class QueryResult:
    """Column names plus rows returned by one query"""

    columns: List[str] = field(default_factory=list)
    rows: List[Tuple[Any, ...]] = field(default_factory=list)

    def records(self) -> List[Dict[str, Any]]:
        """Rows as column -> value dictionaries"""
        return [dict(zip(self.columns, row)) for row in self.rows]

    def __len__(self) -> int:
        return len(self.rows)


class MixxxDatabase:
    """SQLite query executor over an in-memory copy of a Mixxx database"""

    def __init__(self, connection: sqlite3.Connection, source: Optional[str] = None):
        self._connection: Optional[sqlite3.Connection] = connection
        self.source = source
        self.logger = get_logger('database')

    @classmethod
    def from_bytes(cls, data: bytes, source: Optional[str] = None) -> 'MixxxDatabase':
        """
        Load a complete database file image

        Args:
            data: Contents of a mixxxdb.sqlite file
            source: Optional file name used in error messages

        Returns:
            Open MixxxDatabase

        Raises:
            DatabaseError: If the image cannot be loaded
        """
        if not data:
            raise DatabaseError("Database file is empty", filepath=source)

        connection = sqlite3.connect(':memory:')
        try:
            connection.deserialize(bytes(data))
        except (sqlite3.Error, OverflowError, TypeError) as e:
            connection.close()
            raise DatabaseError("Could not load database", details=str(e), filepath=source)

        return cls(connection, source)

    @property
    def is_open(self) -> bool:
        return self._connection is not None

    def execute(self, query: str, parameters: Sequence[Any] = ()) -> QueryResult:
        """
        Run one SQL statement

        Raises:
            DatabaseError: If the database is closed
            sqlite3.Error: If SQLite rejects the query
        """
        if self._connection is None:
            raise DatabaseError("Database is closed", filepath=self.source)

        cursor = self._connection.execute(query, parameters)
        try:
            columns = [description[0] for description in cursor.description or ()]
            rows = cursor.fetchall()
        finally:
            cursor.close()
        return QueryResult(columns=columns, rows=rows)

    def close(self) -> None:
        """Release the in-memory database"""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            self.logger.debug("In-memory database released")

    def __enter__(self) -> 'MixxxDatabase':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
