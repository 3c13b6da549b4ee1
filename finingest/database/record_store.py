from collections.abc import Mapping
from typing import Any, ClassVar

import psycopg
from psycopg import sql

from finingest.database.connection import get_connection
from finingest.documents.exceptions import StoreWriteError
from finingest.documents.record_store import BaseRecordStore


class PostgresRecordStore(BaseRecordStore):
    """Inserts imported records into their target tables, one commit per row."""

    TABLES: ClassVar[frozenset[str]] = frozenset({"employees", "pl_entries"})

    def insert(self, table: str, record: Mapping[str, Any]) -> None:
        if table not in self.TABLES:
            raise StoreWriteError(f"Unknown target table '{table}'")
        if not record:
            raise StoreWriteError("Cannot insert an empty record")

        columns = list(record)
        query = sql.SQL("INSERT INTO {table} ({columns}) VALUES ({values})").format(
            table=sql.Identifier(table),
            columns=sql.SQL(", ").join(sql.Identifier(column) for column in columns),
            values=sql.SQL(", ").join(sql.Placeholder() for _ in columns),
        )
        try:
            with get_connection() as conn:
                conn.execute(query, [record[column] for column in columns])
                conn.commit()
        except psycopg.Error as exc:
            raise StoreWriteError(f"Failed to insert into {table}: {exc}") from exc
