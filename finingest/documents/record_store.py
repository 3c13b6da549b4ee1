from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any


class BaseRecordStore(ABC):
    """Contract for the row-oriented store that imported records land in."""

    @abstractmethod
    def insert(self, table: str, record: Mapping[str, Any]) -> None:
        """Insert a single record owned by ``record["user_id"]``.

        Each call is independent; no transaction spans several inserts.

        Raises:
            StoreWriteError: if the store rejects the record.
        """
