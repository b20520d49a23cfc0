from collections.abc import Mapping
from typing import Any

from docify.models import Entity


class InMemoryRecordStore:
    """Rows per table, kept in insertion order."""

    def __init__(self, rows: Mapping[str, list[dict[str, Any]]] | None = None) -> None:
        self.rows: dict[str, list[dict[str, Any]]] = {table: list(r) for table, r in (rows or {}).items()}

    def insert(self, table: str, row: dict[str, Any]) -> None:
        self.rows.setdefault(table, []).append(row)

    def fetch_one(self, entity: Entity) -> Mapping[str, Any] | None:
        rows = self.rows.get(entity.table)
        if not rows:
            return None
        return rows[0]
