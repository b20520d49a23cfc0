import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import Engine, literal_column, select, table
from sqlalchemy.exc import SQLAlchemyError

from docify.models import Entity

logger = logging.getLogger(__name__)


class SqlRecordFetcher:
    """Fetch the first row of an entity's table through a SQLAlchemy engine.

    A failing query is logged and treated as "no persisted record".
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def fetch_one(self, entity: Entity) -> Mapping[str, Any] | None:
        if not entity.table:
            return None
        stmt = select(literal_column("*")).select_from(table(entity.table)).limit(1)
        try:
            with self._engine.connect() as conn:
                row = conn.execute(stmt).mappings().first()
        except SQLAlchemyError as exc:
            logger.warning("Cannot fetch a sample row from %s: %s", entity.table, exc)
            return None
        return dict(row) if row is not None else None

    def dispose(self) -> None:
        self._engine.dispose()
