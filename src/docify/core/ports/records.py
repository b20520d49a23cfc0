from collections.abc import Mapping
from typing import Any, Protocol

from docify.models import Entity


class RecordFetcher(Protocol):
    def fetch_one(self, entity: Entity) -> Mapping[str, Any] | None:
        """Return one persisted row of the entity's table keyed by column name, or None."""
        ...
