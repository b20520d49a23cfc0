from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from docify.config import get_source_root
from docify.core.ports.records import RecordFetcher
from docify.db.memory import InMemoryRecordStore
from docify.models import DocOverride, ResourceDescriptor, TableSchema


@dataclass
class DocContext:
    """Everything one documentation run needs; built per run and then discarded."""

    resources: Sequence[ResourceDescriptor]
    source_root: Path = field(default_factory=get_source_root)
    fetcher: RecordFetcher = field(default_factory=InMemoryRecordStore)
    tables: dict[str, TableSchema] = field(default_factory=dict)
    rng: np.random.Generator = field(default_factory=np.random.default_rng)
    override: DocOverride | None = None

    @classmethod
    def create(
        cls,
        resources: Iterable[ResourceDescriptor],
        *,
        source_root: Path | None = None,
        fetcher: RecordFetcher | None = None,
        tables: Iterable[TableSchema] = (),
        rng: np.random.Generator | None = None,
        override: DocOverride | None = None,
    ) -> DocContext:
        return cls(
            resources=list(resources),
            source_root=source_root if source_root is not None else get_source_root(),
            fetcher=fetcher if fetcher is not None else InMemoryRecordStore(),
            tables={t.table: t for t in tables},
            rng=rng if rng is not None else np.random.default_rng(),
            override=override,
        )

    def table_schema(self, table: str) -> TableSchema | None:
        """Schema of *table*: resources first, then the extra table schemas."""
        for resource in self.resources:
            if resource.table == table:
                return resource.table_schema()
        return self.tables.get(table)
