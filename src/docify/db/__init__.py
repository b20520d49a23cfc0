from docify.db.engine import get_engine
from docify.db.memory import InMemoryRecordStore
from docify.db.sql import SqlRecordFetcher

__all__ = [
    "InMemoryRecordStore",
    "SqlRecordFetcher",
    "get_engine",
]
