import os
from pathlib import Path

DEFAULT_SOURCE_ROOT = ".."


def get_source_root() -> Path:
    """Directory under which Go package import paths are resolved."""
    return Path(os.getenv("DOCIFY_SOURCE_ROOT", DEFAULT_SOURCE_ROOT))
