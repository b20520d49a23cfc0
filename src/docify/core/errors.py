from pathlib import Path


class DocifyError(Exception):
    """Base class for documentation pipeline errors."""


class StructNotFoundError(DocifyError, LookupError):
    def __init__(self, name: str, package_dir: Path) -> None:
        super().__init__(f"struct definition not found: {name} in {package_dir}")
        self.name = name
        self.package_dir = package_dir


class StructParseError(DocifyError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"cannot parse {path}: {reason}")
        self.path = path
        self.reason = reason


class SourceFormatError(DocifyError):
    """Raised when assembled source text cannot be reformatted."""


class SampleSerializationError(DocifyError):
    def __init__(self, entity_id: str, reason: str) -> None:
        super().__init__(f"cannot serialize sample data for {entity_id}: {reason}")
        self.entity_id = entity_id
