from docify.core.context import DocContext
from docify.core.entities import EntityGraphBuilder, build_documentation
from docify.core.errors import (
    DocifyError,
    SampleSerializationError,
    SourceFormatError,
    StructNotFoundError,
    StructParseError,
)
from docify.core.extractor import extract_struct, get_struct_definition
from docify.core.samples import strip_json_comments, synthesize_sample
from docify.models import (
    Documentation,
    DocOverride,
    Entity,
    ResourceDescriptor,
    SchemaField,
    TableSchema,
    TypeIdentity,
)

__all__ = [
    "DocContext",
    "DocOverride",
    "DocifyError",
    "Documentation",
    "Entity",
    "EntityGraphBuilder",
    "ResourceDescriptor",
    "SampleSerializationError",
    "SchemaField",
    "SourceFormatError",
    "StructNotFoundError",
    "StructParseError",
    "TableSchema",
    "TypeIdentity",
    "build_documentation",
    "extract_struct",
    "get_struct_definition",
    "strip_json_comments",
    "synthesize_sample",
]
