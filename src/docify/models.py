from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic import Field as ModelField

from docify.core.tags import lookup_tag, parse_tag_settings


class ColumnShape(str, Enum):
    """Coarse kind of a schema field, computed once per field."""

    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    BOOLEAN = "boolean"
    TIME = "time"
    STRUCT = "struct"
    SLICE = "slice"
    OTHER = "other"


# ---------------------------------------------------------------------------
# Collaborator-supplied descriptors
# ---------------------------------------------------------------------------


class TypeIdentity(BaseModel):
    model_config = ConfigDict(frozen=True)

    package_path: str
    name: str


class SchemaField(BaseModel):
    name: str
    db_name: str = ""
    go_type: str = ""
    data_type: str = ""
    kind: ColumnShape | None = None
    tag: str = ""
    tag_settings: dict[str, str] = ModelField(default_factory=dict)
    primary_key: bool = False
    auto_increment: bool = False
    not_null: bool = False
    unique: bool = False
    default_value: str = ""
    comment: str = ""

    @model_validator(mode="after")
    def _derive_tag_settings(self) -> SchemaField:
        if not self.tag_settings and self.tag:
            self.tag_settings = parse_tag_settings(lookup_tag(self.tag, "gorm"))
        return self

    @property
    def pointer(self) -> bool:
        return self.go_type.startswith("*")


class TableSchema(BaseModel):
    table: str
    primary_keys: list[str] = ModelField(default_factory=list)


class Action(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = ""
    method: str = ""
    absolute_uri: str = ""
    description: str = ""
    accept_data: bool = False


class ResourceDescriptor(BaseModel):
    name: str
    table: str
    type: TypeIdentity
    fields: list[SchemaField] = ModelField(default_factory=list)
    primary_keys: list[str] = ModelField(default_factory=list)
    actions: list[Action] = ModelField(default_factory=list)

    @model_validator(mode="after")
    def _derive_primary_keys(self) -> ResourceDescriptor:
        if not self.primary_keys:
            self.primary_keys = [f.db_name for f in self.fields if f.primary_key and f.db_name]
        return self

    def table_schema(self) -> TableSchema:
        return TableSchema(table=self.table, primary_keys=list(self.primary_keys))


class DocOverride(BaseModel):
    title: str = ""
    description: str = ""


# ---------------------------------------------------------------------------
# Documentation graph
# ---------------------------------------------------------------------------


class FieldDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: str
    tag: str = ""
    description: str = ""


class StructDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    file: str = ""
    description: str = ""
    body: str = ""
    fields: tuple[FieldDefinition, ...] = ()


class ForeignKey(BaseModel):
    table: str
    field: str = ""
    entity: Entity | None = ModelField(default=None, exclude=True, repr=False)


class Field(BaseModel):
    name: str
    description: str = ""
    json_tag: str = ""
    json_type: str = "string"
    db_type: str = ""
    go_type: str = ""
    db_name: str = ""
    validation: str = ""
    primary_key: bool = False
    auto_increment: bool = False
    nullable: bool = False
    unique: bool = False
    unique_index: str = ""
    default: str = ""
    enum: list[str] = ModelField(default_factory=list)
    indexed: bool = False
    index: str = ""
    foreign_key: ForeignKey | None = None
    shape: ColumnShape = ColumnShape.OTHER
    pointer: bool = False


class Association(BaseModel):
    name: str
    entity_name: str = ""
    entity: Entity | None = ModelField(default=None, exclude=True, repr=False)
    array: bool = False
    json_tag: str = ""
    pointer: bool = False


class DataSample(BaseModel):
    model_config = ConfigDict(frozen=True)

    create_json: str = ""
    update_json: str = ""
    batch_json: str = ""
    single_response_json: str = ""
    multiple_response_json: str = ""


class Entity(BaseModel):
    id: str
    name: str
    description: str = ""
    pkg: str = ""
    path: str = ""
    table: str = ""
    fields: list[Field] = ModelField(default_factory=list)
    associations: list[Association] = ModelField(default_factory=list)
    primary_key: list[Field] = ModelField(default_factory=list)
    endpoints: list[Action] = ModelField(default_factory=list)
    definition: StructDefinition = ModelField(default_factory=StructDefinition)
    data_sample: DataSample = ModelField(default_factory=DataSample)
    resource: ResourceDescriptor | None = ModelField(default=None, exclude=True, repr=False)

    def field(self, name: str) -> Field | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def association(self, name: str) -> Association | None:
        for a in self.associations:
            if a.name == name:
                return a
        return None


class Diagnostic(BaseModel):
    entity_id: str
    stage: str
    message: str


class Documentation(BaseModel):
    title: str = ""
    description: str = ""
    entities: list[Entity] = ModelField(default_factory=list)
    diagnostics: list[Diagnostic] = ModelField(default_factory=list)

    def entity(self, entity_id: str) -> Entity | None:
        for e in self.entities:
            if e.id == entity_id:
                return e
        return None

    def merge_override(self, override: DocOverride | dict[str, Any] | None) -> None:
        if override is None:
            return
        if isinstance(override, dict):
            override = DocOverride.model_validate(override)
        if override.title:
            self.title = override.title
        if override.description:
            self.description = override.description


# necessary for the forward references to Entity
ForeignKey.model_rebuild()
Association.model_rebuild()
