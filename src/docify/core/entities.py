"""Two-pass construction of the entity documentation graph.

Pass 1 builds one Entity per resource in table order and indexes it by
qualified id and by table. Pass 2 resolves association and foreign-key
targets through those indices; misses stay unresolved.
"""

from __future__ import annotations

import logging

from docify.core.context import DocContext
from docify.core.errors import SampleSerializationError, StructNotFoundError, StructParseError
from docify.core.extractor import get_struct_definition
from docify.core.samples import synthesize_sample
from docify.core.tags import extract_enum_values, json_name, lookup_tag
from docify.models import (
    Association,
    ColumnShape,
    DataSample,
    Diagnostic,
    Documentation,
    Entity,
    Field,
    ForeignKey,
    ResourceDescriptor,
    SchemaField,
    StructDefinition,
)

logger = logging.getLogger(__name__)

_INTEGER_TYPES = frozenset(
    {"int", "int8", "int16", "int32", "int64", "uint", "uint8", "uint16", "uint32", "uint64", "uintptr", "byte", "rune"}
)
_FLOAT_TYPES = frozenset({"float32", "float64"})
_TIME_TYPES = frozenset({"time.Time"})
_OPAQUE_TYPES = frozenset({"interface{}", "any", "complex64", "complex128"})

_STORAGE_SHAPES = {
    "string": ColumnShape.STRING,
    "int": ColumnShape.INTEGER,
    "uint": ColumnShape.INTEGER,
    "bool": ColumnShape.BOOLEAN,
    "float": ColumnShape.FLOAT,
    "time": ColumnShape.TIME,
    "bytes": ColumnShape.SLICE,
}

_JSON_TYPES = {
    "string": "string",
    "int": "integer",
    "uint": "integer",
    "bool": "boolean",
    "float": "number",
    "time": "string",
    "bytes": "string",
}


def column_shape(field: SchemaField) -> ColumnShape:
    """Shape of a schema field after pointer indirection."""
    if field.kind is not None:
        return field.kind
    base = field.go_type.lstrip("*")
    if base.startswith("[]"):
        return ColumnShape.SLICE
    if base.startswith(("[", "map[", "chan ", "func(")) or base in _OPAQUE_TYPES:
        return ColumnShape.OTHER
    if base in _INTEGER_TYPES:
        return ColumnShape.INTEGER
    if base in _FLOAT_TYPES:
        return ColumnShape.FLOAT
    if base == "string":
        return ColumnShape.STRING
    if base == "bool":
        return ColumnShape.BOOLEAN
    if base in _TIME_TYPES:
        # without a column a time value is a plain struct relation
        return ColumnShape.TIME if field.db_name else ColumnShape.STRUCT
    if field.db_name and field.data_type in _STORAGE_SHAPES:
        return _STORAGE_SHAPES[field.data_type]
    if not base:
        return ColumnShape.OTHER
    return ColumnShape.STRUCT


def json_type(data_type: str) -> str:
    return _JSON_TYPES.get(data_type, "string")


def split_qualified_name(name: str) -> tuple[str, str]:
    pkg, _, type_name = name.rpartition(".")
    return pkg, type_name


class EntityGraphBuilder:
    def __init__(self, ctx: DocContext) -> None:
        self.ctx = ctx
        self.documentation = Documentation()
        self._by_id: dict[str, int] = {}
        self._by_table: dict[str, int] = {}

    def build(self) -> Documentation:
        self.documentation.merge_override(self.ctx.override)
        for resource in sorted(self.ctx.resources, key=lambda r: r.table):
            entity = self._build_entity(resource)
            index = len(self.documentation.entities)
            self.documentation.entities.append(entity)
            self._by_id[entity.id] = index
            self._by_table.setdefault(entity.table, index)
        self._resolve_references()
        logger.info(
            "Documented %d entities with %d diagnostics",
            len(self.documentation.entities),
            len(self.documentation.diagnostics),
        )
        return self.documentation

    # -- pass 1 ---------------------------------------------------------------

    def _diagnose(self, entity_id: str, stage: str, message: str) -> None:
        self.documentation.diagnostics.append(Diagnostic(entity_id=entity_id, stage=stage, message=message))

    def _definition(self, resource: ResourceDescriptor) -> StructDefinition:
        try:
            return get_struct_definition(self.ctx.source_root, resource.type)
        except (StructNotFoundError, StructParseError) as exc:
            logger.warning("No source definition for %s: %s", resource.name, exc)
            self._diagnose(resource.name, "definition", str(exc))
            return StructDefinition()

    def _build_entity(self, resource: ResourceDescriptor) -> Entity:
        definition = self._definition(resource)
        pkg, name = split_qualified_name(resource.name)
        entity = Entity(
            id=resource.name,
            name=name,
            description=definition.description,
            pkg=pkg,
            path=resource.type.package_path,
            table=resource.table,
            endpoints=list(resource.actions),
            definition=definition,
            resource=resource,
        )
        for schema_field in resource.fields:
            if not schema_field.db_name:
                association = self._association(schema_field)
                if association is not None:
                    entity.associations.append(association)
                continue
            entity.fields.append(self._field(schema_field))
        entity.primary_key = [f for f in entity.fields if f.primary_key]
        entity.data_sample = self._sample(entity)
        return entity

    def _association(self, schema_field: SchemaField) -> Association | None:
        shape = column_shape(schema_field)
        json_tag = json_name(schema_field.tag, schema_field.name)
        if shape is ColumnShape.STRUCT:
            return Association(
                name=schema_field.name,
                entity_name=schema_field.go_type.lstrip("*"),
                array=False,
                json_tag=json_tag,
                pointer=schema_field.pointer,
            )
        if shape is ColumnShape.SLICE:
            return Association(name=schema_field.name, array=True, json_tag=json_tag, pointer=schema_field.pointer)
        return None

    def _field(self, schema_field: SchemaField) -> Field:
        settings = schema_field.tag_settings
        field = Field(
            name=schema_field.name,
            description=schema_field.comment,
            json_tag=json_name(schema_field.tag, schema_field.name),
            json_type=json_type(schema_field.data_type),
            db_type=schema_field.data_type,
            go_type=schema_field.go_type,
            db_name=schema_field.db_name,
            validation=lookup_tag(schema_field.tag, "validation"),
            primary_key=schema_field.primary_key,
            auto_increment=schema_field.auto_increment,
            nullable=schema_field.pointer or not (schema_field.not_null or schema_field.primary_key),
            unique=schema_field.unique,
            unique_index=settings.get("UNIQUEINDEX", ""),
            default=schema_field.default_value,
            indexed="INDEX" in settings or "UNIQUEINDEX" in settings,
            index=settings.get("INDEX", ""),
            shape=column_shape(schema_field),
            pointer=schema_field.pointer,
        )
        type_setting = settings.get("TYPE", "")
        if type_setting.startswith("enum"):
            field.enum = extract_enum_values(type_setting)
            field.json_type = "string"
        if "FK" in settings:
            field.foreign_key = self._foreign_key(settings["FK"])
        return field

    def _foreign_key(self, reference: str) -> ForeignKey | None:
        table, _, column = reference.partition(".")
        schema = self.ctx.table_schema(table)
        if schema is None:
            return None
        if not column and schema.primary_keys:
            column = schema.primary_keys[0]
        return ForeignKey(table=table, field=column)

    def _sample(self, entity: Entity) -> DataSample:
        try:
            return synthesize_sample(entity, self.ctx.fetcher, self.ctx.rng)
        except SampleSerializationError as exc:
            logger.error("Sample generation failed for %s: %s", entity.id, exc)
            self._diagnose(entity.id, "sample", str(exc))
            return DataSample()

    # -- pass 2 ---------------------------------------------------------------

    def _resolve_references(self) -> None:
        entities = self.documentation.entities
        for entity in entities:
            for association in entity.associations:
                if association.entity_name and association.entity_name in self._by_id:
                    association.entity = entities[self._by_id[association.entity_name]]
            for field in entity.fields:
                fk = field.foreign_key
                if fk is not None and fk.table in self._by_table:
                    fk.entity = entities[self._by_table[fk.table]]


def build_documentation(ctx: DocContext) -> Documentation:
    return EntityGraphBuilder(ctx).build()
