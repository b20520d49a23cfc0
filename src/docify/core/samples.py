"""Illustrative request and response payloads for an entity.

Create, update and batch payloads are JSON with ``//`` line comments that
annotate each field; ``strip_json_comments`` turns them into strict JSON.
"""

from __future__ import annotations

import base64
import json
import logging
import string
from collections.abc import Mapping
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

import numpy as np

from pydantic_core import to_jsonable_python

from docify.core.errors import SampleSerializationError
from docify.core.ports.records import RecordFetcher
from docify.core.tags import json_name
from docify.models import Association, ColumnShape, DataSample, Entity, Field

logger = logging.getLogger(__name__)

AUDIT_COLUMNS = frozenset({"created_at", "updated_at", "deleted_at"})
DECIMAL_TYPES = frozenset({"decimal.Decimal"})
DECIMAL_SAMPLE = Decimal("3.14")

_ALPHANUMERIC = np.array(list(string.ascii_letters + string.digits))
_STRING_LENGTH = 25
_INTEGER_BOUND = 10_000
_TIME_ORIGIN = datetime(2000, 1, 1, tzinfo=timezone.utc)
_TIME_SPAN_SECONDS = 30 * 365 * 24 * 3600
_ZERO_TIME = "0001-01-01T00:00:00Z"


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------


def _is_decimal(field: Field) -> bool:
    return field.go_type.lstrip("*") in DECIMAL_TYPES


def zero_value(field: Field) -> Any:
    if field.pointer:
        return None
    if _is_decimal(field):
        return Decimal(0)
    match field.shape:
        case ColumnShape.INTEGER:
            return 0
        case ColumnShape.FLOAT:
            return 0.0
        case ColumnShape.STRING:
            return ""
        case ColumnShape.BOOLEAN:
            return False
        case ColumnShape.TIME:
            return _ZERO_TIME
        case ColumnShape.STRUCT:
            return {}
        case ColumnShape.SLICE | ColumnShape.OTHER:
            return None


def _relation_zero(association: Association) -> Any:
    if association.array or association.pointer:
        return None
    return {}


def fake_value(field: Field, rng: np.random.Generator) -> Any:
    """A random value shaped like *field*; pointer fields get a value too."""
    if field.enum:
        return field.enum[0]
    if _is_decimal(field):
        return DECIMAL_SAMPLE
    match field.shape:
        case ColumnShape.INTEGER:
            return int(rng.integers(0, _INTEGER_BOUND))
        case ColumnShape.FLOAT:
            return float(rng.random())
        case ColumnShape.STRING:
            return "".join(rng.choice(_ALPHANUMERIC, size=_STRING_LENGTH))
        case ColumnShape.BOOLEAN:
            return bool(rng.integers(0, 2))
        case ColumnShape.TIME:
            return _TIME_ORIGIN + timedelta(seconds=int(rng.integers(0, _TIME_SPAN_SECONDS)))
        case ColumnShape.STRUCT | ColumnShape.SLICE | ColumnShape.OTHER:
            return zero_value(field)


def _column_value(field: Field, value: Any) -> Any:
    # drivers without a native boolean type return 0/1
    if field.shape is ColumnShape.BOOLEAN and isinstance(value, int) and not isinstance(value, bool):
        return bool(value)
    return value


def build_record(entity: Entity, row: Mapping[str, Any] | None, rng: np.random.Generator) -> dict[str, Any]:
    """Column values keyed by field name, from *row* or synthesized when it is None."""
    if row is None:
        return {f.name: fake_value(f, rng) for f in entity.fields}
    return {f.name: _column_value(f, row.get(f.db_name, zero_value(f))) for f in entity.fields}


def response_document(entity: Entity, record: Mapping[str, Any]) -> dict[str, Any]:
    """The full record keyed by JSON name, relationships included, in schema order."""
    document: dict[str, Any] = {}
    columns = {f.name: f for f in entity.fields}
    relations = {a.name: a for a in entity.associations}
    if entity.resource is None:
        for f in entity.fields:
            if f.json_tag != "-":
                document[f.json_tag] = record.get(f.name)
        for a in entity.associations:
            if a.json_tag != "-":
                document[a.json_tag] = _relation_zero(a)
        return document

    for schema_field in entity.resource.fields:
        key = json_name(schema_field.tag, schema_field.name)
        if key == "-":
            continue
        if schema_field.name in columns:
            document[key] = record.get(schema_field.name)
        elif schema_field.name in relations:
            document[key] = _relation_zero(relations[schema_field.name])
        else:
            document[key] = None
    return document


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat().replace("+00:00", "Z")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray, memoryview)):
        return base64.b64encode(bytes(value)).decode("ascii")
    # UUID, time, timedelta, enums, dataclasses and the like
    return to_jsonable_python(value)


def _dumps(entity: Entity, value: Any, **kwargs: Any) -> str:
    try:
        return json.dumps(value, default=_json_default, ensure_ascii=False, **kwargs)
    except (TypeError, ValueError) as exc:
        raise SampleSerializationError(entity.id, str(exc)) from exc


def annotation(field: Field) -> str:
    parts = [field.go_type]
    if field.enum:
        parts.append("enum: " + ", ".join(field.enum))
    if field.description:
        parts.append(field.description)
    if field.nullable:
        parts.append("optional")
    if field.unique:
        parts.append("unique")
    if field.validation:
        parts.append("validation: " + field.validation)
    if field.primary_key:
        parts.append("pk")
    if field.auto_increment:
        parts.append("autoIncr.")
    return ",".join(parts).replace("\r", " ").replace("\n", " ")


def render_payload(entity: Entity, fields: list[Field], record: Mapping[str, Any]) -> str:
    """One ``"tag":value,`` row per field; each row carries the previous field's annotation."""
    text = "{"
    comment = ""
    for f in fields:
        key = _dumps(entity, f.json_tag)
        value = _dumps(entity, record.get(f.name), separators=(",", ":"))
        text += f"{comment}\n\t{key}:{value},"
        comment = " // " + annotation(f)
    return text.rstrip(",") + comment + "\n}"


def shift(text: str) -> str:
    return "\t" + "\n\t".join(text.split("\n"))


def payload_fields(entity: Entity) -> list[Field]:
    return [
        f
        for f in entity.fields
        if not f.auto_increment and f.db_name not in AUDIT_COLUMNS and f.json_tag != "-"
    ]


def render_sample(entity: Entity, record: Mapping[str, Any]) -> DataSample:
    fields = payload_fields(entity)
    create_json = render_payload(entity, fields, record)
    update_json = render_payload(entity, [f for f in fields if not f.primary_key], record)
    single_json = _dumps(entity, response_document(entity, record), indent="\t")
    return DataSample(
        create_json=create_json,
        update_json=update_json,
        batch_json="[\n" + shift(create_json) + "\n]",
        single_response_json=single_json,
        multiple_response_json="[\n" + shift(single_json) + "\n]",
    )


def synthesize_sample(entity: Entity, fetcher: RecordFetcher, rng: np.random.Generator) -> DataSample:
    """Build the five sample payloads from a persisted row or a synthesized one.

    Raises ``SampleSerializationError`` when the record cannot be serialized.
    """
    row = fetcher.fetch_one(entity)
    if row is None:
        logger.debug("No persisted %s record, synthesizing one", entity.id)
    return render_sample(entity, build_record(entity, row, rng))


def strip_json_comments(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments outside of JSON strings."""
    out: list[str] = []
    i = 0
    in_string = False
    while i < len(text):
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < len(text):
                out.append(text[i + 1])
                i += 1
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
            out.append(ch)
        elif text.startswith("//", i):
            end = text.find("\n", i)
            i = len(text) if end == -1 else end
            continue
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = len(text) if end == -1 else end + 2
            continue
        else:
            out.append(ch)
        i += 1
    return "".join(out)
