"""Locate a Go struct declaration in a package tree and rebuild it canonically."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from tree_sitter import Node

from docify.core.ast import first_syntax_error, node_text, parse_go, query_matches
from docify.core.errors import SourceFormatError, StructNotFoundError, StructParseError
from docify.core.gofmt import format_source
from docify.core.types import resolve_type
from docify.models import FieldDefinition, StructDefinition, TypeIdentity

logger = logging.getLogger(__name__)

_GO_SUFFIX = ".go"


@dataclass
class CommentMap:
    """Comments keyed by the 0-based line they describe."""

    leading: dict[int, str] = field(default_factory=dict)
    trailing: dict[int, str] = field(default_factory=dict)

    def lookup(self, row: int) -> str:
        return self.leading.get(row) or self.trailing.get(row, "")


def comment_text(raw: str) -> str:
    text = raw.strip()
    if text.startswith("//"):
        return text[2:].strip()
    if text.startswith("/*") and text.endswith("*/"):
        return text[2:-2].strip()
    return text


def _is_standalone(node: Node, source: bytes) -> bool:
    line_start = source.rfind(b"\n", 0, node.start_byte) + 1
    return not source[line_start : node.start_byte].strip()


def build_comment_map(comments: list[Node], source: bytes) -> CommentMap:
    """Attach each standalone comment to the line right after it.

    Consecutive standalone comments merge into one multi-line comment. A
    comment trailing code on the same line is kept for that line.
    """
    result = CommentMap()
    for node in comments:
        text = comment_text(node_text(node, source))
        start_row, end_row = node.start_point[0], node.end_point[0]
        if not _is_standalone(node, source):
            result.trailing.setdefault(start_row, text)
            continue
        previous = result.leading.pop(start_row, None)
        if previous is not None:
            text = previous + "\n" + text
        result.leading[end_row + 1] = text
    return result


def go_source_files(package_dir: Path) -> list[Path]:
    """All Go files under *package_dir*, in lexical path order."""
    files = [p for p in package_dir.rglob(f"*{_GO_SUFFIX}") if p.is_file()]
    return sorted(files, key=lambda p: p.relative_to(package_dir).parts)


def _comment_lines(text: str) -> list[str]:
    return ["// " + line if line else "//" for line in text.split("\n")]


def assemble_struct_source(name: str, description: str, fields: list[FieldDefinition]) -> str:
    """Canonical, not yet formatted, source text for a struct declaration."""
    lines: list[str] = []
    if description:
        lines.extend(_comment_lines(description))
    lines.append(f"type {name} struct {{")
    for i, fd in enumerate(fields):
        if fd.description:
            if i > 0:
                lines.append("")
            lines.extend("    " + line for line in _comment_lines(fd.description))
        row = f"    {fd.name} {fd.type}" if fd.name else f"    {fd.type}"
        if fd.tag:
            row += f" `{fd.tag}`"
        lines.append(row)
    lines.append("}")
    return "\n".join(lines) + "\n"


def _tag_value(node: Node, source: bytes) -> str:
    raw = node_text(node, source)
    if raw.startswith("`"):
        return raw.strip("`")
    # interpreted string literal
    return raw[1:-1].replace('\\"', '"').replace("\\\\", "\\")


def _field_definitions(struct: Node, source: bytes, comments: CommentMap) -> list[FieldDefinition]:
    body = next((c for c in struct.named_children if c.type == "field_declaration_list"), None)
    if body is None:
        return []
    fields: list[FieldDefinition] = []
    for decl in body.named_children:
        if decl.type != "field_declaration":
            continue
        names = [node_text(n, source) for n in decl.children_by_field_name("name")]
        type_str = resolve_type(decl.child_by_field_name("type"), source)
        if not names and any(c.type == "*" for c in decl.children):
            type_str = "*" + type_str
        tag_node = decl.child_by_field_name("tag")
        fields.append(
            FieldDefinition(
                name=", ".join(names),
                type=type_str,
                tag=_tag_value(tag_node, source) if tag_node is not None else "",
                description=comments.lookup(decl.start_point[0]),
            )
        )
    return fields


def _is_top_level(spec: Node) -> bool:
    decl = spec.parent
    if decl is None or decl.type != "type_declaration":
        return False
    return decl.parent is not None and decl.parent.type == "source_file"


def _doc_row(spec: Node) -> int:
    decl = spec.parent
    if decl is None:
        return spec.start_point[0]
    grouped = any(c.type == "(" for c in decl.children)
    return spec.start_point[0] if grouped else decl.start_point[0]


def _parse_file(path: Path) -> tuple[bytes, Node]:
    try:
        source = path.read_bytes()
        source.decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise StructParseError(path, str(exc)) from exc
    root = parse_go(source).root_node
    error = first_syntax_error(root)
    if error is not None:
        raise StructParseError(path, f"syntax error at line {error.start_point[0] + 1}")
    return source, root


def _definition_from_spec(
    path: Path, spec: Node, struct: Node, source: bytes, comments: CommentMap, name: str
) -> StructDefinition:
    description = comments.leading.get(_doc_row(spec), "")
    fields = _field_definitions(struct, source, comments)
    text = assemble_struct_source(name, description, fields)
    try:
        body = format_source(text)
    except SourceFormatError as exc:
        logger.debug("Keeping unformatted source for %s: %s", name, exc)
        body = text
    return StructDefinition(file=str(path), description=description, body=body, fields=tuple(fields))


def extract_struct(package_dir: Path, name: str) -> StructDefinition:
    """Find struct *name* under *package_dir*.

    Files are scanned in lexical order and scanning stops at the first match.
    Raises ``StructParseError`` for an unreadable or malformed file and
    ``StructNotFoundError`` when no file declares the struct.
    """
    if not package_dir.is_dir():
        raise StructNotFoundError(name, package_dir)

    for path in go_source_files(package_dir):
        source, root = _parse_file(path)
        matches = query_matches("structs", root)
        for match in matches:
            spec = match.get("struct.spec")
            if spec is None or node_text(match["struct.name"], source) != name or not _is_top_level(spec):
                continue
            comments = build_comment_map([m["comment"] for m in matches if "comment" in m], source)
            logger.debug("Found struct %s in %s", name, path)
            return _definition_from_spec(path, spec, match["struct.body"], source, comments, name)
    raise StructNotFoundError(name, package_dir)


def get_struct_definition(source_root: Path, identity: TypeIdentity) -> StructDefinition:
    return extract_struct(source_root / identity.package_path, identity.name)
