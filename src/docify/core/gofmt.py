"""A small, deterministic gofmt-style printer for struct declarations.

Only the shapes the struct extractor emits are supported: top-level comments
and single ``type Name struct {...}`` declarations. Field rows are aligned
the way ``text/tabwriter`` does it for gofmt: a column is padded across each
run of consecutive rows that have a terminated cell in that column, and
blank or comment-only rows end the run.
"""

from tree_sitter import Node

from docify.core.ast import first_syntax_error, node_text, parse_go
from docify.core.errors import SourceFormatError

_PADDING = 1


def tabwrite(rows: list[list[str]], padding: int = _PADDING) -> list[str]:
    """Align cell rows; the last cell of each row is never padded."""
    widths = [[0] * max(len(row) - 1, 0) for row in rows]
    column = 0
    while True:
        active = False
        start: int | None = None
        for i in range(len(rows) + 1):
            terminated = i < len(rows) and len(rows[i]) - 1 > column
            if terminated:
                active = True
                if start is None:
                    start = i
            elif start is not None:
                width = max(len(rows[k][column]) for k in range(start, i)) + padding
                for k in range(start, i):
                    widths[k][column] = width
                start = None
        if not active:
            break
        column += 1

    lines = []
    for row, row_widths in zip(rows, widths):
        if not row:
            lines.append("")
            continue
        padded = "".join(cell.ljust(width) for cell, width in zip(row, row_widths))
        lines.append(padded + row[-1])
    return lines


def _squash(text: str) -> str:
    return " ".join(text.split())


def _field_cells(field: Node, source: bytes) -> list[str]:
    names = [node_text(n, source) for n in field.children_by_field_name("name")]
    type_node = field.child_by_field_name("type")
    tag_node = field.child_by_field_name("tag")
    if type_node is None:
        raise SourceFormatError(f"field without type at line {field.start_point[0] + 1}")

    if names:
        cells = [", ".join(names), _squash(node_text(type_node, source))]
    else:
        # embedded field, possibly behind a pointer
        embedded = source[field.start_byte : type_node.end_byte].decode("utf-8")
        cells = ["".join(embedded.split())]
    if tag_node is not None:
        cells.append(node_text(tag_node, source))
    return cells


def _format_struct(header: str, struct: Node, source: bytes) -> list[str]:
    body = next((c for c in struct.named_children if c.type == "field_declaration_list"), None)
    items = body.named_children if body is not None else []
    if not items:
        return [header + "{}"]

    rows: list[list[str]] = []
    prev_row = struct.start_point[0]
    last_field_row = -1
    for item in items:
        row = item.start_point[0]
        if item.type == "comment" and row == last_field_row and rows:
            rows[-1].append(node_text(item, source).rstrip())
            continue
        if row - prev_row > 1 and rows and rows[-1]:
            rows.append([])
        if item.type == "comment":
            rows.append([node_text(item, source).rstrip()])
        elif item.type == "field_declaration":
            rows.append(_field_cells(item, source))
            last_field_row = item.end_point[0]
        else:
            raise SourceFormatError(f"unsupported struct member: {item.type}")
        prev_row = item.end_point[0]

    lines = [header + " {"]
    lines.extend(("\t" + line) if line else "" for line in tabwrite(rows))
    lines.append("}")
    return lines


def _format_type_declaration(decl: Node, source: bytes) -> list[str]:
    specs = [c for c in decl.named_children if c.type != "comment"]
    if len(specs) != 1 or len(decl.named_children) != 1 or specs[0].type != "type_spec":
        raise SourceFormatError(f"unsupported type declaration at line {decl.start_point[0] + 1}")
    spec = specs[0]
    name = spec.child_by_field_name("name")
    struct = spec.child_by_field_name("type")
    if name is None or struct is None or struct.type != "struct_type":
        raise SourceFormatError(f"not a struct declaration at line {decl.start_point[0] + 1}")
    params = spec.child_by_field_name("type_parameters")
    header = "type " + node_text(name, source)
    if params is not None:
        header += _squash(node_text(params, source))
    return _format_struct(header + " struct", struct, source)


def format_source(text: str) -> str:
    """Reformat extractor-assembled Go source.

    Raises ``SourceFormatError`` on syntax errors or declarations the printer
    does not handle.
    """
    source = text.encode("utf-8")
    root = parse_go(source).root_node
    error = first_syntax_error(root)
    if error is not None:
        raise SourceFormatError(f"syntax error at line {error.start_point[0] + 1}")

    lines: list[str] = []
    prev_row: int | None = None
    for node in root.named_children:
        if prev_row is not None and node.start_point[0] - prev_row > 1:
            lines.append("")
        if node.type == "comment":
            lines.append(node_text(node, source).rstrip())
        elif node.type == "type_declaration":
            lines.extend(_format_type_declaration(node, source))
        else:
            raise SourceFormatError(f"unsupported top-level node: {node.type}")
        prev_row = node.end_point[0]
    return "\n".join(lines) + "\n"
