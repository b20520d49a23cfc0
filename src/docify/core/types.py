"""Canonical type signatures for Go type expressions."""

from tree_sitter import Node

from docify.core.ast import node_text

UNKNOWN_TYPE = "unknown"


def _named(node: Node) -> list[Node]:
    return [c for c in node.named_children if c.type != "comment"]


def _type_arguments(node: Node, source: bytes) -> list[str]:
    params: list[str] = []
    for arg in _named(node):
        if arg.type == "type_elem":
            # a type_elem may hold a union such as ``int | float64``
            params.append(" | ".join(resolve_type(t, source) for t in _named(arg)))
        else:
            params.append(resolve_type(arg, source))
    return params


def resolve_type(node: Node | None, source: bytes) -> str:
    """Return the canonical signature of a type node; unsupported shapes yield ``unknown``."""
    if node is None:
        return UNKNOWN_TYPE

    kind = node.type
    if kind == "type_identifier":
        return node_text(node, source)
    if kind == "pointer_type":
        inner = _named(node)
        return "*" + resolve_type(inner[0] if inner else None, source)
    if kind == "array_type":
        length = node.child_by_field_name("length")
        size = node_text(length, source).strip() if length is not None else ""
        return f"[{size}]" + resolve_type(node.child_by_field_name("element"), source)
    if kind == "slice_type":
        return "[]" + resolve_type(node.child_by_field_name("element"), source)
    if kind == "map_type":
        key = resolve_type(node.child_by_field_name("key"), source)
        value = resolve_type(node.child_by_field_name("value"), source)
        return f"map[{key}]{value}"
    if kind == "qualified_type":
        package = node.child_by_field_name("package")
        name = node.child_by_field_name("name")
        if package is None or name is None:
            return UNKNOWN_TYPE
        return node_text(package, source) + "." + node_text(name, source)
    if kind == "interface_type":
        return "interface{}"
    if kind == "struct_type":
        return "struct{...}"
    if kind == "generic_type":
        base = resolve_type(node.child_by_field_name("type"), source)
        arguments = node.child_by_field_name("type_arguments")
        if arguments is None:
            return base
        return f"{base}[{', '.join(_type_arguments(arguments, source))}]"
    if kind == "parenthesized_type":
        inner = _named(node)
        return resolve_type(inner[0] if inner else None, source)
    return UNKNOWN_TYPE
