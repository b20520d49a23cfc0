from functools import lru_cache
from pathlib import Path
from typing import cast

from tree_sitter import Node, Parser, Query, QueryCursor, Tree
from tree_sitter_language_pack import SupportedLanguage, get_language, get_parser

GO_LANGUAGE = "go"


@lru_cache(maxsize=None)
def _load_query(language: str, query_type: str) -> Query:
    queries_dir = Path(__file__).parent.parent / "queries"
    query_path = queries_dir / f"{language}_{query_type}.scm"
    if not query_path.exists():
        raise FileNotFoundError(f"Query file not found: {query_path}")
    query_text = query_path.read_text(encoding="utf-8")
    return Query(get_language(cast(SupportedLanguage, language)), query_text)


def go_parser() -> Parser:
    return get_parser(cast(SupportedLanguage, GO_LANGUAGE))


def parse_go(source_bytes: bytes) -> Tree:
    return go_parser().parse(source_bytes)


def node_text(node: Node, source_bytes: bytes) -> str:
    return source_bytes[node.start_byte : node.end_byte].decode("utf-8")


def query_matches(query_type: str, root: Node) -> list[dict[str, Node]]:
    """Run a Go query file against *root*; one capture dict per match, in source order."""
    cursor = QueryCursor(_load_query(GO_LANGUAGE, query_type))
    matches = []
    for _, captures in cursor.matches(root):
        matches.append({name: nodes[0] for name, nodes in captures.items() if nodes})
    return sorted(matches, key=lambda m: min(n.start_byte for n in m.values()))


def first_syntax_error(root: Node) -> Node | None:
    """Return the first ERROR or missing node under *root*, if any."""
    if not root.has_error:
        return None
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        stack.extend(reversed([c for c in node.children if c.has_error or c.is_missing]))
    return root
