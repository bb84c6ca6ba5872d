"""Flattening of decoded mappings into identifier paths and value entries."""

from __future__ import annotations

from collections import deque
from typing import Deque, List, Set, Tuple

from kustsearch.parsing.nodes import MappingNode, Node, ScalarNode, SequenceNode

SEPARATOR = ":"


def join_identifier(prefix: str, key: str) -> str:
    # Identifiers never start with the separator, even for keys that do.
    return f"{prefix}{SEPARATOR}{key}".lstrip(SEPARATOR)


def flatten(mapping: MappingNode, identifiers: Set[str], values: Set[str]) -> None:
    """Add every field path of ``mapping`` to ``identifiers`` and every
    ``path=value`` pair to ``values``.

    Nested mappings are expanded breadth first. Sequences do not extend the
    path, so the elements of ``a: [{b: 1}, {b: 2}]`` all land under ``a:b``.
    The sets may already hold entries from other mappings of the same file.
    """
    pending: Deque[Tuple[MappingNode, str]] = deque([(mapping, "")])

    def visit(node: Node, identifier: str) -> None:
        stack: List[Node] = [node]
        while stack:
            match stack.pop():
                case MappingNode() as child:
                    pending.append((child, identifier))
                case SequenceNode(items=items):
                    stack.extend(reversed(items))
                case ScalarNode(text=text):
                    values.add(f"{identifier}={text}")

    while pending:
        current, prefix = pending.popleft()
        for key, value in current:
            identifier = join_identifier(prefix, key)
            identifiers.add(identifier)
            visit(value, identifier)
