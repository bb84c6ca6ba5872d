"""Decoded YAML values as a closed set of node types.

Every value produced by the decoder is converted into one of three node
types. Scalars are stored in their canonical text form so that flattened
output does not depend on how the YAML library represents numbers.
"""

from __future__ import annotations

import math
from datetime import date
from dataclasses import dataclass
from typing import Any, Iterator, Tuple, Union


@dataclass(frozen=True, slots=True)
class ScalarNode:
    text: str
    is_string: bool = True


@dataclass(frozen=True, slots=True)
class SequenceNode:
    items: Tuple["Node", ...] = ()

    def __iter__(self) -> Iterator["Node"]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True, slots=True)
class MappingNode:
    items: Tuple[Tuple[str, "Node"], ...] = ()

    def __iter__(self) -> Iterator[Tuple[str, "Node"]]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def get(self, key: str) -> "Node | None":
        for name, value in self.items:
            if name == key:
                return value
        return None


Node = Union[MappingNode, SequenceNode, ScalarNode]


def format_scalar(value: Any) -> str:
    """Return the canonical text of a decoded scalar.

    Booleans render as ``true``/``false``, null as ``null``, integral floats
    without a fractional part and other floats in their shortest round-trip
    form. Explicit timestamps use ISO 8601 and binary data is read as UTF-8.

    Raises:
        ValueError: for any other type.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "+Inf" if value > 0 else "-Inf"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, str):
        return value
    # datetime is a subclass of date.
    if isinstance(value, date):
        return value.isoformat()
    raise ValueError(f"unsupported scalar type: {type(value).__name__}")


def _sort_key(node: Node) -> str:
    return node.text if isinstance(node, ScalarNode) else ""


def to_node(value: Any) -> Node:
    """Convert a plain decoded value into a node tree."""
    if isinstance(value, dict):
        return MappingNode(
            tuple((format_scalar(key), to_node(item)) for key, item in value.items())
        )
    if isinstance(value, (list, tuple)):
        return SequenceNode(tuple(to_node(item) for item in value))
    if isinstance(value, (set, frozenset)):
        # Sets have no order of their own.
        return SequenceNode(tuple(sorted((to_node(item) for item in value), key=_sort_key)))
    return ScalarNode(format_scalar(value), is_string=isinstance(value, str))

