"""JSON serialization/deserialization for the GoMix AST.

This module converts between GoMix AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. Every node becomes a dict
with a ``type`` key naming its class plus one key per dataclass field,
including the ``line``/``column`` position, so a parsed program can be
written out with ``--emit-ast`` and executed later with ``--ast``.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Dict, Type

from . import ast as gomix_ast

NODE_TYPES: Dict[str, Type[gomix_ast.Node]] = {
    name: cls for name, cls in vars(gomix_ast).items()
    if isinstance(cls, type) and issubclass(cls, gomix_ast.Node) and cls is not gomix_ast.Node
}

# fields holding lists of pairs, stored as tuples on the node
PAIR_FIELDS = {('MapLit', 'entries'), ('EnumDecl', 'members')}


def ast_to_obj(node: Any) -> Any:
    if node is None or isinstance(node, (bool, int, float, str)):
        return node
    if isinstance(node, (list, tuple)):
        return [ast_to_obj(n) for n in node]
    if isinstance(node, gomix_ast.Node):
        obj: Dict[str, Any] = {"type": type(node).__name__}
        for f in dataclasses.fields(node):
            obj[f.name] = ast_to_obj(getattr(node, f.name))
        return obj
    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, list):
        return [ast_from_obj(o) for o in obj]
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    cls = NODE_TYPES.get(t)
    if cls is None:
        raise ValueError(f"Unknown AST node type: {t}")
    kwargs: Dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        if f.name not in obj:
            continue
        value = ast_from_obj(obj[f.name])
        if (t, f.name) in PAIR_FIELDS:
            value = [tuple(pair) for pair in value]
        kwargs[f.name] = value
    return cls(**kwargs)
