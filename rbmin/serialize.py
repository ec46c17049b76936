"""Tree documents: JSON-compatible dicts ↔ syntax nodes.

A node is an object tagged with "_type" whose other keys are the node's
field names. null means an absent child; {"_type": "Nil"} is the no-value
sentinel. A document is either a single node or {"_type": "Program",
"body": <node>}. Unknown tags load as UnknownNode so the renderer can report
them by name.
"""

from __future__ import annotations

import json
from dataclasses import fields as dc_fields, MISSING

from .ast import (
    NODE_TYPES,
    BooleanLiteral,
    Case,
    HashLit,
    IntegerLit,
    Node,
    Pos,
    StringLit,
    SymbolLit,
    UnknownNode,
)


class TreeError(Exception):
    """Malformed tree document. path locates the offending value."""

    def __init__(self, msg: str, path: str):
        self.msg: str = msg
        self.path: str = path
        super().__init__(path + ": " + msg)


_NAME_LIST_FIELDS = frozenset(
    ("block_params", "required_params", "name_path", "superclass_path", "path")
)

_NODE_LIST_FIELDS = frozenset(
    ("args", "statements", "clauses", "whens", "elements", "keys", "values", "parts")
)

_OPTIONAL_FIELDS = frozenset(
    (
        "receiver",
        "block_body",
        "block_forward",
        "else_branch",
        "else_clause",
        "base",
        "superclass_path",
    )
)

_NAME_FIELDS = frozenset(("method_name", "name"))

_VALUE_TYPES: dict[type, type] = {
    BooleanLiteral: bool,
    IntegerLit: int,
    StringLit: str,
    SymbolLit: str,
}


# ============================================================
# LOADING
# ============================================================


def loads(text: str) -> Node:
    """Parse a JSON tree document."""
    try:
        data = json.loads(text)
    except ValueError as e:
        raise TreeError("invalid JSON: " + str(e), "") from e
    return from_dict(data)


def from_dict(data: object) -> Node:
    """Convert a tree document to its root node."""
    if isinstance(data, dict) and data.get("_type") == "Program":
        if "body" not in data:
            raise TreeError("Program without body", "")
        return _node(data["body"], "/body")
    return _node(data, "")


def _node(data: object, path: str) -> Node:
    if not isinstance(data, dict):
        raise TreeError("expected a node object", path)
    tag = data.get("_type")
    if not isinstance(tag, str):
        raise TreeError("node without _type", path)
    pos = _pos(data.get("pos"), path + "/pos")
    cls = NODE_TYPES.get(tag)
    if cls is None:
        raw = {k: v for k, v in data.items() if k not in ("_type", "pos")}
        return UnknownNode(tag, raw, pos=pos)
    kwargs: dict[str, object] = {}
    known: set[str] = {"_type", "pos"}
    for f in dc_fields(cls):
        if f.name == "pos":
            continue
        known.add(f.name)
        fpath = path + "/" + f.name
        if f.name not in data:
            if f.default is MISSING and f.default_factory is MISSING:
                raise TreeError("missing field '" + f.name + "'", path)
            continue
        kwargs[f.name] = _field(cls, f.name, data[f.name], fpath)
    for key in data:
        if key not in known:
            raise TreeError("unexpected field '" + key + "' on " + tag, path)
    node = cls(**kwargs, pos=pos)
    _check_shape(node, path)
    return node


def _pos(data: object, path: str) -> Pos | None:
    if data is None:
        return None
    if not isinstance(data, dict):
        raise TreeError("expected a position object", path)
    line = data.get("line")
    col = data.get("col")
    if not isinstance(line, int) or not isinstance(col, int):
        raise TreeError("position needs integer line and col", path)
    return Pos(line, col)


def _field(cls: type, name: str, value: object, path: str) -> object:
    if value is None:
        if name in _OPTIONAL_FIELDS:
            return None
        raise TreeError("field may not be null", path)
    if name in _NAME_LIST_FIELDS:
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise TreeError("expected a list of names", path)
        return list(value)
    if name in _NODE_LIST_FIELDS:
        if not isinstance(value, list):
            raise TreeError("expected a list of nodes", path)
        return [_node(v, path + "/" + str(i)) for i, v in enumerate(value)]
    if name in _NAME_FIELDS:
        if not isinstance(value, str):
            raise TreeError("expected a name", path)
        return value
    if name == "value":
        want = _VALUE_TYPES[cls]
        # bool is an int subclass; an integer literal must not accept true.
        if not isinstance(value, want) or (want is int and isinstance(value, bool)):
            raise TreeError("expected a " + want.__name__ + " value", path)
        return value
    return _node(value, path)


def _check_shape(node: Node, path: str) -> None:
    if isinstance(node, HashLit) and len(node.keys) != len(node.values):
        raise TreeError("hash keys and values differ in length", path)
    if isinstance(node, Case) and len(node.clauses) != len(node.whens):
        raise TreeError("case clauses and whens differ in length", path)


# ============================================================
# DUMPING
# ============================================================


def to_dict(node: Node | None) -> object:
    """Convert a node back to its tree document form."""
    if node is None:
        return None
    if isinstance(node, UnknownNode):
        out: dict[str, object] = {"_type": node.kind}
        out.update(node.fields)
    else:
        out = {"_type": type(node).__name__}
        for f in dc_fields(node):
            if f.name == "pos":
                continue
            out[f.name] = _dump_value(getattr(node, f.name))
    if node.pos is not None:
        out["pos"] = {"line": node.pos.line, "col": node.pos.col}
    return out


def _dump_value(value: object) -> object:
    if isinstance(value, Node):
        return to_dict(value)
    if isinstance(value, list):
        return [_dump_value(v) for v in value]
    return value


def dumps(node: Node) -> str:
    """Serialize a tree as a Program document."""
    return json.dumps({"_type": "Program", "body": to_dict(node)}, indent=2)
