"""Tests for loading and dumping tree documents."""

import json

import pytest

import rbmin
from rbmin.ast import (
    BooleanLiteral,
    Call,
    Case,
    HashLit,
    IntegerLit,
    LocalVarRead,
    Nil,
    Pos,
    StatementBlock,
    UnknownNode,
)
from rbmin.serialize import TreeError, dumps, from_dict, loads, to_dict


def test_program_document():
    doc = {
        "_type": "Program",
        "body": {
            "_type": "StatementBlock",
            "statements": [{"_type": "IntegerLit", "value": 1}],
        },
    }
    assert from_dict(doc) == StatementBlock([IntegerLit(1)])


def test_bare_node_document():
    assert from_dict({"_type": "LocalVarRead", "name": "x"}) == LocalVarRead("x")


def test_defaults_fill_optional_fields():
    node = from_dict({"_type": "Call", "receiver": None, "method_name": "puts"})
    assert node == Call(None, "puts")
    assert node.args == []
    assert node.block_body is None


def test_nil_sentinel_differs_from_null():
    node = from_dict(
        {
            "_type": "Call",
            "receiver": None,
            "method_name": "tap",
            "block_body": {"_type": "Nil"},
        }
    )
    assert isinstance(node.block_body, Nil)
    assert node.block_forward is None


def test_positions():
    node = from_dict({"_type": "SelfRef", "pos": {"line": 4, "col": 2}})
    assert node.pos == Pos(4, 2)


def test_unknown_kind_is_kept():
    node = from_dict({"_type": "WhileNode", "cond": {"_type": "SelfRef"}})
    assert isinstance(node, UnknownNode)
    assert node.kind == "WhileNode"
    assert node.fields == {"cond": {"_type": "SelfRef"}}


def test_loads_json_text():
    text = json.dumps({"_type": "BooleanLiteral", "value": True})
    assert loads(text) == BooleanLiteral(True)


def test_round_trip():
    node = StatementBlock(
        [
            Case(
                LocalVarRead("x", pos=Pos(1, 6)),
                [StatementBlock([IntegerLit(1)])],
                [IntegerLit(2)],
                None,
            ),
            HashLit([IntegerLit(1)], [Nil()]),
        ]
    )
    assert loads(dumps(node)) == node
    assert from_dict(to_dict(node)) == node


# ============================================================
# malformed documents
# ============================================================


def test_invalid_json():
    with pytest.raises(TreeError):
        loads("{not json")


def test_missing_type():
    with pytest.raises(TreeError) as exc:
        from_dict({"name": "x"})
    assert exc.value.path == ""


def test_missing_required_field():
    with pytest.raises(TreeError) as exc:
        from_dict({"_type": "LocalVarWrite", "name": "x"})
    assert "rhs" in exc.value.msg


def test_unexpected_field():
    with pytest.raises(TreeError):
        from_dict({"_type": "SelfRef", "name": "self"})


def test_null_required_child():
    with pytest.raises(TreeError) as exc:
        from_dict({"_type": "Return", "argument": None})
    assert exc.value.path == "/argument"


def test_error_path_points_into_lists():
    doc = {
        "_type": "ArrayLit",
        "elements": [{"_type": "IntegerLit", "value": 1}, {"_type": "IntegerLit"}],
    }
    with pytest.raises(TreeError) as exc:
        from_dict(doc)
    assert exc.value.path == "/elements/1"


def test_value_types_are_checked():
    with pytest.raises(TreeError):
        from_dict({"_type": "IntegerLit", "value": "1"})
    with pytest.raises(TreeError):
        from_dict({"_type": "IntegerLit", "value": True})
    with pytest.raises(TreeError):
        from_dict({"_type": "BooleanLiteral", "value": 1})


def test_name_lists_are_checked():
    doc = {
        "_type": "Definition",
        "method_name": "f",
        "required_params": [{"_type": "LocalVarRead", "name": "a"}],
        "body": {"_type": "Nil"},
    }
    with pytest.raises(TreeError):
        from_dict(doc)


def test_hash_lengths_must_match():
    doc = {
        "_type": "HashLit",
        "keys": [{"_type": "IntegerLit", "value": 1}],
        "values": [],
    }
    with pytest.raises(TreeError):
        from_dict(doc)


def test_case_lengths_must_match():
    doc = {
        "_type": "Case",
        "pivot": {"_type": "SelfRef"},
        "clauses": [],
        "whens": [{"_type": "IntegerLit", "value": 1}],
    }
    with pytest.raises(TreeError):
        from_dict(doc)


def test_bad_position():
    with pytest.raises(TreeError):
        from_dict({"_type": "SelfRef", "pos": {"line": "1"}})


def test_package_exports_loaders():
    assert rbmin.loads is loads
    assert rbmin.from_dict is from_dict
    assert rbmin.dumps is dumps
    assert rbmin.to_dict is to_dict
    doc = '{"_type": "IntegerLit", "value": 7}'
    assert rbmin.minify_document(doc) == "7"
    assert rbmin.minify_tree({"_type": "BooleanLiteral", "value": True}, True) == "!!1"
