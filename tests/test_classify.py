"""Tests for the call and write classifier predicates."""

import pytest

from conftest import call, num, op, var
from rbmin.ast import (
    Call,
    InstanceVarRead,
    InstanceVarWrite,
    LocalVarRead,
    LocalVarWrite,
    LogicalAnd,
    LogicalOr,
    Nil,
    StatementBlock,
)
from rbmin.classify import (
    STYLE_OBFUSCATED,
    STYLE_VERBOSE,
    compound_operator,
    has_trailing_block,
    is_compound_self_assignment,
    is_indexing_read,
    is_indexing_write,
    is_infix_operator,
    is_unary_not,
)


# ============================================================
# operator classes
# ============================================================


@pytest.mark.parametrize(
    "name",
    ["+", "-", "*", "/", "**", "%", "^", ">", "<", "<=", ">=", "<=>", "==", "==="],
)
def test_infix_operators(name):
    assert is_infix_operator(name)


@pytest.mark.parametrize("name", ["!", "[]", "[]=", "<<", "&", "puts", "=~", "!="])
def test_not_infix(name):
    assert not is_infix_operator(name)


def test_indexing():
    assert is_indexing_read("[]")
    assert not is_indexing_read("[]=")
    assert is_indexing_write("[]=")
    assert not is_indexing_write("[]")


def test_unary_not_is_prefix():
    assert is_unary_not("!")
    assert not is_infix_operator("!")


# ============================================================
# trailing blocks
# ============================================================


def test_plain_call_has_no_block():
    assert not has_trailing_block(call("puts", num(1)))


def test_block_body():
    node = Call(var("xs"), "each", block_params=["x"], block_body=StatementBlock([]))
    assert has_trailing_block(node)


def test_nil_block_body_still_counts():
    assert has_trailing_block(Call(var("obj"), "tap", block_body=Nil()))


def test_forwarded_block():
    assert has_trailing_block(Call(var("xs"), "map", block_forward=var("fn")))


# ============================================================
# compound self-assignment
# ============================================================


def test_same_variable_arithmetic():
    node = LocalVarWrite("count", op(var("count"), "+", num(1)))
    assert is_compound_self_assignment(node)
    assert compound_operator(node) == "+"


def test_different_variable_is_not_compacted():
    node = LocalVarWrite("count", op(var("other"), "+", num(1)))
    assert not is_compound_self_assignment(node)
    assert compound_operator(node) is None


def test_variable_on_right_only():
    node = LocalVarWrite("x", op(num(1), "-", var("x")))
    assert not is_compound_self_assignment(node)


def test_arithmetic_only_in_verbose():
    node = LocalVarWrite("n", op(var("n"), "*", num(2)))
    assert is_compound_self_assignment(node, STYLE_VERBOSE)
    assert not is_compound_self_assignment(node, STYLE_OBFUSCATED)


def test_comparison_never_compacts():
    node = LocalVarWrite("x", op(var("x"), "==", num(1)))
    assert not is_compound_self_assignment(node)


def test_logical_forms_in_both_styles():
    and_node = LocalVarWrite("ok", LogicalAnd(var("ok"), var("ready")))
    or_node = LocalVarWrite("ok", LogicalOr(var("ok"), var("ready")))
    for style in (STYLE_VERBOSE, STYLE_OBFUSCATED):
        assert compound_operator(and_node, style) == "&&"
        assert compound_operator(or_node, style) == "||"


def test_logical_with_other_lhs():
    node = LocalVarWrite("ok", LogicalOr(var("fallback"), var("ok")))
    assert not is_compound_self_assignment(node)


def test_instance_variable():
    node = InstanceVarWrite("@n", op(InstanceVarRead("@n"), "-", num(1)))
    assert compound_operator(node) == "-"


def test_local_read_does_not_match_instance_write():
    node = InstanceVarWrite("@n", op(LocalVarRead("@n"), "+", num(1)))
    assert not is_compound_self_assignment(node)


def test_instance_read_does_not_match_local_write():
    node = LocalVarWrite("n", LogicalOr(InstanceVarRead("n"), num(0)))
    assert not is_compound_self_assignment(node)


def test_call_with_block_is_not_arithmetic():
    rhs = Call(var("x"), "+", [num(1)], block_body=Nil())
    assert not is_compound_self_assignment(LocalVarWrite("x", rhs))


def test_non_write_nodes():
    assert not is_compound_self_assignment(var("x"))
    assert compound_operator(op(var("x"), "+", num(1))) is None
