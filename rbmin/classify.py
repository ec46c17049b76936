"""Classifier predicates over call and write nodes."""

from __future__ import annotations

from .ast import (
    Call,
    InstanceVarRead,
    InstanceVarWrite,
    LocalVarRead,
    LocalVarWrite,
    LogicalAnd,
    LogicalOr,
    Node,
)

STYLE_VERBOSE = "verbose"
STYLE_OBFUSCATED = "obfuscated"

INFIX_OPERATORS = frozenset(
    ("+", "-", "*", "/", "**", "%", "^", ">", "<", "<=", ">=", "<=>", "==", "===")
)

# Infix operators with an op-assign form. Comparisons have none.
ARITHMETIC_OPERATORS = frozenset(("+", "-", "*", "/", "**", "%", "^"))

INDEX_READ = "[]"
INDEX_WRITE = "[]="
UNARY_NOT = "!"


def is_infix_operator(method_name: str) -> bool:
    return method_name in INFIX_OPERATORS


def is_indexing_read(method_name: str) -> bool:
    return method_name == INDEX_READ


def is_indexing_write(method_name: str) -> bool:
    return method_name == INDEX_WRITE


def is_unary_not(method_name: str) -> bool:
    return method_name == UNARY_NOT


def has_trailing_block(call: Call) -> bool:
    """True if the call carries a block body or a forwarded &block argument."""
    return call.block_body is not None or call.block_forward is not None


def _reads_target(node: Node | None, write: Node) -> bool:
    """True if node reads the very variable the write assigns.

    Names are compared, never storage, so two aliased bindings with
    different names are treated as different variables.
    """
    if isinstance(write, LocalVarWrite):
        return isinstance(node, LocalVarRead) and node.name == write.name
    if isinstance(write, InstanceVarWrite):
        return isinstance(node, InstanceVarRead) and node.name == write.name
    return False


def compound_operator(write: Node, style: str = STYLE_VERBOSE) -> str | None:
    """Operator of a compound self-assignment, or None.

    x = x + y gives "+", x = x && y gives "&&", x = x || y gives "||".
    Arithmetic forms only compact in verbose style.
    """
    if not isinstance(write, (LocalVarWrite, InstanceVarWrite)):
        return None
    rhs = write.rhs
    if isinstance(rhs, LogicalAnd):
        return "&&" if _reads_target(rhs.lhs, write) else None
    if isinstance(rhs, LogicalOr):
        return "||" if _reads_target(rhs.lhs, write) else None
    if style != STYLE_VERBOSE:
        return None
    if (
        isinstance(rhs, Call)
        and rhs.method_name in ARITHMETIC_OPERATORS
        and len(rhs.args) == 1
        and not has_trailing_block(rhs)
        and _reads_target(rhs.receiver, write)
    ):
        return rhs.method_name
    return None


def is_compound_self_assignment(write: Node, style: str = STYLE_VERBOSE) -> bool:
    return compound_operator(write, style) is not None
