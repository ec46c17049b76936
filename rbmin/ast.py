"""Ruby syntax tree — resolved node definitions consumed by the renderer."""

from __future__ import annotations

from dataclasses import dataclass, field


# ============================================================
# POSITION
# ============================================================


@dataclass
class Pos:
    """Source position, 1-indexed."""

    line: int
    col: int


# ============================================================
# BASE
# ============================================================


@dataclass
class Node:
    """Base for all nodes. pos is None when the front end gave no location."""

    pos: Pos | None = field(default=None, kw_only=True)


@dataclass
class Nil(Node):
    """Explicit no-value sentinel, distinct from an absent child (None)."""


@dataclass
class StatementBlock(Node):
    """stmt; stmt; ... — method, branch and block bodies."""

    statements: list[Node]


@dataclass
class UnknownNode(Node):
    """A node kind the loader does not model. kind is the front end's tag."""

    kind: str
    fields: dict[str, object] = field(default_factory=dict)


# ============================================================
# CALLS AND DEFINITIONS
# ============================================================


@dataclass
class Call(Node):
    """recv.name(args) { |params| body } or recv.name(args, &blk)."""

    receiver: Node | None
    method_name: str
    args: list[Node] = field(default_factory=list)
    block_params: list[str] = field(default_factory=list)
    block_body: Node | None = None
    block_forward: Node | None = None


@dataclass
class Definition(Node):
    """def name(params) body end."""

    method_name: str
    required_params: list[str]
    body: Node


@dataclass
class Yield(Node):
    """yield args."""

    args: list[Node] = field(default_factory=list)


@dataclass
class ClassDef(Node):
    """class A::B < Base body end."""

    name_path: list[str]
    superclass_path: list[str] | None
    body: Node


@dataclass
class ModuleDef(Node):
    """module A::B body end."""

    name_path: list[str]
    body: Node


@dataclass
class IncludeDirective(Node):
    """include Mod."""

    args: list[Node]


# ============================================================
# CONTROL FLOW
# ============================================================


@dataclass
class If(Node):
    """if condition then_branch else else_branch end."""

    condition: Node
    then_branch: Node
    else_branch: Node | None = None


@dataclass
class Unless(Node):
    """unless condition then_branch else else_branch end."""

    condition: Node
    then_branch: Node
    else_branch: Node | None = None


@dataclass
class Case(Node):
    """case pivot when whens[i] clauses[i] ... else else_clause end."""

    pivot: Node
    clauses: list[Node]
    whens: list[Node]
    else_clause: Node | None = None


@dataclass
class Return(Node):
    """return argument; argument is Nil for a bare return."""

    argument: Node


@dataclass
class LogicalAnd(Node):
    """lhs && rhs."""

    lhs: Node
    rhs: Node


@dataclass
class LogicalOr(Node):
    """lhs || rhs."""

    lhs: Node
    rhs: Node


# ============================================================
# VARIABLES AND CONSTANTS
# ============================================================


@dataclass
class SelfRef(Node):
    """self."""


@dataclass
class LocalVarRead(Node):
    """Local variable reference."""

    name: str


@dataclass
class LocalVarWrite(Node):
    """name = rhs."""

    name: str
    rhs: Node


@dataclass
class InstanceVarRead(Node):
    """@name reference. name includes the sigil."""

    name: str


@dataclass
class InstanceVarWrite(Node):
    """@name = rhs."""

    name: str
    rhs: Node


@dataclass
class ConstantRead(Node):
    """base::Name, or Name when base is None."""

    base: Node | None
    name: str


@dataclass
class ConstantWrite(Node):
    """A::B = rhs."""

    path: list[str]
    rhs: Node


# ============================================================
# LITERALS
# ============================================================


@dataclass
class BooleanLiteral(Node):
    """true or false."""

    value: bool


@dataclass
class StringLit(Node):
    """String literal with escapes resolved."""

    value: str


@dataclass
class IntegerLit(Node):
    """Integer literal."""

    value: int


@dataclass
class SymbolLit(Node):
    """:value."""

    value: str


@dataclass
class ArrayLit(Node):
    """[elements]."""

    elements: list[Node]


@dataclass
class HashLit(Node):
    """{ keys[i] => values[i], ... }."""

    keys: list[Node]
    values: list[Node]


@dataclass
class InterpolatedString(Node):
    """Double-quoted string with #{} parts: StringLit fragments or embedded nodes."""

    parts: list[Node]


@dataclass
class InterpolatedSymbol(Node):
    """:"text#{expr}text"."""

    parts: list[Node]


NODE_TYPES: dict[str, type[Node]] = {
    cls.__name__: cls
    for cls in (
        Nil,
        StatementBlock,
        Call,
        Definition,
        Yield,
        ClassDef,
        ModuleDef,
        IncludeDirective,
        If,
        Unless,
        Case,
        Return,
        LogicalAnd,
        LogicalOr,
        SelfRef,
        LocalVarRead,
        LocalVarWrite,
        InstanceVarRead,
        InstanceVarWrite,
        ConstantRead,
        ConstantWrite,
        BooleanLiteral,
        StringLit,
        IntegerLit,
        SymbolLit,
        ArrayLit,
        HashLit,
        InterpolatedString,
        InterpolatedSymbol,
    )
}


def kind_of(node: Node) -> str:
    """Name of a node's kind, as reported in diagnostics."""
    if isinstance(node, UnknownNode):
        return node.kind
    return type(node).__name__
