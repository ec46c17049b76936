"""Renderer: resolved Ruby syntax tree → compact Ruby source text.

One rule per node kind. The statement separator and the literal style come
from a RenderConfig that is threaded through every join, so a single render
never mixes separators inside a body. Top-level statements are always joined
with newlines.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .aliases import AliasTable
from .ast import (
    ArrayLit,
    BooleanLiteral,
    Call,
    Case,
    ClassDef,
    ConstantRead,
    ConstantWrite,
    Definition,
    HashLit,
    If,
    IncludeDirective,
    InstanceVarRead,
    InstanceVarWrite,
    IntegerLit,
    InterpolatedString,
    InterpolatedSymbol,
    LocalVarRead,
    LocalVarWrite,
    LogicalAnd,
    LogicalOr,
    ModuleDef,
    Nil,
    Node,
    Pos,
    Return,
    SelfRef,
    StatementBlock,
    StringLit,
    SymbolLit,
    Unless,
    Yield,
    kind_of,
)
from .classify import (
    STYLE_OBFUSCATED,
    STYLE_VERBOSE,
    compound_operator,
    has_trailing_block,
    is_indexing_read,
    is_indexing_write,
    is_infix_operator,
    is_unary_not,
)

SEP_NEWLINE = "\n"
SEP_SEMICOLON = ";"

SEPARATORS = (SEP_NEWLINE, SEP_SEMICOLON)
STYLES = (STYLE_VERBOSE, STYLE_OBFUSCATED)


class UnsupportedConstruct(Exception):
    """Raised for a node kind the renderer has no rule for."""

    def __init__(self, kind: str, pos: Pos | None = None):
        self.kind: str = kind
        self.pos: Pos | None = pos
        super().__init__("unsupported construct: " + kind)


@dataclass
class RenderConfig:
    """Output mode for one render pass."""

    separator: str = SEP_NEWLINE
    style: str = STYLE_VERBOSE

    def __post_init__(self) -> None:
        if self.separator not in SEPARATORS:
            raise ValueError("unknown separator " + repr(self.separator))
        if self.style not in STYLES:
            raise ValueError("unknown literal style " + repr(self.style))

    @property
    def obfuscated(self) -> bool:
        return self.style == STYLE_OBFUSCATED


READABLE = RenderConfig(SEP_NEWLINE, STYLE_VERBOSE)
COMPACT = RenderConfig(SEP_SEMICOLON, STYLE_OBFUSCATED)


# ============================================================
# PRECEDENCE (higher binds tighter)
# ============================================================

_PREC_SEQUENCE = -1
_PREC_STMT = 0
_PREC_ASSIGN = 1
_PREC_TERNARY = 2
_PREC_OR = 3
_PREC_AND = 4
_PREC_EQUALITY = 5
_PREC_COMPARE = 6
_PREC_BITOR = 7
_PREC_SUM = 8
_PREC_PRODUCT = 9
_PREC_NEGATE = 10
_PREC_POW = 11
_PREC_NOT = 12
_PREC_POSTFIX = 13
_PREC_PRIMARY = 14

_INFIX_PREC: dict[str, int] = {
    "<=>": _PREC_EQUALITY,
    "==": _PREC_EQUALITY,
    "===": _PREC_EQUALITY,
    "<": _PREC_COMPARE,
    ">": _PREC_COMPARE,
    "<=": _PREC_COMPARE,
    ">=": _PREC_COMPARE,
    "^": _PREC_BITOR,
    "+": _PREC_SUM,
    "-": _PREC_SUM,
    "*": _PREC_PRODUCT,
    "/": _PREC_PRODUCT,
    "%": _PREC_PRODUCT,
    "**": _PREC_POW,
}

_NON_ASSOC = (_PREC_EQUALITY, _PREC_COMPARE)


# ============================================================
# LITERAL ESCAPES
# ============================================================

_ESCAPES: dict[str, str] = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
    "\f": "\\f",
    "\v": "\\v",
    "\x1b": "\\e",
    "\x07": "\\a",
    "\x08": "\\b",
}

_BARE_SYMBOL = re.compile(
    r"\A(?:[A-Za-z_][A-Za-z0-9_]*[?!=]?"
    r"|@@?[A-Za-z_][A-Za-z0-9_]*"
    r"|\$[A-Za-z_][A-Za-z0-9_]*)\Z"
)

_OPERATOR_SYMBOLS = frozenset(
    (
        "+",
        "-",
        "*",
        "/",
        "%",
        "**",
        "==",
        "===",
        "<=>",
        "<",
        "<=",
        ">",
        ">=",
        "!",
        "!=",
        "[]",
        "[]=",
        "<<",
        ">>",
        "&",
        "|",
        "^",
        "~",
        "+@",
        "-@",
        "=~",
        "!~",
    )
)


def _escape_ruby_string(value: str) -> str:
    out: list[str] = []
    i = 0
    while i < len(value):
        c = value[i]
        if c in _ESCAPES:
            out.append(_ESCAPES[c])
        elif c == "#" and i + 1 < len(value) and value[i + 1] in "{$@":
            out.append("\\#")
        elif ord(c) < 32 or ord(c) == 127:
            out.append("\\x" + format(ord(c), "02X"))
        else:
            out.append(c)
        i += 1
    return "".join(out)


def _symbol(value: str) -> str:
    if _BARE_SYMBOL.match(value) or value in _OPERATOR_SYMBOLS:
        return ":" + value
    return ':"' + _escape_ruby_string(value) + '"'


def _glues_right(text: str) -> bool:
    """True if a bare symbol ends in a character the next operator can extend."""
    last = text[-1]
    return last != '"' and not (last.isalnum() or last == "_")


# ============================================================
# RENDERER
# ============================================================


class Renderer:
    def __init__(
        self, config: RenderConfig = READABLE, aliases: AliasTable | None = None
    ) -> None:
        self.config = config
        self.aliases = aliases if aliases is not None else AliasTable()

    @property
    def sep(self) -> str:
        return self.config.separator

    # ── Entry points ──────────────────────────────────────────

    def render_program(self, root: Node) -> str:
        if isinstance(root, StatementBlock):
            stmts = root.statements
        else:
            stmts = [root]
        rendered = [self.render_node(s) for s in stmts]
        return "\n".join(text for text in rendered if text != "")

    def render_statements(self, block: Node | None) -> str:
        if block is None:
            return self._empty_body()
        if isinstance(block, Nil):
            return ""
        if not isinstance(block, StatementBlock):
            return self.render_node(block)
        if not block.statements:
            return self._empty_body()
        return self.sep.join(self.render_node(s) for s in block.statements)

    def _empty_body(self) -> str:
        if self.config.obfuscated:
            return ""
        return '""'

    def _no_value(self) -> str:
        if self.config.obfuscated:
            return "()"
        return "nil"

    # ── Dispatch ──────────────────────────────────────────────

    def render_node(self, node: Node) -> str:
        if isinstance(node, Call):
            return self._call(node)
        if isinstance(node, Definition):
            return self._definition(node)
        if isinstance(node, If):
            return self._conditional(node.condition, node.then_branch, node.else_branch)
        if isinstance(node, Unless):
            cond = "!(" + self.render_node(node.condition) + ")"
            return self._conditional_text(cond, node.then_branch, node.else_branch)
        if isinstance(node, Case):
            return self._case(node)
        if isinstance(node, Return):
            if isinstance(node.argument, Nil):
                return self._no_value()
            return self.render_node(node.argument)
        if isinstance(node, BooleanLiteral):
            if self.config.obfuscated:
                return "!!1" if node.value else "!1"
            return "true" if node.value else "false"
        if isinstance(node, ClassDef):
            head = "class " + "::".join(node.name_path)
            if node.superclass_path:
                head += "<" + "::".join(node.superclass_path)
            return self._body_with_end(head, node.body)
        if isinstance(node, ModuleDef):
            return self._body_with_end("module " + "::".join(node.name_path), node.body)
        if isinstance(node, SelfRef):
            return "self"
        if isinstance(node, LogicalAnd):
            lhs = self._operand(node.lhs, _PREC_AND)
            return lhs + "&&" + self._operand(node.rhs, _PREC_AND)
        if isinstance(node, LogicalOr):
            lhs = self._operand(node.lhs, _PREC_OR)
            return lhs + "||" + self._operand(node.rhs, _PREC_OR)
        if isinstance(node, (LocalVarRead, InstanceVarRead)):
            return node.name
        if isinstance(node, (LocalVarWrite, InstanceVarWrite)):
            return self._write(node)
        if isinstance(node, ConstantRead):
            if node.base is None:
                return node.name
            return self._operand(node.base, _PREC_POSTFIX) + "::" + node.name
        if isinstance(node, ConstantWrite):
            return "::".join(node.path) + "=" + self._operand(node.rhs, _PREC_ASSIGN)
        if isinstance(node, StringLit):
            return '"' + _escape_ruby_string(node.value) + '"'
        if isinstance(node, IntegerLit):
            return str(node.value)
        if isinstance(node, ArrayLit):
            return "[" + self._args(node.elements) + "]"
        if isinstance(node, SymbolLit):
            return _symbol(node.value)
        if isinstance(node, HashLit):
            pairs = [
                self._operand(k, _PREC_ASSIGN) + "=>" + self._operand(v, _PREC_ASSIGN)
                for k, v in zip(node.keys, node.values)
            ]
            return "{" + ",".join(pairs) + "}"
        if isinstance(node, InterpolatedString):
            return '"' + self._interpolation(node.parts) + '"'
        if isinstance(node, InterpolatedSymbol):
            return ':"' + self._interpolation(node.parts) + '"'
        if isinstance(node, IncludeDirective):
            if not node.args:
                raise UnsupportedConstruct("IncludeDirective", node.pos)
            return "include " + self._operand(node.args[0], _PREC_ASSIGN)
        if isinstance(node, Yield):
            if not node.args:
                return "yield"
            return "yield " + self._args(node.args)
        if isinstance(node, Nil):
            return ""
        if isinstance(node, StatementBlock):
            return self.render_statements(node)
        raise UnsupportedConstruct(kind_of(node), getattr(node, "pos", None))

    # ── Precedence ────────────────────────────────────────────

    def _prec(self, node: Node) -> int:
        if isinstance(node, StatementBlock):
            if len(node.statements) == 1:
                return self._prec(node.statements[0])
            if len(node.statements) > 1:
                return _PREC_SEQUENCE
            return _PREC_PRIMARY
        if isinstance(node, Call):
            if self._is_infix_call(node):
                return _INFIX_PREC[node.method_name]
            if node.receiver is not None and not has_trailing_block(node):
                if is_indexing_write(node.method_name):
                    return _PREC_ASSIGN
                if is_unary_not(node.method_name):
                    return _PREC_NOT
            return _PREC_POSTFIX
        if isinstance(node, (If, Unless)):
            if node.else_branch is None and not self.config.obfuscated:
                return _PREC_STMT
            return _PREC_TERNARY
        if isinstance(node, Return):
            if isinstance(node.argument, Nil):
                return _PREC_PRIMARY
            return self._prec(node.argument)
        if isinstance(node, BooleanLiteral):
            return _PREC_NOT if self.config.obfuscated else _PREC_PRIMARY
        if isinstance(node, LogicalAnd):
            return _PREC_AND
        if isinstance(node, LogicalOr):
            return _PREC_OR
        if isinstance(node, (LocalVarWrite, InstanceVarWrite, ConstantWrite)):
            return _PREC_ASSIGN
        if isinstance(node, IncludeDirective):
            return _PREC_STMT
        if isinstance(node, Yield):
            return _PREC_STMT if node.args else _PREC_PRIMARY
        if isinstance(node, IntegerLit) and node.value < 0:
            return _PREC_NEGATE
        return _PREC_PRIMARY

    def _operand(self, node: Node, parent_prec: int, side: str = "") -> str:
        """Render node where it binds to a parent of parent_prec."""
        text = self.render_node(node)
        if text == "":
            return "()"
        prec = self._prec(node)
        need_parens = prec < parent_prec
        if prec == parent_prec and side != "":
            if prec == _PREC_POW:
                need_parens = side == "left"
            elif prec in _NON_ASSOC:
                need_parens = True
            else:
                need_parens = side == "right"
        if side == "left" and isinstance(node, SymbolLit) and _glues_right(text):
            need_parens = True
        if need_parens:
            return "(" + text + ")"
        return text

    def _args(self, args: list[Node]) -> str:
        return ",".join(self._operand(a, _PREC_ASSIGN) for a in args)

    # ── Calls ─────────────────────────────────────────────────

    def _is_infix_call(self, node: Call) -> bool:
        return (
            is_infix_operator(node.method_name)
            and node.receiver is not None
            and len(node.args) == 1
        )

    def _call(self, node: Call) -> str:
        name = node.method_name
        if self._is_infix_call(node):
            prec = _INFIX_PREC[name]
            return (
                self._operand(node.receiver, prec, "left")
                + name
                + self._operand(node.args[0], prec, "right")
            )
        if has_trailing_block(node):
            return self._block_call(node)
        recv = node.receiver
        if recv is not None and is_indexing_read(name):
            obj = self._operand(recv, _PREC_POSTFIX)
            return obj + "[" + self._args(node.args) + "]"
        if recv is not None and is_indexing_write(name) and len(node.args) >= 2:
            # The last argument is the assigned value: a[i, n]=v.
            return (
                self._operand(recv, _PREC_POSTFIX)
                + "["
                + self._args(node.args[:-1])
                + "]="
                + self._operand(node.args[-1], _PREC_ASSIGN)
            )
        if recv is not None and is_unary_not(name):
            return "!" + self._operand(recv, _PREC_NOT)
        text = self._call_head(node)
        if node.args:
            text += "(" + self._args(node.args) + ")"
        return text

    def _call_head(self, node: Call) -> str:
        name = node.method_name
        if node.receiver is None:
            # Operator methods need an explicit receiver: self.+(x), self.!.
            if (
                is_infix_operator(name)
                or is_unary_not(name)
                or is_indexing_read(name)
                or is_indexing_write(name)
            ):
                return "self." + name
            return name
        return self._operand(node.receiver, _PREC_POSTFIX) + "." + name

    def _block_call(self, node: Call) -> str:
        text = self._call_head(node)
        if node.block_body is not None:
            if node.args:
                text += "(" + self._args(node.args) + ")"
            params = ",".join(node.block_params)
            body = self.render_statements(node.block_body)
            return text + "{|" + params + "|" + body + "}"
        args = [self._operand(a, _PREC_ASSIGN) for a in node.args]
        args.append("&" + self._operand(node.block_forward, _PREC_POSTFIX))
        return text + "(" + ",".join(args) + ")"

    # ── Definitions ───────────────────────────────────────────

    def _definition(self, node: Definition) -> str:
        head = "def " + node.method_name
        if node.required_params:
            head += "(" + ",".join(node.required_params) + ")"
        return self._body_with_end(head, node.body)

    def _body_with_end(self, head: str, body: Node) -> str:
        return head + self.sep + self.render_statements(body) + self.sep + "end"

    # ── Control flow ──────────────────────────────────────────

    def _conditional(
        self, cond: Node, then_branch: Node, else_branch: Node | None
    ) -> str:
        if else_branch is None and not self.config.obfuscated:
            cond_text = self._operand(cond, _PREC_ASSIGN)
        else:
            cond_text = self._operand(cond, _PREC_TERNARY + 1)
        return self._conditional_text(cond_text, then_branch, else_branch)

    def _conditional_text(
        self, cond: str, then_branch: Node, else_branch: Node | None
    ) -> str:
        then_text = self._branch(then_branch)
        if else_branch is None:
            if not self.config.obfuscated:
                return then_text + " if " + cond
            return cond + " ? " + then_text + " : " + self._no_value()
        return cond + " ? " + then_text + " : " + self._branch(else_branch)

    def _branch(self, body: Node) -> str:
        text = self.render_statements(body)
        if text == "":
            return self._no_value()
        if self._prec(body) < _PREC_ASSIGN:
            return "(" + text + ")"
        return text

    def _case(self, node: Case) -> str:
        parts = ["case " + self.render_node(node.pivot) + self.sep]
        for clause, when in zip(node.clauses, node.whens):
            parts.append("when " + self.render_node(when) + self.sep)
            parts.append(self.render_statements(clause) + self.sep)
        if node.else_clause is not None:
            else_text = self.render_statements(node.else_clause)
            parts.append("else" + self.sep + else_text + self.sep)
        parts.append("end")
        return "".join(parts)

    # ── Variables ─────────────────────────────────────────────

    def _write(self, node: LocalVarWrite | InstanceVarWrite) -> str:
        op = compound_operator(node, self.config.style)
        rhs = node.rhs
        if op is None:
            return node.name + "=" + self._operand(rhs, _PREC_ASSIGN)
        if isinstance(rhs, (LogicalAnd, LogicalOr)):
            return node.name + op + "=" + self._operand(rhs.rhs, _PREC_ASSIGN)
        return node.name + op + "=" + self._operand(rhs.args[0], _PREC_ASSIGN)

    # ── Strings ───────────────────────────────────────────────

    def _interpolation(self, parts: list[Node]) -> str:
        out: list[str] = []
        for part in parts:
            if isinstance(part, StringLit):
                out.append(_escape_ruby_string(part.value))
            else:
                out.append("#{" + self.render_statements(part) + "}")
        return "".join(out)


# ============================================================
# PUBLIC API
# ============================================================


def render_node(node: Node, config: RenderConfig = READABLE) -> str:
    return Renderer(config).render_node(node)


def render_statements(block: Node | None, config: RenderConfig = READABLE) -> str:
    return Renderer(config).render_statements(block)


def render_program(root: Node, config: RenderConfig = READABLE) -> str:
    """Render a program body: one line per non-empty top-level statement."""
    return Renderer(config).render_program(root)
