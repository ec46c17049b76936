"""rbmin Ruby source compactor — public API."""

from __future__ import annotations

from .aliases import AliasTable as AliasTable
from .classify import (
    has_trailing_block as has_trailing_block,
    is_compound_self_assignment as is_compound_self_assignment,
    is_indexing_read as is_indexing_read,
    is_indexing_write as is_indexing_write,
    is_infix_operator as is_infix_operator,
)
from .render import (
    COMPACT as COMPACT,
    READABLE as READABLE,
    RenderConfig as RenderConfig,
    Renderer as Renderer,
    UnsupportedConstruct as UnsupportedConstruct,
    render_node as render_node,
    render_program as render_program,
    render_statements as render_statements,
)
from .serialize import (
    TreeError as TreeError,
    dumps as dumps,
    from_dict as from_dict,
    loads as loads,
    to_dict as to_dict,
)


def minify_document(text: str, compact: bool = False) -> str:
    """Render a JSON tree document in readable or compact mode."""
    return render_program(loads(text), COMPACT if compact else READABLE)


def minify_tree(data: object, compact: bool = False) -> str:
    """Render an already-decoded tree document."""
    return render_program(from_dict(data), COMPACT if compact else READABLE)
