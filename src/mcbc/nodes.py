# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""AST node model and per-kind grammar contracts."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Callable, Literal

from mcbc.lines import INDENT_UNIT

logger = logging.getLogger(__name__)

NodeKind = Literal[
    "root",
    "module",
    "class",
    "func",
    "var",
    "description",
    "inh",
    "input",
    "output",
    "behavior",
    "if",
    "else",
    "statement",
]

ROOT_INDENT = -1

SCOPE_KINDS: frozenset[NodeKind] = frozenset({"class", "func"})
SYMBOL_KINDS: frozenset[NodeKind] = frozenset({"class", "func", "var"})
_CONTAINER_KINDS: frozenset[NodeKind] = frozenset(
    {"root", "class", "func", "behavior", "if", "else"}
)
_BLOCK_KINDS: frozenset[NodeKind] = frozenset({"statement", "if", "else"})


@dataclass
class NodeMetadata:
    """Free-form data attached to a node.

    Attributes:
        annotation: Text of the ``@`` annotation preceding the node, if any.
        description: Description text for ``description`` nodes.
    """

    annotation: str | None = None
    description: str | None = None


@dataclass(eq=False)
class AstNode:
    """Represent one node of the MCBC syntax tree.

    Attributes:
        kind: Node variant tag.
        content: Raw line text without indentation.
        indent: Indentation in columns; ``-1`` for the root.
        line_number: Source line (1-based, 0 for the root).
        name: Declared symbol name; empty for nodes that declare nothing.
        metadata: Annotation and description data.
        children: Owned child nodes in source order.
        parent: Containing node; ``None`` only for the root.
    """

    kind: NodeKind
    content: str
    indent: int
    line_number: int
    name: str = ""
    metadata: NodeMetadata = field(default_factory=NodeMetadata)
    children: list["AstNode"] = field(default_factory=list, repr=False)
    parent: "AstNode | None" = field(default=None, repr=False)

    @classmethod
    def root(cls) -> "AstNode":
        """Create an empty root node."""
        return cls(kind="root", content="ROOT", indent=ROOT_INDENT, line_number=0)

    @property
    def accepts_children(self) -> bool:
        return self.kind in _CONTAINER_KINDS

    @property
    def defines_scope(self) -> bool:
        return self.kind in SCOPE_KINDS

    @property
    def declares_symbol(self) -> bool:
        return self.kind in SYMBOL_KINDS and bool(self.name)

    @property
    def child_indent(self) -> int:
        """Indentation required of this node's children."""
        if self.kind == "root":
            return 0
        return self.indent + INDENT_UNIT

    def add_child(self, child: "AstNode") -> None:
        """Append a child and point its parent reference here."""
        self.children.append(child)
        child.parent = self

    def walk(self) -> Iterator["AstNode"]:
        """Yield this node and all descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> dict[str, Any]:
        """Serialize this subtree without parent references."""
        return {
            "kind": self.kind,
            "content": self.content,
            "indent": self.indent,
            "line_number": self.line_number,
            "name": self.name or None,
            "annotation": self.metadata.annotation,
            "description": self.metadata.description,
            "children": [child.to_dict() for child in self.children],
        }


GrammarContract = Callable[[AstNode, NodeKind, AstNode], bool]


def _root_accepts(container: AstNode, child_kind: NodeKind, preceding: AstNode) -> bool:
    return child_kind in {"module", "class"}


def _class_accepts(container: AstNode, child_kind: NodeKind, preceding: AstNode) -> bool:
    if child_kind == "description":
        # Documents the class itself or the member right before it.
        return preceding is container or preceding.kind in {"var", "func"}
    if child_kind == "inh":
        return all(child.kind == "description" for child in container.children)
    return child_kind in {"var", "func"}


def _func_accepts(container: AstNode, child_kind: NodeKind, preceding: AstNode) -> bool:
    seen = {child.kind for child in container.children}
    if child_kind == "description":
        return not container.children
    if child_kind == "input":
        return "output" not in seen and "behavior" not in seen
    if child_kind == "output":
        return "behavior" not in seen
    if child_kind == "behavior":
        return "behavior" not in seen
    return False


def _block_accepts(container: AstNode, child_kind: NodeKind, preceding: AstNode) -> bool:
    if child_kind not in _BLOCK_KINDS:
        return False
    if child_kind == "else":
        return preceding is not container and preceding.kind == "if"
    return True


def _leaf_accepts(container: AstNode, child_kind: NodeKind, preceding: AstNode) -> bool:
    return False


GRAMMARS: dict[NodeKind, GrammarContract] = {
    "root": _root_accepts,
    "module": _leaf_accepts,
    "class": _class_accepts,
    "func": _func_accepts,
    "var": _leaf_accepts,
    "description": _leaf_accepts,
    "inh": _leaf_accepts,
    "input": _leaf_accepts,
    "output": _leaf_accepts,
    "behavior": _block_accepts,
    "if": _block_accepts,
    "else": _block_accepts,
    "statement": _leaf_accepts,
}


def can_attach(container: AstNode, child_kind: NodeKind) -> bool:
    """Check whether a node of ``child_kind`` may be appended to ``container``.

    The preceding sibling is the last child already placed under ``container``,
    or ``container`` itself when it has no children yet.

    Args:
        container: Node receiving the child.
        child_kind: Kind of the candidate child.

    Returns:
        True when the container's grammar admits the child at this position.
    """
    preceding = container.children[-1] if container.children else container
    return GRAMMARS[container.kind](container, child_kind, preceding)
