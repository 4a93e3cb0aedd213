# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Scoped symbol table used for duplicate-declaration checks."""

import logging
from dataclasses import dataclass, field

from mcbc.nodes import AstNode

logger = logging.getLogger(__name__)

ROOT_SCOPE_NAME = "global"


@dataclass(frozen=True)
class SymbolRecord:
    """Represent one registered symbol.

    Attributes:
        name: Declared name.
        node: Declaring node.
    """

    name: str
    node: AstNode


@dataclass
class Scope:
    """Represent one namespace level.

    Attributes:
        name: Scope label (the declaring node's name, or ``global``).
        owner: Node that opened the scope; ``None`` for the root scope.
        symbols: Registered symbols keyed by name.
    """

    name: str
    owner: AstNode | None = None
    symbols: dict[str, SymbolRecord] = field(default_factory=dict)


class SymbolTable:
    """Manage a stack of scopes with conflict-checked registration."""

    def __init__(self) -> None:
        """Initialize the table with the root scope active."""
        self._scopes: list[Scope] = [Scope(name=ROOT_SCOPE_NAME)]

    @property
    def current_scope(self) -> Scope:
        return self._scopes[-1]

    @property
    def root_scope(self) -> Scope:
        return self._scopes[0]

    @property
    def depth(self) -> int:
        """Number of scopes on the stack, root included."""
        return len(self._scopes)

    def push_scope(self, name: str, owner: AstNode | None = None) -> Scope:
        """Open a new scope on top of the stack.

        Args:
            name: Scope label.
            owner: Node that opens the scope.

        Returns:
            The new active scope.
        """
        scope = Scope(name=name, owner=owner)
        self._scopes.append(scope)
        logger.debug(f"Scope pushed (name={name} depth={len(self._scopes)})")
        return scope

    def pop_scope(self) -> Scope | None:
        """Close the active scope.

        The root scope is never popped.

        Returns:
            The closed scope, or ``None`` when only the root scope is open.
        """
        if len(self._scopes) == 1:
            return None
        scope = self._scopes.pop()
        logger.debug(f"Scope popped (name={scope.name} depth={len(self._scopes)})")
        return scope

    def close_scopes_from(self, indent: int) -> int:
        """Close every open scope whose owner sits at ``indent`` or deeper.

        Args:
            indent: Indentation of the line being placed.

        Returns:
            Number of scopes closed.
        """
        closed = 0
        while len(self._scopes) > 1:
            owner = self.current_scope.owner
            if owner is None or owner.indent < indent:
                break
            self.pop_scope()
            closed += 1
        return closed

    def unwind(self) -> None:
        """Close every scope above the root scope."""
        while self.pop_scope() is not None:
            pass

    def try_register(self, node: AstNode) -> bool:
        """Register a node's symbol in the active scope.

        Args:
            node: Symbol-declaring node.

        Returns:
            False when the name is already defined in the active scope.
        """
        symbols = self.current_scope.symbols
        if node.name in symbols:
            return False
        symbols[node.name] = SymbolRecord(name=node.name, node=node)
        return True

    def lookup_local(self, name: str) -> SymbolRecord | None:
        """Find a symbol in the active scope only."""
        return self.current_scope.symbols.get(name)
