# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Single-pass MCBC parser with validation and error recovery."""

import logging
from pathlib import Path

from mcbc.diagnostics import Diagnostic, StructuralError
from mcbc.factory import NodeFactory, suggest_keyword
from mcbc.lines import LineClassifier, ProcessedLine
from mcbc.nodes import AstNode, can_attach
from mcbc.symbols import SymbolTable

logger = logging.getLogger(__name__)


class McbcAnalyzer:
    """Parse MCBC sources into a validated AST, collecting every error.

    Structural errors (indentation, nesting, unrecognized lines) are recorded and
    the walk resumes at the next synchronization point: the first following line
    indented no deeper than the context the error occurred in. Semantic errors
    (duplicate symbols, consecutive annotations) are recorded without skipping.
    One instance can parse any number of files; every run starts from fresh state.
    """

    def __init__(
        self,
        line_classifier: LineClassifier | None = None,
        node_factory: NodeFactory | None = None,
    ) -> None:
        """Initialize the analyzer.

        Args:
            line_classifier: Line classifier; a default one when omitted.
            node_factory: Node factory; a default one when omitted.
        """
        self._line_classifier = line_classifier or LineClassifier()
        self._node_factory = node_factory or NodeFactory()
        self._reset()

    def _reset(self) -> None:
        self._symbol_table = SymbolTable()
        self._diagnostics: list[Diagnostic] = []
        self._ast_root = AstNode.root()
        self._current_node = self._ast_root
        self._last_added_node = self._ast_root
        self._pending_annotation: str | None = None

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return list(self._diagnostics)

    @property
    def symbol_table(self) -> SymbolTable:
        return self._symbol_table

    def get_ast(self) -> AstNode:
        """Return the root of the tree built by the last run."""
        return self._ast_root

    def get_errors(self) -> list[str]:
        """Return the errors of the last run in discovery order."""
        return [str(diagnostic) for diagnostic in self._diagnostics]

    def parse_file(self, file_path: str | Path) -> bool:
        """Parse one MCBC file.

        Args:
            file_path: Path to a UTF-8 encoded source file.

        Returns:
            True when no errors were found. A file that cannot be read yields a
            single error and an empty tree.
        """
        path = Path(file_path)
        self._reset()
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning(f"Failed to read source file (path={path} error={exc})")
            self._diagnostics.append(
                Diagnostic("io", 0, f"Cannot read '{path}': {exc}.")
            )
            return False
        return self.parse_source(source, source_name=str(path))

    def parse_source(self, source: str, source_name: str = "<string>") -> bool:
        """Parse MCBC source text.

        Args:
            source: Source text.
            source_name: Label used in log messages.

        Returns:
            True when no errors were found.
        """
        self._reset()
        raw_lines = source.split("\n")
        if raw_lines[-1] == "":
            raw_lines.pop()
        lines = self._line_classifier.classify_all(raw_lines)

        index = 0
        while index < len(lines):
            line = lines[index]
            if line.kind in {"empty", "comment"}:
                index += 1
                continue
            if line.kind == "annotation":
                self._set_annotation(line)
                index += 1
                continue
            try:
                self._place(line)
            except StructuralError as exc:
                self._diagnostics.append(exc.diagnostic)
                index = self._synchronize(lines, index, exc.context_indent)
                continue
            index += 1

        self._symbol_table.unwind()
        node_count = sum(1 for _ in self._ast_root.walk()) - 1
        logger.info(
            f"Parse completed (source={source_name} nodes={node_count} "
            f"errors={len(self._diagnostics)})"
        )
        return not self._diagnostics

    def _set_annotation(self, line: ProcessedLine) -> None:
        if self._pending_annotation is not None:
            self._diagnostics.append(
                Diagnostic(
                    "semantic",
                    line.line_number,
                    "Consecutive '@' annotations are not allowed. Previous one ignored.",
                )
            )
        self._pending_annotation = line.content

    def _place(self, line: ProcessedLine) -> None:
        """Resolve the parent of one structural line and attach its node.

        Raises:
            StructuralError: If indentation, recognition, or grammar checks fail.
        """
        ascended = self._ascend(line)
        current = self._current_node
        context_indent = current.child_indent

        if ascended and line.indent != context_indent:
            raise StructuralError(
                Diagnostic(
                    "indentation",
                    line.line_number,
                    "Illegal indentation rollback, expected indent of "
                    f"{context_indent}, but got {line.indent}.",
                ),
                context_indent,
            )
        if line.indent > context_indent:
            target = self._last_added_node
            if not target.accepts_children:
                raise StructuralError(
                    Diagnostic(
                        "structural",
                        line.line_number,
                        f"Node of type '{target.kind}' cannot have child nodes.",
                    ),
                    context_indent,
                )
            expected_indent = target.child_indent
            if line.indent != expected_indent:
                raise StructuralError(
                    Diagnostic(
                        "indentation",
                        line.line_number,
                        f"Expected indent of {expected_indent}, but got {line.indent}.",
                    ),
                    context_indent,
                )
            self._current_node = current = target
            context_indent = current.child_indent

        node = self._node_factory.create(line, self._pending_annotation)
        if node is None:
            message = f"Unrecognized keyword or line format: '{line.content}'."
            suggestion = suggest_keyword(line.content)
            if suggestion is not None:
                message += f" Did you mean '{suggestion}'?"
            raise StructuralError(
                Diagnostic("syntax", line.line_number, message), context_indent
            )

        if not can_attach(current, node.kind):
            raise StructuralError(
                Diagnostic(
                    "structural",
                    line.line_number,
                    f"Node of type '{node.kind}' cannot be placed here "
                    f"inside a '{current.kind}' node.",
                ),
                context_indent,
            )

        current.add_child(node)
        self._last_added_node = node
        self._pending_annotation = None
        self._register(node)

    def _ascend(self, line: ProcessedLine) -> bool:
        """Leave every block the line is dedented out of.

        Returns:
            True when the current node moved up at least one level.
        """
        self._symbol_table.close_scopes_from(line.indent)
        ascended = False
        while (
            self._current_node.parent is not None
            and line.indent < self._current_node.child_indent
        ):
            self._current_node = self._current_node.parent
            ascended = True
        if ascended:
            # Deeper lines only nest under the last node of the current block.
            self._last_added_node = (
                self._current_node.children[-1]
                if self._current_node.children
                else self._current_node
            )
        return ascended

    def _register(self, node: AstNode) -> None:
        if node.defines_scope:
            self._symbol_table.push_scope(node.name, owner=node)
        if node.declares_symbol and not self._symbol_table.try_register(node):
            existing = self._symbol_table.lookup_local(node.name)
            first_line = existing.node.line_number if existing else node.line_number
            self._diagnostics.append(
                Diagnostic(
                    "semantic",
                    node.line_number,
                    f"Symbol '{node.name}' is already defined in the current scope "
                    f"(line {first_line}).",
                )
            )

    def _synchronize(
        self, lines: list[ProcessedLine], failed_index: int, context_indent: int
    ) -> int:
        """Find where to resume after a structural error.

        Args:
            lines: Classified source lines.
            failed_index: Index of the line that failed.
            context_indent: Context indentation at the moment of failure.

        Returns:
            Index of the next line indented no deeper than ``context_indent``, or
            ``len(lines)`` when no such line exists.
        """
        for index in range(failed_index + 1, len(lines)):
            line = lines[index]
            if line.kind in {"empty", "comment"}:
                continue
            if line.indent <= context_indent:
                logger.debug(
                    f"Resynchronized after structural error "
                    f"(failed_line={failed_index + 1} resume_line={line.line_number})"
                )
                return index
        logger.debug(
            f"No synchronization point after structural error (failed_line={failed_index + 1})"
        )
        return len(lines)
