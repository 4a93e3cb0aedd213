# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Node construction from classified structural lines."""

import logging
import re

import Levenshtein

from mcbc.lines import ProcessedLine
from mcbc.nodes import AstNode, NodeKind, NodeMetadata

logger = logging.getLogger(__name__)

KEYWORD_KINDS: dict[str, NodeKind] = {
    "module": "module",
    "class": "class",
    "func": "func",
    "var": "var",
    "description": "description",
    "inh": "inh",
    "input": "input",
    "output": "output",
    "behavior": "behavior",
    "if": "if",
    "else": "else",
}
STATEMENT_KEYWORDS: frozenset[str] = frozenset({"return", "define macro"})
BARE_STATEMENTS: frozenset[str] = frozenset({"continue", "break"})
SUGGESTION_MIN_RATIO = 0.7

_KEYWORD_PATTERN = re.compile(r"^\s*([\w\s]+?)\s*:")
_NAME_PATTERN = re.compile(r"^(?:class|func|var)\s*:\s*(\w+)")
_CONDITION_PATTERN = re.compile(r"^(if|else)\b.*:$")


def extract_keyword(content: str) -> str | None:
    """Return the text before the first ``:`` when it is made of words only."""
    match = _KEYWORD_PATTERN.match(content)
    if match is None:
        return None
    return match.group(1).strip()


class NodeFactory:
    """Create AST nodes from classified lines."""

    def create(
        self, line: ProcessedLine, annotation: str | None = None
    ) -> AstNode | None:
        """Build the node for one structural line.

        Args:
            line: Classified structural line.
            annotation: Pending ``@`` annotation to attach, if any.

        Returns:
            The new detached node, or ``None`` when the line is unrecognized.
        """
        kind = self._resolve_kind(line.content)
        if kind is None:
            return None

        metadata = NodeMetadata(annotation=annotation)
        if kind == "description":
            metadata.description = line.content.split(":", 1)[1].strip()
        name = ""
        name_match = _NAME_PATTERN.match(line.content)
        if kind in {"class", "func", "var"} and name_match is not None:
            name = name_match.group(1)

        return AstNode(
            kind=kind,
            content=line.content,
            indent=line.indent,
            line_number=line.line_number,
            name=name,
            metadata=metadata,
        )

    def _resolve_kind(self, content: str) -> NodeKind | None:
        keyword = extract_keyword(content)
        if keyword is not None and keyword in KEYWORD_KINDS:
            return KEYWORD_KINDS[keyword]
        condition = _CONDITION_PATTERN.match(content)
        if condition is not None:
            return KEYWORD_KINDS[condition.group(1)]
        if content.strip() in BARE_STATEMENTS:
            return "statement"
        if keyword is None or keyword in STATEMENT_KEYWORDS:
            return "statement"
        return None


def suggest_keyword(content: str) -> str | None:
    """Suggest the closest known keyword for an unrecognized line.

    Args:
        content: Unrecognized line content.

    Returns:
        Closest keyword by Levenshtein ratio, or ``None`` if nothing is close.
    """
    keyword = extract_keyword(content)
    if not keyword:
        return None
    candidates = sorted(set(KEYWORD_KINDS) | STATEMENT_KEYWORDS)
    best_keyword: str | None = None
    best_ratio = 0.0
    for candidate in candidates:
        ratio = float(Levenshtein.ratio(keyword, candidate))
        if ratio > best_ratio:
            best_keyword = candidate
            best_ratio = ratio
    if best_ratio < SUGGESTION_MIN_RATIO:
        return None
    return best_keyword
