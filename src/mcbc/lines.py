# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Line classification for MCBC source text."""

from dataclasses import dataclass
from typing import Literal

INDENT_UNIT = 4

LineKind = Literal["empty", "comment", "annotation", "structural"]

COMMENT_PREFIX = "//"
ANNOTATION_PREFIX = "@"


@dataclass(frozen=True)
class ProcessedLine:
    """Represent one classified source line.

    Attributes:
        kind: Line category.
        indent: Leading indentation in columns.
        content: Line text without indentation; annotation text for annotations.
        line_number: Position in source (1-based).
    """

    kind: LineKind
    indent: int
    content: str
    line_number: int


class LineClassifier:
    """Classify raw lines into kind, indentation, and content."""

    def classify(self, raw_line: str, line_number: int) -> ProcessedLine:
        """Classify one raw source line.

        Args:
            raw_line: Line text, with or without the trailing newline.
            line_number: Position in source (1-based).

        Returns:
            The classified line.
        """
        text = raw_line.rstrip("\r\n")
        stripped = text.lstrip(" \t")
        indent = len(text[: len(text) - len(stripped)].expandtabs(INDENT_UNIT))

        if not stripped.strip():
            return ProcessedLine("empty", indent, "", line_number)
        if stripped.startswith(COMMENT_PREFIX):
            return ProcessedLine("comment", indent, stripped.rstrip(), line_number)
        if stripped.startswith(ANNOTATION_PREFIX):
            return ProcessedLine(
                "annotation",
                indent,
                stripped[len(ANNOTATION_PREFIX) :].strip(),
                line_number,
            )
        return ProcessedLine("structural", indent, stripped.rstrip(), line_number)

    def classify_all(self, raw_lines: list[str]) -> list[ProcessedLine]:
        """Classify lines in source order, numbering them from 1."""
        return [
            self.classify(raw_line, line_number)
            for line_number, raw_line in enumerate(raw_lines, start=1)
        ]
