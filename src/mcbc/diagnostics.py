# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Diagnostic records produced while analyzing MCBC sources."""

from dataclasses import dataclass
from typing import Literal

DiagnosticCategory = Literal["io", "syntax", "indentation", "structural", "semantic"]

_LABELS: dict[DiagnosticCategory, str] = {
    "io": "File Error",
    "syntax": "Syntax Error",
    "indentation": "Indentation Error",
    "structural": "Structural Error",
    "semantic": "Semantic Error",
}


@dataclass(frozen=True)
class Diagnostic:
    """Represent one analyzer finding.

    Attributes:
        category: Finding category.
        line_number: Source line the finding refers to (1-based, 0 for file errors).
        message: Human-readable detail without the location prefix.
    """

    category: DiagnosticCategory
    line_number: int
    message: str

    def __str__(self) -> str:
        return f"{_LABELS[self.category]} (Line {self.line_number}): {self.message}"


class StructuralError(RuntimeError):
    """Represent a structural failure that triggers resynchronization."""

    def __init__(self, diagnostic: Diagnostic, context_indent: int) -> None:
        """Initialize the error.

        Args:
            diagnostic: Finding to record.
            context_indent: Context indentation at the moment of failure; the walk
                resumes at the next line indented no deeper than this.
        """
        super().__init__(str(diagnostic))
        self.diagnostic = diagnostic
        self.context_indent = context_indent
