# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Public import surface for the MCBC analyzer."""

from mcbc.analyzer import McbcAnalyzer
from mcbc.diagnostics import Diagnostic, StructuralError
from mcbc.factory import NodeFactory, suggest_keyword
from mcbc.lines import INDENT_UNIT, LineClassifier, ProcessedLine
from mcbc.nodes import AstNode, NodeMetadata, can_attach
from mcbc.symbols import Scope, SymbolRecord, SymbolTable

__all__ = [
    "AstNode",
    "Diagnostic",
    "INDENT_UNIT",
    "LineClassifier",
    "McbcAnalyzer",
    "NodeFactory",
    "NodeMetadata",
    "ProcessedLine",
    "Scope",
    "StructuralError",
    "SymbolRecord",
    "SymbolTable",
    "can_attach",
    "suggest_keyword",
]
