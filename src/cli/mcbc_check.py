# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Command line entry point for checking MCBC sources."""

import argparse
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.style import Style
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from mcbc.analyzer import McbcAnalyzer
from mcbc.diagnostics import Diagnostic
from mcbc.discovery import DiscoveryError, discover_sources
from mcbc.nodes import AstNode

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_DIAGNOSTICS = 1
EXIT_USAGE = 2


@dataclass(frozen=True)
class FileResult:
    """Represent the outcome of checking one file.

    Attributes:
        path: Checked file.
        success: Whether the file produced no diagnostics.
        diagnostics: Findings in discovery order.
        ast: Root of the (possibly partial) tree.
    """

    path: Path
    success: bool
    diagnostics: list[Diagnostic]
    ast: AstNode


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application logging with Rich handler.

    Args:
        level: Logging severity threshold.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(prog="mcbc")
    subparsers = parser.add_subparsers(dest="command", required=True)
    check_parser = subparsers.add_parser("check")
    check_parser.add_argument(
        "paths", nargs="+", help="MCBC files or directories to check."
    )
    check_parser.add_argument(
        "--format",
        choices=("table", "tree", "json"),
        default="table",
        help="Output format.",
    )
    check_parser.add_argument(
        "--output",
        required=False,
        help="Optional output file path for raw JSON when --format json is used.",
    )
    check_parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        help="Gitignore-style pattern to skip inside directories; repeatable.",
    )
    check_parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging."
    )
    return parser


def run(argv: list[str], stdout: TextIO, stderr: TextIO) -> int:
    """Run CLI command.

    Args:
        argv: CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit:
        logger.warning(f"Argument parsing failed (argv={argv})")
        return EXIT_USAGE
    if args.command == "check":
        return _run_check(args=args, stdout=stdout, stderr=stderr)

    logger.warning(f"Unsupported command (command={args.command})")
    stderr.write(f"Unsupported command: {args.command}\n")
    return EXIT_USAGE


def _run_check(args: argparse.Namespace, stdout: TextIO, stderr: TextIO) -> int:
    """Run check command.

    Args:
        args: Parsed CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    try:
        sources = discover_sources(
            paths=[Path(path) for path in args.paths], exclude=args.exclude
        )
    except DiscoveryError as exc:
        logger.warning(f"Source discovery failed (paths={args.paths} error={exc})")
        stderr.write(f"{exc}\n")
        return EXIT_USAGE
    if not sources:
        logger.warning(f"No MCBC sources found (paths={args.paths})")
        stderr.write("No .mcbc files found.\n")
        return EXIT_USAGE

    results = check_files(sources)
    failed = sum(1 for result in results if not result.success)
    logger.info(f"Check completed (files={len(results)} failed={failed})")

    if args.format == "json":
        payload = _build_payload(results)
        if args.output:
            output_path = Path(args.output)
            try:
                output_path.parent.mkdir(parents=True, exist_ok=True)
                output_path.write_text(
                    json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8"
                )
            except OSError as exc:
                logger.warning(
                    f"Failed to write JSON output file (output_path={args.output} error={exc})"
                )
                stderr.write(f"Failed to write JSON output file: {args.output}\n")
                return EXIT_USAGE
        else:
            _write_json(payload=payload, stdout=stdout)
    elif args.format == "tree":
        _write_trees(results=results, stdout=stdout)
    else:
        _write_table(results=results, stdout=stdout)
    return EXIT_DIAGNOSTICS if failed else EXIT_OK


def check_files(sources: list[Path]) -> list[FileResult]:
    """Parse every source with one reusable analyzer.

    Args:
        sources: Files to check.

    Returns:
        One result per file, in input order.
    """
    analyzer = McbcAnalyzer()
    results: list[FileResult] = []
    for source in sources:
        success = analyzer.parse_file(source)
        results.append(
            FileResult(
                path=source,
                success=success,
                diagnostics=analyzer.diagnostics,
                ast=analyzer.get_ast(),
            )
        )
    return results


def _build_payload(results: list[FileResult]) -> dict[str, Any]:
    return {
        "files": [
            {
                "path": str(result.path),
                "success": result.success,
                "errors": [str(diagnostic) for diagnostic in result.diagnostics],
                "ast": result.ast.to_dict(),
            }
            for result in results
        ]
    }


def _write_json(payload: dict[str, Any], stdout: TextIO) -> None:
    """Write the check payload in JSON format.

    Args:
        payload: Serializable check results.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    console.print(
        json.dumps(payload, indent=2, sort_keys=True),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def _write_table(results: list[FileResult], stdout: TextIO) -> None:
    """Write diagnostics as one table per file.

    Args:
        results: Check results.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    for result in results:
        console.rule(style=Style(color="cyan"), characters="-")
        console.print(Text(str(result.path), style="cyan"), soft_wrap=True)
        if result.success:
            console.print("ok", style=Style(color="green"), highlight=False)
            continue
        table = Table(show_header=True, show_lines=True, expand=True)
        table.add_column("line", ratio=1, justify="right", overflow="fold")
        table.add_column("category", ratio=3, overflow="fold")
        table.add_column("message", ratio=9, overflow="fold")
        for diagnostic in result.diagnostics:
            table.add_row(
                str(diagnostic.line_number),
                diagnostic.category,
                Text(diagnostic.message),
            )
        console.print(table)


def _write_trees(results: list[FileResult], stdout: TextIO) -> None:
    """Write each AST as a tree followed by its diagnostics.

    Args:
        results: Check results.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    for result in results:
        tree = Tree(Text(str(result.path), style="bold"))
        for child in result.ast.children:
            _add_tree_node(tree, child)
        console.print(tree)
        for diagnostic in result.diagnostics:
            console.print(Text(str(diagnostic), style="red"))


def _add_tree_node(branch: Tree, node: AstNode) -> None:
    label = Text.assemble((node.kind, "bold cyan"), f" L{node.line_number} ", node.content)
    if node.metadata.annotation:
        label.append(f"  @{node.metadata.annotation}", style="dim")
    subtree = branch.add(label)
    for child in node.children:
        _add_tree_node(subtree, child)


def main() -> None:
    """Run the CLI application and exit."""
    configure_logging()
    exit_code = run(sys.argv[1:], stdout=sys.stdout, stderr=sys.stderr)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
