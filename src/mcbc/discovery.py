# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Discover MCBC source files beneath CLI path arguments."""

import logging
import os
from pathlib import Path

import pathspec

logger = logging.getLogger(__name__)

SOURCE_GLOB = "*.mcbc"


class DiscoveryError(RuntimeError):
    """Represent an unusable path argument."""


class IgnoreMatcher:
    """Match project paths against gitignore-style patterns."""

    def __init__(self, spec: pathspec.GitIgnoreSpec) -> None:
        """Initialize matcher.

        Args:
            spec: Compiled gitignore matcher.
        """
        self._spec = spec

    @classmethod
    def from_root(cls, root: Path, extra_patterns: list[str]) -> "IgnoreMatcher":
        """Build matcher from the root ``.gitignore`` and extra patterns.

        Args:
            root: Directory being searched.
            extra_patterns: Additional gitignore-style patterns.

        Returns:
            Configured ignore matcher.

        Raises:
            OSError: If ``.gitignore`` cannot be read.
            UnicodeDecodeError: If ``.gitignore`` contains invalid UTF-8.
        """
        patterns: list[str] = []
        ignore_path = root / ".gitignore"
        if ignore_path.is_file():
            patterns.extend(ignore_path.read_text(encoding="utf-8").splitlines())
        patterns.extend(extra_patterns)
        return cls(spec=pathspec.GitIgnoreSpec.from_lines(patterns))

    def matches(self, relative_path: str) -> bool:
        """Check whether a root-relative path should be skipped."""
        normalized = relative_path.replace(os.sep, "/").strip("/")
        if not normalized:
            return False
        return self._spec.match_file(normalized)


def discover_sources(paths: list[Path], exclude: list[str]) -> list[Path]:
    """Expand path arguments into MCBC source files.

    Files are taken as given. Directories are searched recursively for
    ``*.mcbc`` files, skipping paths matched by the directory's ``.gitignore``
    or by ``exclude``.

    Args:
        paths: File or directory paths.
        exclude: Gitignore-style exclusion patterns.

    Returns:
        Source files in argument order, directory contents sorted.

    Raises:
        DiscoveryError: If a path does not exist or an ignore file is unreadable.
    """
    sources: list[Path] = []
    for path in paths:
        if not path.exists():
            raise DiscoveryError(f"Path does not exist: {path}")
        if path.is_file():
            sources.append(path)
            continue
        try:
            matcher = IgnoreMatcher.from_root(path, exclude)
        except (OSError, UnicodeDecodeError) as exc:
            raise DiscoveryError(f"Cannot read ignore file in {path}: {exc}") from exc
        skipped = 0
        for candidate in sorted(path.rglob(SOURCE_GLOB)):
            if not candidate.is_file():
                continue
            if matcher.matches(candidate.relative_to(path).as_posix()):
                skipped += 1
                continue
            sources.append(candidate)
        logger.debug(f"Directory scanned (path={path} sources={len(sources)} skipped={skipped})")
    return sources
