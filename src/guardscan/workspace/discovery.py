"""File discovery — include/exclude globs, size ceiling and depth bound."""

from __future__ import annotations

import logging
import os
import re
from fnmatch import fnmatch
from pathlib import Path

from guardscan.workspace.models import WorkspaceScanOptions

logger = logging.getLogger(__name__)

# Directories to always skip
_SKIP_DIRS = {
    ".git",
    ".hg",
    ".svn",
    "__pycache__",
    ".mypy_cache",
    ".pytest_cache",
    ".ruff_cache",
    ".venv",
    "venv",
    ".tox",
    ".eggs",
}

_BRACES = re.compile(r"\{([^{}]*)\}")


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives: ``*.{js,ts}`` -> ``*.js``, ``*.ts``."""
    match = _BRACES.search(pattern)
    if not match:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(head + option + tail))
    return expanded


def glob_match(relative: str, pattern: str) -> bool:
    """Match a POSIX relative path against a workspace glob.

    A leading ``**/`` also matches at the top level, so ``**/*.py`` covers
    ``setup.py`` as well as ``pkg/mod.py``.
    """
    for candidate in expand_braces(pattern):
        if fnmatch(relative, candidate):
            return True
        while candidate.startswith("**/"):
            candidate = candidate[3:]
            if fnmatch(relative, candidate):
                return True
    return False


def is_excluded(relative: str, options: WorkspaceScanOptions) -> bool:
    return any(glob_match(relative, p) for p in options.exclude_patterns)


def is_included(relative: str, options: WorkspaceScanOptions) -> bool:
    return any(glob_match(relative, p) for p in options.include_patterns)


def matches(path: str | Path, root: str | Path, options: WorkspaceScanOptions) -> bool:
    """True if *path* lies under *root* and passes the include/exclude filters."""
    try:
        relative = Path(path).resolve().relative_to(Path(root).resolve())
    except ValueError:
        return False
    rel = relative.as_posix()
    if any(part in _SKIP_DIRS for part in relative.parts[:-1]):
        return False
    return is_included(rel, options) and not is_excluded(rel, options)


def discover_files(root: str | Path, options: WorkspaceScanOptions) -> list[Path]:
    """Walk *root* and return scannable files in a stable order.

    Excludes are applied before the size ceiling, and excluded directories
    are pruned rather than walked.
    """
    root = Path(root).resolve()
    found: list[Path] = []
    if not root.is_dir():
        logger.warning("Workspace root %s is not a directory", root)
        return found

    for current, dirs, files in os.walk(root):
        current_path = Path(current)
        rel_dir = current_path.relative_to(root)
        depth = len(rel_dir.parts)

        if depth >= options.scan_depth:
            dirs[:] = []
        else:
            # Prune skipped directories in-place
            dirs[:] = sorted(
                d
                for d in dirs
                if d not in _SKIP_DIRS
                and not d.endswith(".egg-info")
                and not is_excluded((rel_dir / d).as_posix() + "/", options)
            )

        for name in sorted(files):
            rel = (rel_dir / name).as_posix()
            if not is_included(rel, options) or is_excluded(rel, options):
                continue
            path = current_path / name
            try:
                if path.stat().st_size > options.max_file_size:
                    logger.debug("Skipping %s: larger than %d bytes", path, options.max_file_size)
                    continue
            except OSError:
                continue
            found.append(path)

    logger.debug("Discovered %d file(s) under %s", len(found), root)
    return found
