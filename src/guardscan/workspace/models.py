"""Workspace data models — per-file results, scan options and orchestrator state."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace

from guardscan.scanner.models import Finding, FindingKind, Severity

DEFAULT_INCLUDE_PATTERNS = (
    "**/*.{js,ts,jsx,tsx,py,java,cs,php,rb,go,rs,cpp,c,h,hpp}",
)
DEFAULT_EXCLUDE_PATTERNS = (
    "**/node_modules/**",
    "**/dist/**",
    "**/build/**",
    "**/*.min.js",
    "**/vendor/**",
)
DEFAULT_MAX_FILE_SIZE = 512 * 1024
DEFAULT_SCAN_DEPTH = 8


class WorkspaceError(RuntimeError):
    """A workspace scan could not proceed at all."""


class ScanState(enum.Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class WorkspaceScanOptions:
    include_patterns: tuple[str, ...] = DEFAULT_INCLUDE_PATTERNS
    exclude_patterns: tuple[str, ...] = DEFAULT_EXCLUDE_PATTERNS
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    scan_depth: int = DEFAULT_SCAN_DEPTH

    def merged(self, extra_excludes: tuple[str, ...] | list[str] = ()) -> WorkspaceScanOptions:
        """Copy with the built-in excludes and *extra_excludes* folded in, deduplicated."""
        combined = dict.fromkeys(
            [*DEFAULT_EXCLUDE_PATTERNS, *self.exclude_patterns, *extra_excludes]
        )
        return replace(self, exclude_patterns=tuple(combined))


@dataclass(frozen=True)
class FileScanResult:
    """Merged security, secret and quality findings for one file."""

    file_path: str
    findings: tuple[Finding, ...] = field(default_factory=tuple)
    severity: Severity = Severity.LOW

    def _labels(self, kind: FindingKind) -> list[str]:
        return [f.label for f in self.findings if f.kind == kind]

    @property
    def vulnerabilities(self) -> list[str]:
        return self._labels(FindingKind.VULNERABILITY)

    @property
    def secrets(self) -> list[str]:
        return self._labels(FindingKind.SECRET)

    @property
    def quality_issues(self) -> list[str]:
        return self._labels(FindingKind.QUALITY)

    @property
    def has_findings(self) -> bool:
        return bool(self.findings)
