"""Diagnostics — map file results onto editor-style markers and publish them.

The publisher is an external sink; the orchestrator only hands it lists of
:class:`Diagnostic` per file.  :class:`MemoryPublisher` keeps them in a dict
for the CLI and tests.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Protocol

from guardscan.scanner.models import Finding, FindingKind, Severity
from guardscan.workspace.models import FileScanResult


SOURCE = "guardscan"


class DiagnosticLevel(enum.Enum):
    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"


@dataclass(frozen=True)
class Diagnostic:
    """A zero-width marker at the first match of a finding (0-based position)."""

    line: int
    column: int
    message: str
    level: DiagnosticLevel
    code: str
    source: str = SOURCE


class DiagnosticsPublisher(Protocol):
    def set(self, path: str, diagnostics: list[Diagnostic]) -> None: ...

    def delete(self, path: str) -> None: ...

    def clear(self) -> None: ...


class MemoryPublisher:
    """Holds the latest diagnostics per file path."""

    def __init__(self) -> None:
        self.entries: dict[str, list[Diagnostic]] = {}

    def set(self, path: str, diagnostics: list[Diagnostic]) -> None:
        self.entries[path] = list(diagnostics)

    def delete(self, path: str) -> None:
        self.entries.pop(path, None)

    def clear(self) -> None:
        self.entries.clear()

    def get(self, path: str) -> list[Diagnostic]:
        return self.entries.get(path, [])


_VULNERABILITY_LEVELS = {
    Severity.CRITICAL: DiagnosticLevel.ERROR,
    Severity.HIGH: DiagnosticLevel.ERROR,
    Severity.MEDIUM: DiagnosticLevel.WARNING,
    Severity.LOW: DiagnosticLevel.INFORMATION,
}

_CODE_PREFIX = {
    FindingKind.VULNERABILITY: "security",
    FindingKind.SECRET: "secret",
    FindingKind.QUALITY: "quality",
}


def level_for(finding: Finding) -> DiagnosticLevel:
    if finding.kind == FindingKind.VULNERABILITY:
        return _VULNERABILITY_LEVELS[finding.severity]
    if finding.kind == FindingKind.SECRET:
        return DiagnosticLevel.WARNING
    return DiagnosticLevel.INFORMATION


def to_diagnostics(result: FileScanResult) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    counters = {kind: 0 for kind in FindingKind}
    for finding in result.findings:
        diagnostics.append(
            Diagnostic(
                line=(finding.line or 1) - 1,
                column=(finding.column or 1) - 1,
                message=finding.label,
                level=level_for(finding),
                code=f"{_CODE_PREFIX[finding.kind]}-{counters[finding.kind]}",
            )
        )
        counters[finding.kind] += 1
    return diagnostics
