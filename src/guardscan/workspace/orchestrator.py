"""Workspace orchestrator — bounded-concurrency scanning of workspace folders."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable, Iterable
from pathlib import Path

from guardscan.config import GuardConfig
from guardscan.scanner.analyzers import QualityScanner, SecretScanner, SecurityScanner
from guardscan.scanner.engine import PatternScanner
from guardscan.scanner.models import Severity
from guardscan.scanner.rules.loader import load_rule_files
from guardscan.scanner.severity import aggregate, classify
from guardscan.workspace.diagnostics import (
    DiagnosticsPublisher,
    MemoryPublisher,
    to_diagnostics,
)
from guardscan.workspace.discovery import discover_files, matches
from guardscan.workspace.models import (
    FileScanResult,
    ScanState,
    WorkspaceError,
    WorkspaceScanOptions,
)
from guardscan.workspace.scheduling import batched, yield_point

logger = logging.getLogger(__name__)


class WorkspaceScanner:
    """Scans every workspace root and keeps per-file results fresh.

    At most one full workspace scan runs at a time.  Files are scanned one at
    a time within a folder; up to ``folder_concurrency`` folders run at once.
    Only files with at least one finding are kept in the result map.
    """

    def __init__(
        self,
        roots: Iterable[str | Path],
        config: GuardConfig | None = None,
        publisher: DiagnosticsPublisher | None = None,
        security: PatternScanner | None = None,
        secrets: PatternScanner | None = None,
        quality: PatternScanner | None = None,
        on_update: Callable[[str, FileScanResult | None], None] | None = None,
    ) -> None:
        self.roots = [Path(r).resolve() for r in roots]
        self.config = config or GuardConfig()
        self.publisher: DiagnosticsPublisher = publisher or MemoryPublisher()
        self._on_update = on_update

        custom = load_rule_files(self.config.rules_files)
        cache_size = self.config.cache_size
        self.security = security or SecurityScanner(cache_size, custom.get("security", ()))
        self.secrets = secrets or SecretScanner(cache_size, custom.get("secrets", ()))
        self.quality = quality or QualityScanner(cache_size, custom.get("quality", ()))

        self._results: dict[str, FileScanResult] = {}
        self._state = ScanState.IDLE
        self._last_outcome: ScanState | None = None
        self._cancel = threading.Event()
        self._options = self.config.scan_options()

    @property
    def state(self) -> ScanState:
        """IDLE or SCANNING.

        A finished scan goes straight back to IDLE. How it ended is reported
        through :attr:`last_outcome`.
        """
        return self._state

    @property
    def last_outcome(self) -> ScanState | None:
        """How the most recent full scan ended (completed, cancelled or failed)."""
        return self._last_outcome

    @property
    def scanners(self) -> tuple[PatternScanner, ...]:
        return (self.security, self.secrets, self.quality)

    # -- full scan -----------------------------------------------------------

    async def scan_workspace(
        self,
        options: WorkspaceScanOptions | None = None,
        cancel_event: threading.Event | None = None,
    ) -> list[FileScanResult]:
        """Scan all roots and return the files with findings.

        If a scan is already running, the current result set is returned
        instead of starting another traversal.
        """
        if self._state is ScanState.SCANNING:
            logger.warning("Workspace scan already in progress")
            return self.get_results()

        self._state = ScanState.SCANNING
        self._cancel.clear()
        outcome = ScanState.FAILED

        def cancelled() -> bool:
            return self._cancel.is_set() or (
                cancel_event is not None and cancel_event.is_set()
            )

        try:
            if not self.roots:
                raise WorkspaceError("No workspace folder found")

            if options is not None:
                self._options = options.merged(self.config.exclude_patterns)
            else:
                self._options = self.config.scan_options()

            semaphore = asyncio.Semaphore(self.config.folder_concurrency)
            per_folder = await asyncio.gather(
                *(
                    self._scan_folder(root, self._options, semaphore, cancelled)
                    for root in self.roots
                )
            )
            results = [result for folder in per_folder for result in folder]

            await self._publish_all()
            outcome = ScanState.CANCELLED if cancelled() else ScanState.COMPLETED
            logger.info(
                "Workspace scan %s: %d file(s) with findings",
                outcome.value,
                len(results),
            )
            return results
        finally:
            self._last_outcome = outcome
            self._state = ScanState.IDLE

    def cancel(self) -> None:
        """Ask the running scan to stop before its next folder or file."""
        self._cancel.set()

    async def _scan_folder(
        self,
        root: Path,
        options: WorkspaceScanOptions,
        semaphore: asyncio.Semaphore,
        cancelled: Callable[[], bool],
    ) -> list[FileScanResult]:
        async with semaphore:
            if cancelled():
                return []
            try:
                files = await asyncio.to_thread(discover_files, root, options)
            except OSError as e:
                logger.warning("Cannot list %s: %s", root, e)
                return []

            results: list[FileScanResult] = []
            for index, path in enumerate(files):
                if cancelled():
                    break
                if index:
                    await yield_point(self.config.file_delay)
                result = await self.scan_file(path)
                if result is not None and result.has_findings:
                    results.append(result)
            return results

    async def _publish_all(self) -> None:
        results = list(self._results.values())
        for index, batch in enumerate(batched(results, self.config.diagnostics_batch_size)):
            if index:
                await yield_point()
            for result in batch:
                self.publisher.set(result.file_path, to_diagnostics(result))

    # -- single file ---------------------------------------------------------

    async def scan_file(self, path: str | Path) -> FileScanResult | None:
        """Scan one file with all three scanners and update the result map.

        Returns None when the file cannot be read or is blank.
        """
        key = _key(path)
        try:
            text = await asyncio.to_thread(
                Path(key).read_text, encoding="utf-8", errors="replace"
            )
        except OSError as e:
            logger.warning("Skipping %s: %s", key, e)
            return None

        if not text.strip():
            self._drop(key)
            return None

        security, secrets, quality = await asyncio.gather(
            self.security.ascan(text),
            self.secrets.ascan(text),
            self.quality.ascan(text),
        )
        findings = (*security.findings, *secrets.findings, *quality.findings)
        result = FileScanResult(
            file_path=key, findings=findings, severity=classify(findings)
        )

        if result.has_findings:
            self._results[key] = result
        else:
            self._drop(key)
        return result

    def _drop(self, key: str) -> None:
        if self._results.pop(key, None) is not None:
            self.publisher.delete(key)

    async def _rescan(self, path: str | Path) -> FileScanResult | None:
        key = _key(path)
        try:
            if Path(key).stat().st_size > self._options.max_file_size:
                logger.debug("Not rescanning %s: over size limit", key)
                return None
        except OSError as e:
            logger.warning("Skipping %s: %s", key, e)
            return None

        result = await self.scan_file(key)
        current = self._results.get(key)
        if current is not None:
            self.publisher.set(key, to_diagnostics(current))
        if self._on_update:
            self._on_update(key, current)
        return result

    # -- filesystem and editor events ----------------------------------------

    def is_watched(self, path: str | Path) -> bool:
        return any(matches(path, root, self._options) for root in self.roots)

    async def on_file_changed(self, path: str | Path) -> FileScanResult | None:
        if not (self.config.auto_analysis or self.config.analysis_on_save):
            return None
        if not self.is_watched(path):
            return None
        return await self._rescan(path)

    async def on_file_created(self, path: str | Path) -> FileScanResult | None:
        if not self.config.auto_analysis or not self.is_watched(path):
            return None
        return await self._rescan(path)

    async def on_file_deleted(self, path: str | Path) -> None:
        if self.is_watched(path):
            self.clear_file_results(path)

    async def on_document_saved(self, path: str | Path) -> FileScanResult | None:
        if not self.config.analysis_on_save or not self.is_watched(path):
            return None
        return await self._rescan(path)

    # -- maintenance ---------------------------------------------------------

    def get_results(self) -> list[FileScanResult]:
        return list(self._results.values())

    def get_file_result(self, path: str | Path) -> FileScanResult | None:
        return self._results.get(_key(path))

    def clear_file_results(self, path: str | Path) -> None:
        key = _key(path)
        self._results.pop(key, None)
        self.publisher.delete(key)
        if self._on_update:
            self._on_update(key, None)

    def clear_all_results(self) -> None:
        self._results.clear()
        self.publisher.clear()

    def clear_caches(self) -> None:
        for scanner in self.scanners:
            scanner.clear_cache()
        logger.info("Cleared scanner caches")

    def overall_severity(self) -> Severity:
        return aggregate(result.severity for result in self._results.values())


def _key(path: str | Path) -> str:
    return str(Path(path).resolve())
