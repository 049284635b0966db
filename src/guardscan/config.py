"""Global configuration — XDG paths, env vars, YAML settings file, defaults."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from guardscan.scanner.cache import DEFAULT_CACHE_SIZE
from guardscan.workspace.models import (
    DEFAULT_INCLUDE_PATTERNS,
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_SCAN_DEPTH,
    WorkspaceScanOptions,
)

logger = logging.getLogger(__name__)

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _default_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "guardscan"
    return Path.home() / ".config" / "guardscan"


def _parse_bool(value: object, name: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


def _as_patterns(value: object, name: str) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, list):
        raise ValueError(f"{name} must be a list of glob patterns")
    return tuple(str(v) for v in value)


@dataclass
class GuardConfig:
    """Application-wide configuration."""

    config_dir: Path = field(default_factory=_default_config_dir)
    include_patterns: tuple[str, ...] = DEFAULT_INCLUDE_PATTERNS
    # User excludes, merged onto the built-in defaults at scan time
    exclude_patterns: tuple[str, ...] = ()
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    scan_depth: int = DEFAULT_SCAN_DEPTH
    auto_analysis: bool = False
    analysis_on_save: bool = True
    folder_concurrency: int = 3
    file_delay: float = 0.01
    diagnostics_batch_size: int = 10
    cache_size: int = DEFAULT_CACHE_SIZE
    rules_files: list[Path] = field(default_factory=list)
    verbose: bool = False

    @classmethod
    def load(cls, path: str | Path | None = None) -> GuardConfig:
        """Load config from a settings file and environment variables with XDG defaults."""
        config = cls()

        settings = Path(path) if path else config.config_dir / "settings.yaml"
        if path or settings.is_file():
            config.apply_settings(settings)

        env_size = os.environ.get("GUARDSCAN_MAX_FILE_SIZE")
        if env_size:
            config.max_file_size = int(env_size)

        env_cache = os.environ.get("GUARDSCAN_CACHE_SIZE")
        if env_cache:
            config.cache_size = int(env_cache)

        env_auto = os.environ.get("GUARDSCAN_AUTO_ANALYSIS")
        if env_auto:
            config.auto_analysis = _parse_bool(env_auto, "GUARDSCAN_AUTO_ANALYSIS")

        env_save = os.environ.get("GUARDSCAN_ANALYSIS_ON_SAVE")
        if env_save:
            config.analysis_on_save = _parse_bool(env_save, "GUARDSCAN_ANALYSIS_ON_SAVE")

        # Add config dir's rules/ custom catalogs if present
        rules_dir = config.config_dir / "rules"
        if rules_dir.is_dir():
            config.rules_files.extend(sorted(rules_dir.glob("*.yaml")))

        return config

    def apply_settings(self, path: Path) -> None:
        """Overlay values from a YAML settings file."""
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        if data is None:
            return
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {path} must be a mapping")

        if "include_patterns" in data:
            self.include_patterns = _as_patterns(data["include_patterns"], "include_patterns")
        if "exclude_patterns" in data:
            self.exclude_patterns = _as_patterns(data["exclude_patterns"], "exclude_patterns")
        for key in (
            "max_file_size",
            "scan_depth",
            "folder_concurrency",
            "diagnostics_batch_size",
            "cache_size",
        ):
            if key in data:
                setattr(self, key, int(data[key]))
        if "file_delay" in data:
            self.file_delay = float(data["file_delay"])
        for key in ("auto_analysis", "analysis_on_save"):
            if key in data:
                setattr(self, key, _parse_bool(data[key], key))
        for entry in data.get("rules_files", []) or []:
            rules_path = Path(entry).expanduser()
            if not rules_path.is_absolute():
                rules_path = path.parent / rules_path
            self.rules_files.append(rules_path)

        logger.debug("Applied settings from %s", path)

    def scan_options(self) -> WorkspaceScanOptions:
        """Workspace options with the configured excludes merged onto the defaults."""
        return WorkspaceScanOptions(
            include_patterns=self.include_patterns,
            max_file_size=self.max_file_size,
            scan_depth=self.scan_depth,
        ).merged(self.exclude_patterns)
