"""
Configuration for Filer.

Settings live in a YAML file under a top-level "filer" key. A missing or
unreadable file means defaults; explicit values override them.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from rich.console import Console

from .logger import AuditLogger, DEFAULT_MEMORY_LIMIT


DEFAULT_CONFIG_PATH = "config.yaml"


def _default_config() -> Dict[str, Any]:
    """Return default configuration."""
    return {
        "app_name": "filer",
        "debug": False,
        "audit_log": None,
        "memory_limit": DEFAULT_MEMORY_LIMIT,
        "roots": {
            "documents": None,
            "resources": None,
            "library": None,
            "temporary": None,
        },
    }


@dataclass
class FilerConfig:
    """Resolved settings for building a FileOperationsManager."""
    app_name: str = "filer"
    debug: bool = False
    audit_log: Optional[str] = None
    memory_limit: int = DEFAULT_MEMORY_LIMIT
    roots: Dict[str, Optional[str]] = field(default_factory=dict)
    source: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: Optional[str] = None) -> "FilerConfig":
        """Build a config from a parsed mapping, filling gaps with defaults."""
        defaults = _default_config()
        roots = dict(defaults["roots"])
        roots.update(data.get("roots") or {})

        return cls(
            app_name=data.get("app_name") or defaults["app_name"],
            debug=bool(data.get("debug", defaults["debug"])),
            audit_log=data.get("audit_log", defaults["audit_log"]),
            memory_limit=int(data.get("memory_limit") or defaults["memory_limit"]),
            roots=roots,
            source=source,
        )

    def build_logger(self, console: Optional[Console] = None) -> AuditLogger:
        return AuditLogger(log_path=self.audit_log, console=console, memory_limit=self.memory_limit)

    def build_manager(self, logger: Optional[AuditLogger] = None, fs=None):
        """
        Create a FileOperationsManager from these settings.

        Args:
            logger: Audit logger to use; one is built from audit_log if omitted
            fs: File-system layer to inject

        Returns:
            A ready FileOperationsManager
        """
        from modules.file_manager import FileOperationsManager, resolve_roots

        roots = resolve_roots(app_name=self.app_name, overrides=self.roots)
        return FileOperationsManager(
            roots=roots,
            logger=logger or self.build_logger(),
            fs=fs,
            debug=self.debug,
        )


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> FilerConfig:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        FilerConfig, with defaults if the file is missing or unreadable
    """
    path = Path(config_path)
    if not path.exists():
        return FilerConfig.from_dict(_default_config())

    try:
        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return FilerConfig.from_dict(_default_config())

    if not isinstance(config, dict):
        return FilerConfig.from_dict(_default_config())

    section = config.get("filer", config) or {}
    return FilerConfig.from_dict(section, source=str(path))


def save_config(config: FilerConfig, config_path: str = DEFAULT_CONFIG_PATH) -> None:
    """
    Save settings to a YAML file, keeping any other top-level sections.

    Args:
        config: Settings to write
        config_path: Destination YAML file
    """
    path = Path(config_path)
    section = {
        "app_name": config.app_name,
        "debug": config.debug,
        "audit_log": config.audit_log,
        "memory_limit": config.memory_limit,
        "roots": dict(config.roots),
    }

    document: Dict[str, Any] = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            existing = yaml.safe_load(f) or {}
        if isinstance(existing, dict) and "filer" in existing:
            document = existing

    document["filer"] = section

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(document, f, default_flow_style=False)
