# Filer - Core Module
"""
Core infrastructure for Filer.
Audit logging and configuration shared by the file manager and the CLI.
"""

from .logger import AuditLogger, AuditEntry, ActionType, ActionStatus
from .config import FilerConfig, load_config, save_config

__all__ = [
    "AuditLogger",
    "AuditEntry",
    "ActionType",
    "ActionStatus",
    "FilerConfig",
    "load_config",
    "save_config",
]

__version__ = "0.1.0"
