"""
Resolution of the four per-application root directories.
"""

import os
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple


ROOT_NAMES = ("documents", "resources", "library", "temporary")


@dataclass(frozen=True)
class Roots:
    """Absolute paths of the documents, resources, library and temporary roots."""
    documents: str
    resources: str
    library: str
    temporary: str

    def in_search_order(self) -> Tuple[Tuple[str, str], ...]:
        """(name, path) pairs in the order file discovery visits them."""
        return tuple((name, getattr(self, name)) for name in ROOT_NAMES)


def _absolute(path: str) -> str:
    return os.path.abspath(os.path.expanduser(str(path)))


def default_roots(app_name: str = "filer") -> Dict[str, str]:
    """
    Host defaults for each root.

    Args:
        app_name: Name used for the per-application library directory

    Returns:
        Mapping of root name to path
    """
    if getattr(sys, "argv", None) and sys.argv[0]:
        resources = str(Path(sys.argv[0]).resolve().parent)
    else:
        resources = os.getcwd()

    return {
        "documents": str(Path.home() / "Documents"),
        "resources": resources,
        "library": str(Path.home() / ".local" / "share" / app_name),
        "temporary": tempfile.gettempdir(),
    }


def resolve_roots(
    app_name: str = "filer",
    overrides: Optional[Dict[str, Optional[str]]] = None
) -> Roots:
    """
    Resolve all four roots once, applying any configured overrides.

    Args:
        app_name: Name used for the per-application library directory
        overrides: Root name to path; None values fall back to the host default

    Returns:
        Roots with absolute paths

    Raises:
        ValueError: If overrides names an unknown root
    """
    overrides = overrides or {}
    unknown = set(overrides) - set(ROOT_NAMES)
    if unknown:
        raise ValueError(f"Unknown root(s): {', '.join(sorted(unknown))}")

    paths = default_roots(app_name)
    for name, value in overrides.items():
        if value:
            paths[name] = value

    return Roots(**{name: _absolute(paths[name]) for name in ROOT_NAMES})
