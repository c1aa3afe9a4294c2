"""
Shared fixtures for the Filer tests.
"""

import os
import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.logger import AuditLogger
from modules.file_manager import FileOperationsManager, Roots


@pytest.hookimpl(tryfirst=True)
def pytest_sessionfinish(session, exitstatus):
    """Let pytest's tmp_path cleanup remove the very deep test trees.

    The limit is raised only after the tests have run, so the tests still
    execute under the interpreter's default recursion limit.
    """
    sys.setrecursionlimit(max(sys.getrecursionlimit(), 10000))


@pytest.fixture
def roots(tmp_path):
    """Four empty root directories under tmp_path."""
    paths = {}
    for name in ("documents", "resources", "library", "temporary"):
        path = tmp_path / "roots" / name
        path.mkdir(parents=True)
        paths[name] = str(path)
    return Roots(**paths)


@pytest.fixture
def logger():
    """In-memory audit logger."""
    return AuditLogger()


@pytest.fixture
def manager(roots, logger):
    """Manager over the temporary roots with debug logging off."""
    return FileOperationsManager(roots=roots, logger=logger)


@pytest.fixture
def workdir(tmp_path):
    """Scratch directory outside the roots."""
    path = tmp_path / "work"
    path.mkdir()
    return path


def snapshot(*directories):
    """Every path and file content below the given directories."""
    state = {}
    for directory in directories:
        for dirpath, dirnames, filenames in os.walk(directory):
            state[dirpath] = None
            for filename in filenames:
                full = os.path.join(dirpath, filename)
                state[full] = Path(full).read_bytes()
    return state
