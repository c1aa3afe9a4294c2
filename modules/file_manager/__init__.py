"""
File manager module for Filer.

Create, copy, move, rename and delete files and directories, find files by
name across the application roots, and read their contents.
"""

from .errors import (
    FileOperationError,
    NotFoundError,
    AlreadyExistsError,
    TypeMismatchError,
    PermissionDeniedError,
    UnderlyingFailureError,
)
from .fs_layer import EntryKind, LocalFileSystem, WalkEntry
from .manager import FileOperationsManager, Mode
from .roots import Roots, resolve_roots

__all__ = [
    'FileOperationsManager',
    'Mode',
    'EntryKind',
    'LocalFileSystem',
    'WalkEntry',
    'Roots',
    'resolve_roots',
    'FileOperationError',
    'NotFoundError',
    'AlreadyExistsError',
    'TypeMismatchError',
    'PermissionDeniedError',
    'UnderlyingFailureError',
]
