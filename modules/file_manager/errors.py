"""
Exceptions raised by the file manager.

Every failure surfaced by FileOperationsManager is a FileOperationError.
The concrete classes also inherit from the matching built-in OS error so
callers that already catch FileNotFoundError and friends keep working.
"""

from typing import Optional


class FileOperationError(Exception):
    """Base exception for file manager operations."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class NotFoundError(FileOperationError, FileNotFoundError):
    """Raised when the source path does not exist."""
    pass


class AlreadyExistsError(FileOperationError, FileExistsError):
    """Raised when a creation target is already occupied."""
    pass


class TypeMismatchError(FileOperationError):
    """Raised in strict mode when a file was expected but a directory was found, or vice versa."""

    def __init__(self, message: str, path: Optional[str] = None, expected=None, actual=None):
        super().__init__(message, path)
        self.expected = expected
        self.actual = actual


class PermissionDeniedError(FileOperationError, PermissionError):
    """Raised when a path exists but cannot be accessed."""
    pass


class UnderlyingFailureError(FileOperationError):
    """Raised when the file system itself fails during create/copy/move/delete."""
    pass
