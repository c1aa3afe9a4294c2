"""
File operations manager for Filer.

Directory and file lifecycle operations (create, copy, move, rename,
delete), file discovery across the four application roots, and data
retrieval. Every operation checks what is actually on disk first and
either proceeds or raises a FileOperationError; nothing is retried or
rolled back.
"""

import os
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from core.logger import AuditLogger, ActionType, ActionStatus
from .errors import (
    FileOperationError,
    NotFoundError,
    AlreadyExistsError,
    TypeMismatchError,
    PermissionDeniedError,
    UnderlyingFailureError,
)
from .fs_layer import EntryKind, LocalFileSystem
from .roots import Roots, resolve_roots


PathLike = Union[str, Path]


class Mode(Enum):
    """How an operation treats a file where a directory was expected, or the reverse."""
    STRICT = "strict"           # Type mismatch fails the operation
    PERMISSIVE = "permissive"   # Operate on whatever is there


def _join_name(parent: str, name: str) -> str:
    """parent + name, where name may or may not start with a separator."""
    if name.startswith(("/", os.sep)):
        return parent.rstrip("/" + os.sep) + name
    return os.path.join(parent, name)


class FileOperationsManager:
    """
    Operations on files and directories under the application roots.

    Holds the four resolved root paths and a debug flag. With debug logging
    off only failures are written to the audit log; with it on, every step
    and the likely reason behind each failure are written too. The flag
    never changes what an operation does.
    """

    def __init__(
        self,
        roots: Optional[Roots] = None,
        logger: Optional[AuditLogger] = None,
        fs: Optional[LocalFileSystem] = None,
        debug: bool = False,
        app_name: str = "filer"
    ):
        """
        Initialize FileOperationsManager.

        Args:
            roots: Pre-resolved roots; resolved from the host if omitted
            logger: Audit logger instance
            fs: File-system access layer
            debug: Initial value of the debug flag
            app_name: Used when resolving the library root
        """
        self._roots = roots or resolve_roots(app_name=app_name)
        self.logger = logger or AuditLogger()
        self.fs = fs or LocalFileSystem()
        self.debug_logging = debug

    @property
    def roots(self) -> Roots:
        return self._roots

    @property
    def documents_root(self) -> str:
        return self._roots.documents

    @property
    def resources_root(self) -> str:
        return self._roots.resources

    @property
    def library_root(self) -> str:
        return self._roots.library

    @property
    def temporary_root(self) -> str:
        return self._roots.temporary

    def set_debug_mode(self, enabled: bool) -> None:
        """Turn verbose audit logging on or off."""
        self.debug_logging = bool(enabled)
        self._info(ActionType.CONFIG, "Debug logging enabled")

    # Logging

    def _info(
        self,
        action_type: ActionType,
        description: str,
        status: ActionStatus = ActionStatus.INFO,
        result: Optional[str] = None,
        **metadata: Any
    ) -> None:
        if not self.debug_logging:
            return
        self.logger.log_action(
            action_type=action_type,
            description=description,
            status=status,
            result=result,
            metadata=metadata
        )

    def _fail(
        self,
        action_type: ActionType,
        description: str,
        error: FileOperationError,
        reason: str
    ) -> FileOperationError:
        """Log a failure and hand back the error for the caller to raise."""
        metadata = {"path": error.path, "error": type(error).__name__}
        if self.debug_logging:
            metadata["reason"] = reason
        self.logger.log_action(
            action_type=action_type,
            description=f"Could not {description[0].lower()}{description[1:]}",
            status=ActionStatus.FAILED,
            result=str(error),
            metadata=metadata
        )
        return error

    def _run(self, action_type: ActionType, description: str, path: str, func, *args) -> None:
        """Call into the file-system layer, turning OS errors into UnderlyingFailureError."""
        try:
            func(*args)
        except OSError as e:
            error = UnderlyingFailureError(f"{description} failed: {e}", path)
            raise self._fail(action_type, description, error, reason=type(e).__name__) from e

        self._info(action_type, description, status=ActionStatus.EXECUTED)

    # Path and type resolution

    def entry_kind(self, path: PathLike) -> EntryKind:
        """What exists at path: ABSENT, FILE or DIRECTORY."""
        return self.fs.probe(path)

    def _check_source(
        self,
        path: str,
        expected: EntryKind,
        mode: Mode,
        action_type: ActionType,
        description: str
    ) -> EntryKind:
        """
        Validate the source of an operation before anything is touched.

        Args:
            path: Source path
            expected: Kind the operation works on
            mode: STRICT fails on a kind mismatch, PERMISSIVE lets it through
            action_type: For the audit log
            description: For the audit log

        Returns:
            The actual kind found at path

        Raises:
            NotFoundError: If nothing exists at path
            PermissionDeniedError: If path cannot be read
            TypeMismatchError: If the kind is wrong and mode is STRICT
        """
        kind = self.fs.probe(path)

        if kind is EntryKind.ABSENT:
            error = NotFoundError(f"No such file or directory: {path}", path)
            raise self._fail(action_type, description, error, "Path does not exist.")

        if not self.fs.is_readable(path):
            error = PermissionDeniedError(f"Permission denied: {path}", path)
            raise self._fail(action_type, description, error, "Permissions error.")

        if kind is not expected:
            if mode is Mode.STRICT:
                error = TypeMismatchError(
                    f"Expected a {expected.value}, found a {kind.value}: {path}",
                    path,
                    expected=expected,
                    actual=kind
                )
                raise self._fail(action_type, description, error, f"Source is not a {expected.value}.")
            self._info(action_type, f"Ignoring type of {path} ({kind.value})", mode=mode.value)

        return kind

    def _resolve_file_destination(self, src: str, dst: str) -> str:
        """
        Work out where a copied or moved file lands.

        A missing destination is created as a directory first. Into a
        directory the file keeps its own name; an existing file is used
        as-is and gets overwritten.
        """
        kind = self.fs.probe(dst)
        if kind is EntryKind.ABSENT:
            self.create_directory(dst)
            kind = EntryKind.DIRECTORY

        if kind is EntryKind.DIRECTORY:
            return os.path.join(dst, os.path.basename(src.rstrip("/" + os.sep)))
        return dst

    # Directory operations

    def create_directory(self, path: PathLike) -> str:
        """
        Create a single directory. Its parent must already exist.

        Args:
            path: Directory to create

        Returns:
            The created path

        Raises:
            AlreadyExistsError: If anything already exists at path
            UnderlyingFailureError: If the directory could not be created
        """
        path = str(path)
        description = f"Create directory: {path}"

        if self.fs.occupied(path):
            error = AlreadyExistsError(f"Already exists: {path}", path)
            raise self._fail(ActionType.CREATE, description, error, "Directory already exists.")

        self._run(ActionType.CREATE, description, path, self.fs.make_directory, path)
        return path

    def create_subdirectory(self, name: str, parent: PathLike) -> str:
        """
        Create a directory called name inside parent.

        A single leading separator on name is ignored.
        """
        name = str(name)
        if name.startswith(("/", os.sep)):
            name = name[1:]
        return self.create_directory(_join_name(str(parent), name))

    def copy_directory(self, src: PathLike, dst: PathLike, mode: Mode = Mode.STRICT) -> str:
        """
        Copy a directory and everything below it to dst.

        dst names the copy itself. If it already exists as a directory the
        source's contents are merged into it.

        Returns:
            The destination path
        """
        src, dst, mode = str(src), str(dst), Mode(mode)
        description = f"Copy directory: {src} -> {dst}"

        self._check_source(src, EntryKind.DIRECTORY, mode, ActionType.COPY, description)
        self._run(ActionType.COPY, description, dst, self.fs.copy, src, dst)
        return dst

    def move_directory(self, src: PathLike, dst: PathLike, mode: Mode = Mode.STRICT) -> str:
        """
        Move a directory and everything below it to dst.

        If dst already exists as a directory, the source's children are
        moved into it and the emptied source is removed.

        Returns:
            The destination path
        """
        src, dst, mode = str(src), str(dst), Mode(mode)
        description = f"Move directory: {src} -> {dst}"

        self._check_source(src, EntryKind.DIRECTORY, mode, ActionType.MOVE, description)
        self._run(ActionType.MOVE, description, dst, self.fs.move, src, dst)
        return dst

    def rename_directory(self, path: PathLike, new_name: str, mode: Mode = Mode.STRICT) -> str:
        """
        Rename a directory by creating a sibling called new_name and moving
        the contents into it.

        A new_name starting with a separator is appended to the parent
        path as-is. If the move fails after the sibling was created, the
        empty sibling stays behind.

        Args:
            path: Directory to rename
            new_name: New name, at the same level as path
            mode: STRICT or PERMISSIVE

        Returns:
            Path of the renamed directory

        Raises:
            AlreadyExistsError: If the sibling already exists; path is untouched
        """
        path, mode = str(path), Mode(mode)
        parent = os.path.dirname(path.rstrip("/" + os.sep))
        target = _join_name(parent, str(new_name))
        description = f"Rename directory: {path} -> {target}"

        self._check_source(path, EntryKind.DIRECTORY, mode, ActionType.RENAME, description)
        self._info(ActionType.RENAME, description)

        self.create_directory(target)
        self.move_directory(path, target, mode)
        return target

    def delete_directory(self, path: PathLike, mode: Mode = Mode.STRICT) -> None:
        """Delete a directory and everything below it."""
        path, mode = str(path), Mode(mode)
        description = f"Delete directory: {path}"

        self._check_source(path, EntryKind.DIRECTORY, mode, ActionType.DELETE, description)
        self._run(ActionType.DELETE, description, path, self.fs.remove, path)

    # File operations

    def copy_file(self, src: PathLike, dst: PathLike, mode: Mode = Mode.STRICT) -> str:
        """
        Copy a file into a directory, or over an existing file.

        Args:
            src: File to copy
            dst: Destination directory (created if missing) or file to overwrite
            mode: STRICT or PERMISSIVE

        Returns:
            Full path of the copy
        """
        src, dst, mode = str(src), str(dst), Mode(mode)
        description = f"Copy file: {src} -> {dst}"

        self._check_source(src, EntryKind.FILE, mode, ActionType.COPY, description)
        target = self._resolve_file_destination(src, dst)
        self._info(ActionType.COPY, f"Full path of file copy: {target}")

        self._run(ActionType.COPY, f"Copy file: {src} -> {target}", target, self.fs.copy, src, target)
        return target

    def move_file(self, src: PathLike, dst: PathLike, mode: Mode = Mode.STRICT) -> str:
        """
        Move a file into a directory, or over an existing file.

        Args:
            src: File to move
            dst: Destination directory (created if missing) or file to overwrite
            mode: STRICT or PERMISSIVE

        Returns:
            Full path of the moved file
        """
        src, dst, mode = str(src), str(dst), Mode(mode)
        description = f"Move file: {src} -> {dst}"

        self._check_source(src, EntryKind.FILE, mode, ActionType.MOVE, description)
        target = self._resolve_file_destination(src, dst)
        self._info(ActionType.MOVE, f"Full path of file move: {target}")

        self._run(ActionType.MOVE, f"Move file: {src} -> {target}", target, self.fs.move, src, target)
        return target

    def delete_file(self, path: PathLike, mode: Mode = Mode.STRICT) -> None:
        """Delete a file."""
        path, mode = str(path), Mode(mode)
        description = f"Delete file: {path}"

        self._check_source(path, EntryKind.FILE, mode, ActionType.DELETE, description)
        self._run(ActionType.DELETE, description, path, self.fs.remove, path)

    def file_exists(self, path: PathLike) -> bool:
        return self.fs.probe(path) is not EntryKind.ABSENT

    def count_entries(self, directory: PathLike) -> int:
        """
        Number of direct entries in a directory.

        Returns 0 when the directory cannot be listed, so an empty directory
        and an unreadable one look the same here.
        """
        try:
            return len(self.fs.list_entries(directory))
        except OSError as e:
            self.logger.log_action(
                action_type=ActionType.READ,
                description=f"Could not list directory: {directory}",
                status=ActionStatus.FAILED,
                result=str(e)
            )
            return 0

    def read_file(self, path: PathLike) -> Optional[bytes]:
        """
        Full contents of a file.

        Returns:
            The bytes, or None if the file is missing or could not be read
        """
        path = str(path)
        if self.fs.probe(path) is EntryKind.ABSENT:
            self._info(ActionType.READ, f"File does not exist: {path}")
            return None

        try:
            data = self.fs.read_bytes(path)
        except OSError as e:
            self.logger.log_action(
                action_type=ActionType.READ,
                description=f"Could not read file: {path}",
                status=ActionStatus.FAILED,
                result=str(e)
            )
            return None

        self._info(ActionType.READ, f"Read file: {path}", result=f"{len(data)} bytes")
        return data

    # Discovery

    def _search_tree(self, filename: str, root: str) -> Optional[str]:
        """First regular file below root whose name is exactly filename."""
        for entry in self.fs.walk(root):
            if entry.skipped:
                self._info(ActionType.SEARCH, f"Skipped: {entry.path}", status=ActionStatus.SKIPPED, result=entry.error)
                continue
            if entry.kind is EntryKind.FILE and entry.name == filename:
                return entry.path
        return None

    def find_path_in(self, filename: str, directory: PathLike) -> Optional[str]:
        """
        Search one directory tree for a file called filename.

        Returns:
            Full path of the first match, or None
        """
        directory = str(directory)
        kind = self.fs.probe(directory)
        if kind is not EntryKind.DIRECTORY:
            problem = "does not exist" if kind is EntryKind.ABSENT else "is not a directory"
            self.logger.log_action(
                action_type=ActionType.SEARCH,
                description=f"Search location {problem}: {directory}",
                status=ActionStatus.FAILED
            )
            return None

        self._info(ActionType.SEARCH, f"Looking for '{filename}' in {directory}")
        found = self._search_tree(filename, directory)
        if found is None:
            self._info(ActionType.SEARCH, f"File not found: {filename}", status=ActionStatus.FAILED)
        return found

    def find_path(self, filename: str) -> Optional[str]:
        """
        Search the documents, resources, library and temporary roots, in
        that order, for a file called filename.

        Each root is searched to the bottom before the next one starts.

        Returns:
            Full path of the first match, or None
        """
        self._info(ActionType.SEARCH, f"Looking for '{filename}' in all roots")

        for name, root in self._roots.in_search_order():
            if self.fs.probe(root) is not EntryKind.DIRECTORY:
                self._info(ActionType.SEARCH, f"Skipped {name} root: {root}", status=ActionStatus.SKIPPED)
                continue

            found = self._search_tree(filename, root)
            if found is not None:
                self._info(ActionType.SEARCH, f"Found '{filename}' in {name} root", result=found)
                return found

        self.logger.log_action(
            action_type=ActionType.SEARCH,
            description=f"File not found in any root: {filename}",
            status=ActionStatus.FAILED
        )
        return None

    def _locate(self, filename: str, action_type: ActionType, description: str) -> str:
        path = self.find_path(filename)
        if path is None:
            error = NotFoundError(f"File not found in any root: {filename}", filename)
            raise self._fail(action_type, description, error, "File does not exist.")
        return path

    def find_and_copy(self, filename: str, dst: PathLike, mode: Mode = Mode.STRICT) -> str:
        """Find a file by name across the roots, then copy it to dst."""
        path = self._locate(filename, ActionType.COPY, f"Copy '{filename}' -> {dst}")
        return self.copy_file(path, dst, mode)

    def find_and_move(self, filename: str, dst: PathLike, mode: Mode = Mode.STRICT) -> str:
        """Find a file by name across the roots, then move it to dst."""
        path = self._locate(filename, ActionType.MOVE, f"Move '{filename}' -> {dst}")
        return self.move_file(path, dst, mode)

    def find_and_delete(self, filename: str, mode: Mode = Mode.STRICT) -> str:
        """
        Find a file by name across the roots, then delete it.

        Returns:
            Path of the deleted file
        """
        path = self._locate(filename, ActionType.DELETE, f"Delete '{filename}'")
        self.delete_file(path, mode)
        return path
