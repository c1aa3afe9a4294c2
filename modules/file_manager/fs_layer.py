"""
File-system access layer for the file manager.

Thin wrapper over os/shutil that the manager talks to instead of calling
the OS directly. Errors from the OS are not translated here; they propagate
as OSError and the manager classifies them.
"""

import errno
import os
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator, List, Optional, Union


PathLike = Union[str, Path]


class EntryKind(Enum):
    """What exists at a path."""
    ABSENT = "absent"
    FILE = "file"
    DIRECTORY = "directory"


@dataclass
class WalkEntry:
    """One step of a directory walk: a visited entry, or a skipped one with the reason."""
    path: str
    kind: EntryKind
    error: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.error is not None

    @property
    def name(self) -> str:
        return os.path.basename(self.path)


class LocalFileSystem:
    """
    Access to the local disk.

    Subclass and override single methods to simulate failures in tests.
    """

    def probe(self, path: PathLike) -> EntryKind:
        """
        Classify what exists at a path.

        Symlinks are followed, so a link to a directory reports DIRECTORY
        and a dangling link reports ABSENT.
        """
        path = str(path)
        if os.path.isdir(path):
            return EntryKind.DIRECTORY
        if os.path.exists(path):
            return EntryKind.FILE
        return EntryKind.ABSENT

    def occupied(self, path: PathLike) -> bool:
        """Whether anything, a dangling symlink included, sits at path."""
        return os.path.lexists(str(path))

    def is_readable(self, path: PathLike) -> bool:
        return os.access(str(path), os.R_OK)

    def make_directory(self, path: PathLike) -> None:
        """Create a single directory. The parent must already exist."""
        os.mkdir(str(path))

    def copy(self, src: PathLike, dst: PathLike) -> None:
        """
        Copy a file or a whole directory tree.

        A directory copied onto an existing directory is merged into it.
        """
        src, dst = str(src), str(dst)
        if os.path.isdir(src):
            shutil.copytree(src, dst, dirs_exist_ok=True)
        else:
            shutil.copy2(src, dst)

    def move(self, src: PathLike, dst: PathLike) -> None:
        """
        Move a file or a whole directory tree.

        A directory moved onto an existing directory has its children moved
        into it and is then removed. Name clashes and a destination inside
        the source are reported before anything moves.
        """
        src, dst = str(src), str(dst)
        if os.path.isdir(src):
            real_src, real_dst = os.path.realpath(src), os.path.realpath(dst)
            if real_src != real_dst and os.path.commonpath([real_src, real_dst]) == real_src:
                raise OSError(errno.EINVAL, f"Cannot move a directory into itself: {dst}")
        if os.path.isdir(src) and os.path.isdir(dst) and not os.path.samefile(src, dst):
            children = sorted(os.listdir(src))
            for child in children:
                target = os.path.join(dst, child)
                if os.path.lexists(target):
                    raise FileExistsError(f"Destination already contains '{child}': {dst}")
            for child in children:
                shutil.move(os.path.join(src, child), os.path.join(dst, child))
            os.rmdir(src)
        else:
            shutil.move(src, dst)

    def remove(self, path: PathLike) -> None:
        """Remove a file, or a directory with everything below it."""
        path = str(path)
        if os.path.isdir(path) and not os.path.islink(path):
            shutil.rmtree(path)
        else:
            os.unlink(path)

    def read_bytes(self, path: PathLike) -> bytes:
        return Path(path).read_bytes()

    def list_entries(self, directory: PathLike) -> List[str]:
        """Names of the direct entries of a directory."""
        return os.listdir(str(directory))

    def walk(self, root: PathLike) -> Iterator[WalkEntry]:
        """
        Depth-first walk of a directory tree.

        Every entry below root is yielded before its own children, siblings
        in name order. An entry that cannot be examined, or a directory that
        cannot be listed, is yielded once as skipped and the walk carries on.
        A symlink to a directory is reported as DIRECTORY but not descended
        into. Depth is bounded only by the tree itself.
        """
        # Each frame is an iterator over one directory's sorted entries.
        stack = []
        try:
            stack.append(iter(self._sorted_entries(root)))
        except OSError as e:
            yield WalkEntry(path=str(root), kind=EntryKind.ABSENT, error=str(e))
            return

        while stack:
            entry = next(stack[-1], None)
            if entry is None:
                stack.pop()
                continue

            try:
                is_real_dir = entry.is_dir(follow_symlinks=False)
                is_dir = is_real_dir or entry.is_dir()
            except OSError as e:
                yield WalkEntry(path=entry.path, kind=EntryKind.ABSENT, error=str(e))
                continue

            if not is_dir:
                yield WalkEntry(path=entry.path, kind=EntryKind.FILE)
                continue

            yield WalkEntry(path=entry.path, kind=EntryKind.DIRECTORY)
            if is_real_dir:
                try:
                    stack.append(iter(self._sorted_entries(entry.path)))
                except OSError as e:
                    yield WalkEntry(path=entry.path, kind=EntryKind.ABSENT, error=str(e))

    def _sorted_entries(self, directory: PathLike) -> List[os.DirEntry]:
        with os.scandir(str(directory)) as it:
            return sorted(it, key=lambda e: e.name)
