"""
fs_access.py - File System Collaborators

Provides:
- Directory listing (hidden entries skipped)
- Scoped access bracketing for folders
- Existence checks and non-overwriting moves
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional
import logging
import os
import stat

from .errors import AccessDeniedError, DirectoryListError, MoveError
from .models_fs import is_case_insensitive_fs

logger = logging.getLogger(__name__)


@dataclass
class DirectoryListing:
    """Immediate children of a directory, split by kind"""
    files: List[Path] = field(default_factory=list)
    subdirectories: List[Path] = field(default_factory=list)


def is_hidden(entry: os.DirEntry) -> bool:
    """Dot-files everywhere, plus the hidden attribute on Windows"""
    if entry.name.startswith('.'):
        return True
    attributes = getattr(entry.stat(follow_symlinks=False), "st_file_attributes", 0)
    return bool(attributes & getattr(stat, "FILE_ATTRIBUTE_HIDDEN", 0))


@dataclass(frozen=True)
class AccessToken:
    """Proof that access to path was granted"""
    path: Path
    write: bool = False


class ScopedAccessor:
    """
    Grants access to a folder for the duration of an operation

    The default implementation is a no-op, for platforms without
    sandboxing.
    """

    def begin_access(self, path: Path, write: bool = False) -> AccessToken:
        return AccessToken(Path(path), write)

    def end_access(self, token: AccessToken) -> None:
        pass


class NullAccessor(ScopedAccessor):
    """Grants everything without checks"""

    pass


class LocalAccessor(ScopedAccessor):
    """Verifies permissions before granting access"""

    def begin_access(self, path: Path, write: bool = False) -> AccessToken:
        path = Path(path)
        if not path.is_dir():
            raise AccessDeniedError(path, "folder does not exist")

        mode = os.R_OK | os.X_OK
        if write:
            mode |= os.W_OK
        if not os.access(path, mode):
            kind = "read/write" if write else "read"
            raise AccessDeniedError(path, f"no {kind} permission")

        logger.debug("Access granted to %s (write=%s)", path, write)
        return AccessToken(path, write)

    def end_access(self, token: AccessToken) -> None:
        logger.debug("Access released for %s", token.path)


@contextmanager
def scoped_access(
    accessor: ScopedAccessor,
    path: Path,
    write: bool = False
) -> Iterator[AccessToken]:
    """Hold access to path only for the body of the with block"""
    token = accessor.begin_access(path, write=write)
    try:
        yield token
    finally:
        accessor.end_access(token)


class LocalFileSystem:
    """Directory listing, existence checks and moves on the local disk"""

    def __init__(self, include_hidden: bool = False, case_insensitive: Optional[bool] = None):
        self.include_hidden = include_hidden
        if case_insensitive is None:
            case_insensitive = is_case_insensitive_fs()
        self.case_insensitive = case_insensitive

    def list(self, path: Path) -> DirectoryListing:
        """
        List the immediate regular files and subdirectories of path

        Symlinks and special files are ignored.

        Raises:
            DirectoryListError: Enumeration failed
        """
        path = Path(path)
        listing = DirectoryListing()
        try:
            with os.scandir(path) as entries:
                for entry in entries:
                    if not self.include_hidden and is_hidden(entry):
                        continue
                    if entry.is_dir(follow_symlinks=False):
                        listing.subdirectories.append(Path(entry.path))
                    elif entry.is_file(follow_symlinks=False):
                        listing.files.append(Path(entry.path))
        except OSError as e:
            raise DirectoryListError(path, e) from e
        return listing

    def exists(self, path: Path) -> bool:
        return os.path.lexists(path)

    def _is_case_change(self, src: Path, dst: Path) -> bool:
        return (self.case_insensitive and
                src.parent == dst.parent and
                src.name != dst.name and
                src.name.casefold() == dst.name.casefold())

    def move(self, src: Path, dst: Path) -> None:
        """
        Move src to dst without ever overwriting

        Raises:
            MoveError: dst already exists or the system refused the move
        """
        src, dst = Path(src), Path(dst)
        if self.exists(dst) and not self._is_case_change(src, dst):
            raise MoveError(src, dst, "destination already exists")
        try:
            os.rename(src, dst)
        except OSError as e:
            raise MoveError(src, dst, e.strerror or str(e)) from e
        logger.debug("Moved %s -> %s", src, dst)
