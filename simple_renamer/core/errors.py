"""
errors.py - Error Types

Every failure the engine reports derives from RenamerError and carries the
path (and, where there is one, the underlying cause) needed to show it to
the user.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class RenamerError(Exception):
    """Base exception for all renaming engine errors."""

    pass


class DirectoryListError(RenamerError):
    """Enumerating a directory failed (permission, I/O)."""

    def __init__(self, path: Path, cause: Optional[BaseException] = None):
        self.path = Path(path)
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to list folder {self.path}{detail}")


class MixedContentError(RenamerError):
    """The folder holds both files and subfolders at its top level."""

    def __init__(self, path: Path):
        self.path = Path(path)
        super().__init__(
            f"Cannot batch rename {self.path}: folder contains both files and folders."
        )


class AccessDeniedError(RenamerError):
    """Scoped access to a folder could not be acquired."""

    def __init__(self, path: Path, reason: str = ""):
        self.path = Path(path)
        self.reason = reason
        detail = f" ({reason})" if reason else ""
        super().__init__(f"Can't access folder {self.path}{detail}")


class MoveError(RenamerError):
    """A single move failed during staging, finalizing or undo."""

    def __init__(self, source: Path, target: Path, reason: str):
        self.source = Path(source)
        self.target = Path(target)
        self.reason = reason
        super().__init__(f"Cannot move {self.source.name} -> {self.target.name}: {reason}")

    @property
    def item_name(self) -> str:
        return self.source.name


class TemplateFormatError(RenamerError):
    """Template data could not be decoded or derived."""

    pass


@dataclass(frozen=True)
class UndoCollisionResolved:
    """Not an error: undo restored an item under a disambiguated name."""
    original: Path
    target: Path

    def __str__(self) -> str:
        return f"{self.original.name} was occupied, restored as {self.target.name}"
