"""
models_fs.py - Core Data Structure Definitions

Contains:
- Item: One file or folder subject to renaming
- BatchScope: Classification of the working set
- TemplateParts: Parsed naming template
- RenamePlan: Ordered batch of proposed names
- UndoRecord: One completed rename, for reversal
- RenameOptions: Engine options configuration
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple
import platform


class BatchScope(Enum):
    """What kind of items a batch renames"""
    FILES = "files"        # Extensions are preserved
    FOLDERS = "folders"    # Never receive an extension
    EMPTY = "empty"        # Nothing to rename

    @property
    def is_file(self) -> bool:
        return self is BatchScope.FILES


@dataclass
class Item:
    """A file or folder subject to renaming"""
    location: Path                          # Absolute path on disk
    proposed_name: str = ""                 # Recomputed on every plan
    group: Optional[Path] = None            # Subfolder the item was flattened from

    @property
    def name(self) -> str:
        return self.location.name

    @property
    def extension(self) -> str:
        """Extension without the leading dot ("" if none)"""
        return self.location.suffix[1:]

    @property
    def proposed_location(self) -> Path:
        return self.location.parent / self.proposed_name


@dataclass(frozen=True)
class TemplateParts:
    """Parsed template: literal base, first number, zero padding width"""
    base: str
    start: int = 1
    pad: int = 0


@dataclass(frozen=True)
class UndoRecord:
    """(original, final) location pair of one completed rename"""
    original: Path
    final: Path

    def to_dict(self) -> dict:
        return {"original": str(self.original), "final": str(self.final)}

    @classmethod
    def from_dict(cls, data: dict) -> "UndoRecord":
        return cls(original=Path(data["original"]), final=Path(data["final"]))


@dataclass
class RenamePlan:
    """Batch rename plan"""
    items: List[Item] = field(default_factory=list)
    scope: BatchScope = BatchScope.EMPTY
    template: str = ""
    parts: TemplateParts = field(default_factory=lambda: TemplateParts(base=""))
    warnings: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        grouped = {item.group is not None for item in self.items}
        if len(grouped) > 1:
            raise ValueError("A plan cannot mix grouped and ungrouped items")

    @property
    def is_grouped(self) -> bool:
        return bool(self.items) and self.items[0].group is not None

    @property
    def total_count(self) -> int:
        return len(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def pairs(self) -> List[Tuple[Item, str]]:
        """(item, final name) pairs in application order"""
        return [(item, item.proposed_name) for item in self.items]

    def groups(self) -> Iterator[Tuple[Optional[Path], List[Item]]]:
        """
        Yield (group, items) slices in plan order

        An ungrouped plan is a single slice with group None.
        """
        if not self.is_grouped:
            if self.items:
                yield None, list(self.items)
            return
        slices: Dict[Path, List[Item]] = {}
        for item in self.items:
            slices.setdefault(item.group, []).append(item)
        yield from slices.items()

    def summary(self) -> str:
        """Generate summary"""
        group_count = sum(1 for _ in self.groups())
        lines = [
            f"Rename Plan Summary:",
            f"  - Scope: {self.scope.value}",
            f"  - Template: {self.template!r}",
            f"  - Items: {self.total_count}",
            f"  - Groups: {group_count}",
            f"  - Warnings: {len(self.warnings)}",
        ]
        return "\n".join(lines)


@dataclass
class RenameOptions:
    """Rename options configuration"""
    # Scan options
    process_subfolders: bool = False    # Rename files inside each subfolder instead of the subfolders
    include_hidden: bool = False        # Whether to include hidden entries

    # Execution options
    temp_prefix: str = ".__tmp_rename__"
    log_dir: Optional[Path] = None      # Where to write execution logs (None disables)
    dry_run: bool = False               # Preview only, do not actually execute


def is_case_insensitive_fs() -> bool:
    """Detect if current filesystem is case-insensitive"""
    return platform.system() in ("Windows", "Darwin")
