"""
undo_log.py - Undo Support

Holds the (original, final) pairs of the most recent batch and reverses
them once. Only a single batch is ever kept.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple
import json
import logging
import uuid

from .errors import MoveError, UndoCollisionResolved
from .fs_access import LocalFileSystem
from .models_fs import UndoRecord

logger = logging.getLogger(__name__)


@dataclass
class UndoResult:
    """Outcome of one undo call"""
    restored: List[Path] = field(default_factory=list)
    retargeted: List[UndoCollisionResolved] = field(default_factory=list)
    failed: List[MoveError] = field(default_factory=list)
    stranded: List[Path] = field(default_factory=list)    # Left at temporary names

    @property
    def success(self) -> bool:
        return not self.failed

    @property
    def error(self) -> Optional[str]:
        """First failure message, if any"""
        if not self.failed:
            return None
        first = self.failed[0]
        return f"Failed to undo rename for {first.source.name}: {first.reason}"


def undo_target(original: Path, fs: LocalFileSystem) -> Path:
    """
    original, or original with _undo1, _undo2, ... before the extension
    when original is occupied
    """
    target = original
    n = 1
    while fs.exists(target):
        target = original.with_name(f"{original.stem}_undo{n}{original.suffix}")
        n += 1
    return target


def _staging_path(final: Path, fs: LocalFileSystem, prefix: str) -> Path:
    """Unused temporary path next to final, keeping its suffix"""
    while True:
        candidate = final.parent / f"{prefix}{uuid.uuid4().hex}{final.suffix}"
        if not fs.exists(candidate):
            return candidate


class UndoLog:
    """The most recently executed batch, reversible once"""

    def __init__(self, records: Optional[Iterable[UndoRecord]] = None):
        self._records: List[UndoRecord] = list(records or [])

    @property
    def records(self) -> List[UndoRecord]:
        return list(self._records)

    @property
    def can_undo(self) -> bool:
        return bool(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def replace(self, records: Iterable[UndoRecord]) -> None:
        """Drop the previous batch and remember this one"""
        self._records = list(records)
        logger.debug("Undo log now holds %d records", len(self._records))

    def clear(self) -> None:
        self._records = []

    def undo(self, fs: Optional[LocalFileSystem] = None,
             temp_prefix: str = ".__tmp_rename__") -> UndoResult:
        """
        Move every final location back to its original, in recorded order

        Two phases, like execution: every final location is first moved to
        a temporary name, so originals still held by the same batch are
        free again. An original that is occupied after staging belongs to
        someone else and gets an _undoN name instead.

        Keeps going after a failure. The log is empty afterwards whatever
        the outcome.
        """
        fs = fs or LocalFileSystem()
        result = UndoResult()

        # Phase 1: Move every final location out of the way
        staged: List[Tuple[UndoRecord, Path]] = []
        for record in self._records:
            temp_path = _staging_path(record.final, fs, temp_prefix)
            try:
                fs.move(record.final, temp_path)
            except MoveError as e:
                logger.error("Undo failed for %s: %s", record.final.name, e.reason)
                result.failed.append(e)
                continue
            staged.append((record, temp_path))

        # Phase 2: Temporary names to originals
        for record, temp_path in staged:
            target = undo_target(record.original, fs)
            try:
                fs.move(temp_path, target)
            except MoveError as e:
                logger.error("Undo failed for %s: %s", record.final.name, e.reason)
                result.failed.append(MoveError(record.final, target, e.reason))
                result.stranded.append(temp_path)
                continue
            if target != record.original:
                notice = UndoCollisionResolved(original=record.original, target=target)
                logger.info("Undo retargeted: %s", notice)
                result.retargeted.append(notice)
            result.restored.append(target)

        logger.info("Undo restored %d of %d items", len(result.restored), len(self._records))
        if result.stranded:
            logger.warning("%d items left at temporary names", len(result.stranded))
        self.clear()
        return result

    def to_json(self) -> str:
        return json.dumps([record.to_dict() for record in self._records],
                          ensure_ascii=False, indent=2)

    @classmethod
    def from_json(cls, text: str) -> "UndoLog":
        return cls(UndoRecord.from_dict(entry) for entry in json.loads(text))

    def save(self, path: Path) -> None:
        Path(path).write_text(self.to_json(), encoding="utf-8")

    @classmethod
    def load(cls, path: Path) -> "UndoLog":
        return cls.from_json(Path(path).read_text(encoding="utf-8"))
