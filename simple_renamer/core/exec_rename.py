"""
exec_rename.py - Rename Execution Module

Responsibilities:
- Two-phase execution per group (first rename to temporary name, then to
  final name), so renames that permute existing names never collide
- Stop at the first failure, leaving completed moves in place
- Produce undo records for every completed group
- Optional JSON execution log

A failure in phase 1 or phase 2 leaves the failing group's staged items
at their temporary names. They are reported in ExecutionResult.stranded
and never cleaned up automatically.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Tuple
import json
import logging
import uuid

from .errors import MoveError
from .fs_access import LocalAccessor, LocalFileSystem, ScopedAccessor, scoped_access
from .models_fs import BatchScope, Item, RenameOptions, RenamePlan, UndoRecord
from .name_template import make_name
from .sort_rules import group_key, sort_for_display, sort_items

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


@dataclass
class ExecutionResult:
    """Rename execution result"""
    renamed: List[Item] = field(default_factory=list)             # Items at their final locations
    undo_records: List[UndoRecord] = field(default_factory=list)  # Completed groups only
    uncommitted: List[UndoRecord] = field(default_factory=list)   # Finalized in the failing group
    stranded: List[Path] = field(default_factory=list)            # Left at temporary names
    error: Optional[MoveError] = None
    completed_groups: int = 0
    moved_any: bool = False
    dry_run: bool = False

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def success_count(self) -> int:
        return len(self.renamed)

    def summary(self) -> str:
        """Generate summary"""
        lines = [
            f"Execution Result:",
            f"  - Renamed: {self.success_count}",
            f"  - Groups completed: {self.completed_groups}",
        ]
        if self.error is not None:
            lines.append(f"  - Error: {self.error}")
        if self.uncommitted:
            lines.append(f"  - Renamed but not undoable: {len(self.uncommitted)}")
        if self.stranded:
            lines.append("Left at temporary names:")
            for path in self.stranded[:10]:  # Show at most 10
                lines.append(f"  - {path}")
            if len(self.stranded) > 10:
                lines.append(f"  ... and {len(self.stranded) - 10} more")
        return "\n".join(lines)


class _Progress:
    """Counts moves across phases and forwards them to the callback"""

    def __init__(self, callback: Optional[ProgressCallback], total: int):
        self.callback = callback
        self.total = total
        self.current = 0

    def step(self, message: str) -> None:
        self.current += 1
        if self.callback:
            self.callback(self.current, self.total, message)


def generate_temp_name(
    item: Item,
    is_file: bool,
    fs: LocalFileSystem,
    prefix: str = ".__tmp_rename__"
) -> Path:
    """
    Probe for an unused temporary path next to item

    Files keep their extension on the temporary name.
    """
    ext = f".{item.extension}" if is_file and item.extension else ""
    while True:
        candidate = item.location.parent / f"{prefix}{uuid.uuid4().hex}{ext}"
        if not fs.exists(candidate):
            return candidate


def _execution_root(plan: RenamePlan) -> Path:
    """Folder whose access covers every move of the plan"""
    first = plan.items[0]
    if first.group is not None:
        return first.group.parent
    return first.location.parent


def _run_group(
    group: Optional[Path],
    members: List[Item],
    plan: RenamePlan,
    fs: LocalFileSystem,
    options: RenameOptions,
    progress: _Progress,
    result: ExecutionResult
) -> Tuple[List[Item], List[UndoRecord]]:
    """
    Stage and finalize one group

    Returns the renamed items and undo records. On failure result.error,
    result.stranded and result.uncommitted are filled in and the partial
    lists are discarded by the caller.
    """
    is_file = plan.scope.is_file
    parts = plan.parts
    # Numbering follows the on-disk names as they are now
    members = sort_items(members)

    # Phase 1: Move everything out of the way
    staged: List[Tuple[Item, Path]] = []
    for item in members:
        temp_path = generate_temp_name(item, is_file, fs, options.temp_prefix)
        progress.step(f"[Phase 1] {item.name} -> temp name")
        try:
            fs.move(item.location, temp_path)
        except MoveError as e:
            logger.error("Staging failed for %s: %s", item.name, e.reason)
            result.error = MoveError(item.location, temp_path,
                                     f"error during temp rename: {e.reason}")
            result.stranded.extend(temp for _, temp in staged)
            return [], []
        result.moved_any = True
        staged.append((item, temp_path))

    # Phase 2: Temporary names to final names
    renamed: List[Item] = []
    records: List[UndoRecord] = []
    for index, (item, temp_path) in enumerate(staged):
        final_name = make_name(parts.base, parts.start + index, parts.pad,
                               item.extension if is_file else None, is_file)
        final_path = temp_path.parent / final_name
        progress.step(f"[Phase 2] temp name -> {final_name}")
        try:
            fs.move(temp_path, final_path)
        except MoveError as e:
            logger.error("Finalizing failed for %s: %s", final_name, e.reason)
            result.error = MoveError(item.location, final_path,
                                     f"error finalizing rename: {e.reason}")
            result.stranded.extend(temp for _, temp in staged[index:])
            result.uncommitted.extend(records)
            return [], []
        renamed.append(Item(location=final_path, proposed_name=final_name, group=group))
        records.append(UndoRecord(original=item.location, final=final_path))

    return renamed, records


def execute_plan(
    plan: RenamePlan,
    fs: Optional[LocalFileSystem] = None,
    accessor: Optional[ScopedAccessor] = None,
    options: Optional[RenameOptions] = None,
    progress_callback: Optional[ProgressCallback] = None
) -> ExecutionResult:
    """
    Execute rename plan (two-phase, group by group)

    Groups run strictly one after another and execution stops at the
    first failing group. Groups completed before it stay renamed.

    Args:
        plan: Rename plan
        fs: File system collaborator (defaults to the local disk)
        accessor: Scoped accessor held for the whole execution
        options: Execution options (dry_run, temp_prefix, log_dir)
        progress_callback: Progress callback (current, total, message)

    Returns:
        Execution result

    Raises:
        AccessDeniedError: Access could not be acquired, nothing was moved
    """
    fs = fs or LocalFileSystem()
    accessor = accessor or LocalAccessor()
    options = options or RenameOptions()
    result = ExecutionResult(dry_run=options.dry_run)

    if plan.is_empty or plan.scope is BatchScope.EMPTY:
        return result

    if options.dry_run:
        for i, item in enumerate(plan.items):
            if progress_callback:
                progress_callback(i + 1, plan.total_count, f"[Preview] {item.name} -> {item.proposed_name}")
            result.renamed.append(Item(location=item.proposed_location,
                                       proposed_name=item.proposed_name, group=item.group))
        return result

    groups = sorted(plan.groups(), key=lambda g: group_key(g[0]))
    progress = _Progress(progress_callback, plan.total_count * 2)

    with scoped_access(accessor, _execution_root(plan), write=True):
        for group, members in groups:
            logger.info("Renaming %d items in %s", len(members),
                        group if group is not None else _execution_root(plan))
            renamed, records = _run_group(group, members, plan, fs, options, progress, result)
            if result.error is not None:
                break
            result.renamed.extend(renamed)
            result.undo_records.extend(records)
            result.completed_groups += 1

    result.renamed = sort_for_display(result.renamed)

    if result.error is None:
        logger.info("Renamed %d items", result.success_count)
    else:
        logger.error("Batch stopped after %d groups: %s", result.completed_groups, result.error)
        if result.stranded:
            logger.warning("%d items left at temporary names", len(result.stranded))

    if options.log_dir:
        save_result_log(result, options.log_dir)

    return result


def save_result_log(result: ExecutionResult, log_dir: Path) -> Path:
    """Save execution result log"""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    log_file = log_dir / f"rename_result_{timestamp}.json"

    data = {
        "timestamp": timestamp,
        "success": result.success,
        "renamed_count": result.success_count,
        "completed_groups": result.completed_groups,
        "error": str(result.error) if result.error else None,
        "undo_records": [record.to_dict() for record in result.undo_records],
        "uncommitted": [record.to_dict() for record in result.uncommitted],
        "stranded": [str(path) for path in result.stranded],
    }

    with open(log_file, 'w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    logger.debug("Execution log written to %s", log_file)
    return log_file
