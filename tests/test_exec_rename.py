"""Tests for core.exec_rename module."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from simple_renamer.core import (
    AccessDeniedError, BatchScope, Item, RenameOptions, ScopedAccessor,
    execute_plan, plan_rename, resolve_scope,
)


def _plan(directory: Path, template: str, subfolders: bool = False):
    items, scope = resolve_scope(directory, process_subfolders=subfolders)
    return plan_rename(items, scope, template, process_subfolders=subfolders)


def test_photo_scenario_on_disk(photo_dir: Path, names_in):
    """Test each file ends up under the name it was previewed with."""
    result = execute_plan(_plan(photo_dir, "Photo01"))
    assert result.success
    assert names_in(photo_dir) == ["Photo01.jpg", "Photo02.jpg", "Photo03.jpg"]
    assert (photo_dir / "Photo01.jpg").read_text() == "img1.jpg"
    assert (photo_dir / "Photo02.jpg").read_text() == "img2.jpg"
    assert (photo_dir / "Photo03.jpg").read_text() == "img10.jpg"
    assert [r.original.name for r in result.undo_records] == ["img1.jpg", "img2.jpg", "img10.jpg"]
    assert [i.name for i in result.renamed] == ["Photo01.jpg", "Photo02.jpg", "Photo03.jpg"]


def test_overlapping_names_are_safe(tmp_path: Path, make_files, names_in):
    """Test renaming 1, 2, 3 to 0, 1, 2 loses nothing."""
    make_files(tmp_path, ["1.jpg", "2.jpg", "3.jpg"])
    result = execute_plan(_plan(tmp_path, "0"))
    assert result.success
    assert names_in(tmp_path) == ["0.jpg", "1.jpg", "2.jpg"]
    assert [(tmp_path / n).read_text() for n in ["0.jpg", "1.jpg", "2.jpg"]] == ["1.jpg", "2.jpg", "3.jpg"]


def test_shift_up_is_safe(tmp_path: Path, make_files, names_in):
    """Test renaming a1, a2 to a2, a3 does not overwrite a2."""
    make_files(tmp_path, ["a1.txt", "a2.txt"])
    result = execute_plan(_plan(tmp_path, "a2"))
    assert result.success
    assert names_in(tmp_path) == ["a2.txt", "a3.txt"]
    assert (tmp_path / "a2.txt").read_text() == "a1.txt"
    assert (tmp_path / "a3.txt").read_text() == "a2.txt"


def test_identity_permutation_is_safe(tmp_path: Path, make_files, names_in):
    """Test a batch whose final names equal the original names keeps every item."""
    make_files(tmp_path, ["Pic3.txt", "Pic1.txt", "Pic2.txt"])
    result = execute_plan(_plan(tmp_path, "Pic"))
    assert result.success
    assert names_in(tmp_path) == ["Pic1.txt", "Pic2.txt", "Pic3.txt"]
    assert [(tmp_path / n).read_text() for n in names_in(tmp_path)] == ["Pic1.txt", "Pic2.txt", "Pic3.txt"]
    assert len(result.undo_records) == 3


def test_shift_up_then_back_restores_contents(tmp_path: Path, make_files, names_in):
    """Test renumbering over names freed by the same batch, in both directions."""
    make_files(tmp_path, ["N1.png", "N2.jpg"])
    execute_plan(_plan(tmp_path, "N2"))
    assert names_in(tmp_path) == ["N2.png", "N3.jpg"]
    execute_plan(_plan(tmp_path, "N1"))
    assert names_in(tmp_path) == ["N1.png", "N2.jpg"]
    assert (tmp_path / "N1.png").read_text() == "N1.png"
    assert (tmp_path / "N2.jpg").read_text() == "N2.jpg"


def test_execution_renumbers_by_on_disk_order(tmp_path: Path, make_files, names_in):
    """Test execution numbers each group by natural order of current names."""
    make_files(tmp_path, ["b.txt", "a.txt"])
    plan = plan_rename([Item(tmp_path / "b.txt"), Item(tmp_path / "a.txt")], BatchScope.FILES, "N")
    execute_plan(plan)
    assert (tmp_path / "N1.txt").read_text() == "a.txt"
    assert (tmp_path / "N2.txt").read_text() == "b.txt"


def test_grouped_execution(album_dir: Path, names_in):
    """Test numbering restarts per subfolder on disk."""
    result = execute_plan(_plan(album_dir, "Pic", subfolders=True))
    assert result.success
    assert result.completed_groups == 2
    assert names_in(album_dir / "Jan") == ["Pic1.png", "Pic2.png"]
    assert names_in(album_dir / "Feb") == ["Pic1.png"]
    assert (album_dir / "Jan" / "Pic1.png").read_text() == "a.png"
    assert (album_dir / "Feb" / "Pic1.png").read_text() == "c.png"


def test_temp_names_keep_extension_and_are_hidden(photo_dir: Path):
    """Test staging names are hidden and keep the file extension."""
    snapshots = []
    steps = []

    def progress(current, total, message):
        steps.append((current, total))
        # Called before each move, so one item is already staged at step 2
        if current == 2:
            snapshots.extend(p.name for p in photo_dir.iterdir() if p.name.startswith("."))

    execute_plan(_plan(photo_dir, "P"), progress_callback=progress)
    assert len(snapshots) == 1
    assert snapshots[0].startswith(".__tmp_rename__")
    assert snapshots[0].endswith(".jpg")
    assert steps[-1] == (6, 6)


def test_staging_failure_stops_group(tmp_path: Path, make_files, failing_fs, names_in):
    """Test a failed temp rename leaves earlier items at temp names and stops."""
    make_files(tmp_path, ["a.txt", "b.txt", "c.txt"])
    fs = failing_fs(2)
    result = execute_plan(_plan(tmp_path, "X"), fs=fs)

    assert not result.success
    assert result.error.item_name == "b.txt"
    assert result.undo_records == []
    assert result.moved_any
    assert len(result.stranded) == 1
    assert result.stranded[0].exists()
    assert result.stranded[0].suffix == ".txt"
    assert result.stranded[0].read_text() == "a.txt"
    # b failed, c was never attempted
    assert names_in(tmp_path) == ["b.txt", "c.txt"]
    assert fs.moves == 2


def test_finalize_failure_stops_group(tmp_path: Path, make_files, failing_fs, names_in):
    """Test a failed final rename keeps finished moves and strands the rest."""
    make_files(tmp_path, ["a.txt", "b.txt", "c.txt"])
    # 3 staging moves, then the second finalize fails
    result = execute_plan(_plan(tmp_path, "X"), fs=failing_fs(5))

    assert not result.success
    assert "X2.txt" in str(result.error)
    assert names_in(tmp_path) == ["X1.txt"]
    assert len(result.stranded) == 2
    assert all(p.exists() for p in result.stranded)
    assert result.undo_records == []
    assert [r.final.name for r in result.uncommitted] == ["X1.txt"]


def test_failure_in_later_group_keeps_earlier_groups(album_dir: Path, failing_fs, names_in):
    """Test completed groups stay renamed and keep their undo records."""
    # Feb (1 file) takes moves 1-2, Jan staging starts at move 3
    result = execute_plan(_plan(album_dir, "Pic", subfolders=True), fs=failing_fs(3))

    assert not result.success
    assert result.completed_groups == 1
    assert names_in(album_dir / "Feb") == ["Pic1.png"]
    assert names_in(album_dir / "Jan") == ["a.png", "b.png"]
    assert [(r.original.name, r.final.name) for r in result.undo_records] == [("c.png", "Pic1.png")]


def test_failure_stops_before_later_groups(album_dir: Path, make_files, failing_fs, names_in):
    """Test groups after the failing one are not touched."""
    make_files(album_dir / "Mar", ["d.png"])
    # Feb moves 1-2, Jan staging 3-4, Jan finalize 5 fails
    fs = failing_fs(5)
    result = execute_plan(_plan(album_dir, "Pic", subfolders=True), fs=fs)
    assert not result.success
    assert names_in(album_dir / "Mar") == ["d.png"]
    assert fs.moves == 5


def test_access_denied_moves_nothing(photo_dir: Path, names_in):
    """Test a refused access aborts before any move."""
    class DenyingAccessor(ScopedAccessor):
        def begin_access(self, path, write=False):
            if write:
                raise AccessDeniedError(path, "sandbox")
            return super().begin_access(path, write)

    plan = _plan(photo_dir, "P")
    with pytest.raises(AccessDeniedError):
        execute_plan(plan, accessor=DenyingAccessor())
    assert names_in(photo_dir) == ["img1.jpg", "img10.jpg", "img2.jpg"]


def test_dry_run_touches_nothing(photo_dir: Path, names_in):
    """Test dry run reports the preview without moving."""
    result = execute_plan(_plan(photo_dir, "P"), options=RenameOptions(dry_run=True))
    assert result.success
    assert result.dry_run
    assert [i.name for i in result.renamed] == ["P1.jpg", "P2.jpg", "P3.jpg"]
    assert names_in(photo_dir) == ["img1.jpg", "img10.jpg", "img2.jpg"]


def test_empty_plan_does_nothing():
    """Test an empty plan executes trivially."""
    result = execute_plan(plan_rename([], BatchScope.EMPTY, "P"))
    assert result.success
    assert not result.moved_any
    assert result.undo_records == []


def test_execution_log_written(photo_dir: Path, tmp_path: Path):
    """Test the JSON execution log records the undo pairs."""
    log_dir = tmp_path / "logs"
    execute_plan(_plan(photo_dir, "P"), options=RenameOptions(log_dir=log_dir))
    logs = list(log_dir.glob("rename_result_*.json"))
    assert len(logs) == 1
    data = json.loads(logs[0].read_text(encoding="utf-8"))
    assert data["success"] is True
    assert len(data["undo_records"]) == 3
