"""Tests for core.undo_log module."""

from __future__ import annotations

from pathlib import Path

from simple_renamer.core import UndoLog, UndoRecord, execute_plan, plan_rename, resolve_scope


def _rename(directory: Path, template: str, subfolders: bool = False) -> UndoLog:
    items, scope = resolve_scope(directory, process_subfolders=subfolders)
    result = execute_plan(plan_rename(items, scope, template, process_subfolders=subfolders))
    return UndoLog(result.undo_records)


def test_round_trip_restores_names(photo_dir: Path, names_in):
    """Test execute then undo restores every original name and content."""
    log = _rename(photo_dir, "Photo01")
    result = log.undo()
    assert result.success
    assert result.error is None
    assert names_in(photo_dir) == ["img1.jpg", "img10.jpg", "img2.jpg"]
    for name in ["img1.jpg", "img10.jpg", "img2.jpg"]:
        assert (photo_dir / name).read_text() == name


def test_round_trip_grouped(album_dir: Path, names_in):
    """Test grouped batches undo back into their subfolders."""
    log = _rename(album_dir, "Pic", subfolders=True)
    log.undo()
    assert names_in(album_dir / "Jan") == ["a.png", "b.png"]
    assert names_in(album_dir / "Feb") == ["c.png"]


def test_round_trip_folders(album_dir: Path, names_in):
    """Test folder batches undo too."""
    log = _rename(album_dir, "Month01")
    assert names_in(album_dir) == ["Month01", "Month02"]
    log.undo()
    assert names_in(album_dir) == ["Feb", "Jan"]


def test_recreated_original_gets_undo_suffix(photo_dir: Path, names_in):
    """Test an original path recreated since the rename is not overwritten."""
    log = _rename(photo_dir, "Photo01")
    (photo_dir / "img2.jpg").write_text("newcomer")

    result = log.undo()

    assert result.success
    assert names_in(photo_dir) == ["img1.jpg", "img10.jpg", "img2.jpg", "img2_undo1.jpg"]
    assert (photo_dir / "img2.jpg").read_text() == "newcomer"
    assert (photo_dir / "img2_undo1.jpg").read_text() == "img2.jpg"
    assert [(n.original.name, n.target.name) for n in result.retargeted] == [("img2.jpg", "img2_undo1.jpg")]


def test_undo_suffix_increments(tmp_path: Path, make_files):
    """Test _undo1 being taken moves on to _undo2."""
    make_files(tmp_path, ["final.txt", "orig.txt", "orig_undo1.txt"])
    log = UndoLog([UndoRecord(tmp_path / "orig.txt", tmp_path / "final.txt")])
    result = log.undo()
    assert result.restored == [tmp_path / "orig_undo2.txt"]
    assert (tmp_path / "orig_undo2.txt").read_text() == "final.txt"


def test_undo_suffix_without_extension(tmp_path: Path):
    """Test folders and extensionless files get a plain _undoN suffix."""
    (tmp_path / "Album1").mkdir()
    (tmp_path / "Trip").mkdir()
    log = UndoLog([UndoRecord(tmp_path / "Trip", tmp_path / "Album1")])
    log.undo()
    assert (tmp_path / "Trip_undo1").is_dir()


def test_undo_continues_after_failure(tmp_path: Path, make_files, names_in):
    """Test a failed reversal does not stop the others and the first error is kept."""
    make_files(tmp_path, ["B1.txt", "B3.txt"])
    log = UndoLog([
        UndoRecord(tmp_path / "a.txt", tmp_path / "B1.txt"),
        UndoRecord(tmp_path / "b.txt", tmp_path / "B2.txt"),   # vanished
        UndoRecord(tmp_path / "c.txt", tmp_path / "B3.txt"),
    ])

    result = log.undo()

    assert not result.success
    assert "B2.txt" in result.error
    assert names_in(tmp_path) == ["a.txt", "c.txt"]
    assert not log.can_undo


def test_undo_is_one_shot(photo_dir: Path):
    """Test the log is cleared after undo and a second undo does nothing."""
    log = _rename(photo_dir, "P")
    assert log.can_undo
    log.undo()
    assert not log.can_undo
    assert log.undo().restored == []


def test_replace_drops_previous_batch(tmp_path: Path):
    """Test a new batch replaces rather than appends."""
    log = UndoLog([UndoRecord(tmp_path / "a", tmp_path / "b")])
    log.replace([UndoRecord(tmp_path / "c", tmp_path / "d")])
    assert log.records == [UndoRecord(tmp_path / "c", tmp_path / "d")]


def test_json_persistence(tmp_path: Path):
    """Test the log survives a save/load cycle."""
    log = UndoLog([UndoRecord(tmp_path / "a.txt", tmp_path / "b.txt")])
    path = tmp_path / "undo.json"
    log.save(path)
    assert UndoLog.load(path).records == log.records


def test_round_trip_shift_down(tmp_path: Path, make_files, names_in):
    """Test undo of a batch whose final names reuse its own original names."""
    make_files(tmp_path, ["1.jpg", "2.jpg", "3.jpg"])
    log = _rename(tmp_path, "0")
    assert names_in(tmp_path) == ["0.jpg", "1.jpg", "2.jpg"]

    result = log.undo()

    assert result.success
    assert result.retargeted == []
    assert names_in(tmp_path) == ["1.jpg", "2.jpg", "3.jpg"]
    for name in ["1.jpg", "2.jpg", "3.jpg"]:
        assert (tmp_path / name).read_text() == name


def test_round_trip_identity(tmp_path: Path, make_files, names_in):
    """Test undo of a batch that renamed every item to its own name."""
    make_files(tmp_path, ["Pic1.txt", "Pic2.txt"])
    log = _rename(tmp_path, "Pic")
    assert len(log) == 2

    result = log.undo()

    assert result.success
    assert result.retargeted == []
    assert names_in(tmp_path) == ["Pic1.txt", "Pic2.txt"]
    assert (tmp_path / "Pic2.txt").read_text() == "Pic2.txt"


def test_overlapping_batch_with_recreated_original(tmp_path: Path, make_files, names_in):
    """Test only an original taken by an outside file is retargeted."""
    make_files(tmp_path, ["1.jpg", "2.jpg", "3.jpg"])
    log = _rename(tmp_path, "0")
    (tmp_path / "3.jpg").write_text("newcomer")

    result = log.undo()

    assert names_in(tmp_path) == ["1.jpg", "2.jpg", "3.jpg", "3_undo1.jpg"]
    assert (tmp_path / "3.jpg").read_text() == "newcomer"
    assert (tmp_path / "3_undo1.jpg").read_text() == "3.jpg"
    assert [(n.original.name, n.target.name) for n in result.retargeted] == [("3.jpg", "3_undo1.jpg")]


def test_restore_failure_reports_stranded_item(tmp_path: Path, make_files, names_in, failing_fs):
    """Test a failed move back leaves the item at its temporary name and carries on."""
    make_files(tmp_path, ["1.jpg", "2.jpg"])
    log = _rename(tmp_path, "0")

    # Moves 1 and 2 stage both items, move 3 restores the first one
    result = log.undo(failing_fs(3))

    assert not result.success
    assert "0.jpg" in result.error
    assert len(result.stranded) == 1
    assert result.stranded[0].name.startswith(".__tmp_rename__")
    assert result.stranded[0].read_text() == "1.jpg"
    assert names_in(tmp_path) == ["2.jpg"]
    assert not log.can_undo
