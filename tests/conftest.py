"""Shared pytest fixtures for simple_renamer tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable

import pytest

from simple_renamer.core import LocalFileSystem, MoveError


def _make_files(directory: Path, names: Iterable[str]) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    for name in names:
        # Content records the original name so moves can be traced
        (directory / name).write_text(name)
    return directory


@pytest.fixture
def make_files() -> Callable[[Path, Iterable[str]], Path]:
    """Factory creating files whose content is their own name.

    Returns:
        Function (directory, names) -> directory
    """
    return _make_files


@pytest.fixture
def photo_dir(tmp_path: Path) -> Path:
    """Folder with img2.jpg, img10.jpg, img1.jpg.

    Args:
        tmp_path: Pytest temporary directory fixture

    Returns:
        Path to the folder
    """
    return _make_files(tmp_path / "photos", ["img2.jpg", "img10.jpg", "img1.jpg"])


@pytest.fixture
def album_dir(tmp_path: Path) -> Path:
    """Folder with subfolders Jan (a.png, b.png) and Feb (c.png).

    Args:
        tmp_path: Pytest temporary directory fixture

    Returns:
        Path to the folder holding the subfolders
    """
    root = tmp_path / "albums"
    _make_files(root / "Jan", ["a.png", "b.png"])
    _make_files(root / "Feb", ["c.png"])
    return root


class FailingFileSystem(LocalFileSystem):
    """Local file system whose N-th move raises MoveError."""

    def __init__(self, fail_on: int, **kwargs):
        super().__init__(**kwargs)
        self.fail_on = fail_on
        self.moves = 0

    def move(self, src: Path, dst: Path) -> None:
        self.moves += 1
        if self.moves == self.fail_on:
            raise MoveError(src, dst, "simulated failure")
        super().move(src, dst)


@pytest.fixture
def failing_fs() -> Callable[[int], FailingFileSystem]:
    """Factory for a file system that fails on the given move number.

    Returns:
        Function fail_on -> FailingFileSystem
    """
    return lambda fail_on: FailingFileSystem(fail_on)


def visible_names(directory: Path) -> list[str]:
    return sorted(p.name for p in directory.iterdir() if not p.name.startswith("."))


@pytest.fixture
def names_in() -> Callable[[Path], list[str]]:
    """Sorted non-hidden entry names of a directory."""
    return visible_names
