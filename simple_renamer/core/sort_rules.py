"""
sort_rules.py - Sorting Rules Module

Provides natural ("Finder-like") ordering of names, items and groups.
Digit runs compare numerically, everything else case-insensitively, the
exact raw string breaks ties so the order is total.
"""

from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Tuple, TypeVar

from natsort import natsort_keygen, ns

from .models_fs import Item

T = TypeVar("T")

# Locale-independent: same order on every platform
_natural = natsort_keygen(alg=ns.PATH | ns.IGNORECASE)


def natural_key(name: str) -> Tuple[Any, str]:
    """Sort key for a single name or path string"""
    return (_natural(name), name)


def compare_natural(a: str, b: str) -> int:
    """
    Three-way natural comparison

    Returns:
        -1 if a sorts first, 1 if b sorts first, 0 if identical
    """
    ka, kb = natural_key(a), natural_key(b)
    if ka < kb:
        return -1
    if ka > kb:
        return 1
    return 0


def group_key(group: Optional[Path]) -> Tuple[Any, ...]:
    """Ungrouped items sort before any subfolder"""
    if group is None:
        return (0,)
    return (1, natural_key(str(group)))


def display_key(item: Item) -> Tuple[Tuple[Any, ...], Tuple[Any, str]]:
    """Canonical application order: group path, then item name"""
    return (group_key(item.group), natural_key(item.name))


def sort_natural(values: Iterable[T], key: Callable[[T], str] = str) -> List[T]:
    """
    Sort values by natural order of key(value)

    Args:
        values: Values to sort
        key: Extracts the string to compare (default str)

    Returns:
        Sorted list (new list)
    """
    return sorted(values, key=lambda v: natural_key(key(v)))


def sort_paths(paths: Iterable[Path]) -> List[Path]:
    """Sort paths by natural order of their final component"""
    return sort_natural(paths, key=lambda p: p.name)


def sort_items(items: Iterable[Item]) -> List[Item]:
    """Sort items by natural order of their current on-disk name"""
    return sort_natural(items, key=lambda item: item.name)


def sort_for_display(items: Iterable[Item]) -> List[Item]:
    """Sort items into canonical preview/execution order"""
    return sorted(items, key=display_key)
