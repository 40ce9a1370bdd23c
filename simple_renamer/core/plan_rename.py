"""
plan_rename.py - Rename Plan Generation Module

Responsibilities:
- Parse the naming template
- Assign sequence numbers (flat, or restarted per subfolder group)
- Output RenamePlan with each item's proposed name
"""

from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Optional, Sequence
import logging

from .models_fs import BatchScope, Item, RenamePlan, TemplateParts
from .name_template import is_valid_filename, make_name, parse_template
from .sort_rules import group_key, sort_items

logger = logging.getLogger(__name__)


def number_items(
    items: Sequence[Item],
    parts: TemplateParts,
    is_file: bool
) -> List[str]:
    """
    Names for items in the given order, numbered from parts.start

    Files keep their own extension, folders never get one.
    """
    return [
        make_name(parts.base, parts.start + i, parts.pad,
                  item.extension if is_file else None, is_file)
        for i, item in enumerate(items)
    ]


def partition_by_group(items: Sequence[Item]) -> Dict[Optional[Path], List[Item]]:
    """Group items by owning subfolder, groups in natural order of path"""
    grouped: Dict[Optional[Path], List[Item]] = defaultdict(list)
    for item in items:
        grouped[item.group].append(item)
    return {g: grouped[g] for g in sorted(grouped, key=group_key)}


def plan_rename(
    items: Sequence[Item],
    scope: BatchScope,
    template: str,
    process_subfolders: bool = False
) -> RenamePlan:
    """
    Generate sequential naming rename plan

    Grouped batches (process_subfolders with FILES scope and grouped items)
    are numbered from the start value inside each subfolder, groups and
    items in natural order. Flat batches keep the given item order and
    number straight through.

    Args:
        items: Items to rename (proposed_name is overwritten)
        scope: Batch scope from resolve_scope
        template: Naming template, e.g. "Photo01"
        process_subfolders: Whether subfolder contents are being renamed

    Returns:
        Rename plan
    """
    parts = parse_template(template)
    is_file = scope.is_file

    if not items:
        return RenamePlan(items=[], scope=scope, template=template, parts=parts)

    grouped = (process_subfolders and is_file and
               any(item.group is not None for item in items))

    ordered: List[Item] = []
    if grouped:
        for group, members in partition_by_group(items).items():
            members = sort_items(members)
            for item, name in zip(members, number_items(members, parts, True)):
                item.proposed_name = name
                ordered.append(item)
    else:
        for item, name in zip(items, number_items(items, parts, is_file)):
            item.proposed_name = name
            ordered.append(item)

    plan = RenamePlan(items=ordered, scope=scope, template=template, parts=parts)

    for item in ordered:
        valid, error = is_valid_filename(item.proposed_name)
        if not valid:
            plan.warnings.append(f"{item.name} -> {item.proposed_name!r}: {error}")

    logger.info("Planned %d renames with template %r (%s)",
                plan.total_count, template, "grouped" if grouped else "flat")
    return plan


def validate_plan(plan: RenamePlan) -> List[str]:
    """
    Validate rename plan against the disk

    Args:
        plan: Rename plan

    Returns:
        Error list
    """
    errors = []

    for item in plan.items:
        if not item.location.exists():
            errors.append(f"Source no longer exists: {item.location}")

    # Two items landing on the same final path
    seen: Dict[Path, Path] = {}
    for item in plan.items:
        target = item.proposed_location
        if target in seen:
            errors.append(f"Multiple items have the same destination: {seen[target].name}, {item.name} -> {target.name}")
        else:
            seen[target] = item.location

    return errors
