"""
templates.py - Naming Template Library

Normalizing, importing and exporting the list of saved naming templates
"""

from typing import Iterable, List
import json

from .errors import TemplateFormatError
from .models_fs import Item

DEFAULT_TEMPLATES = [
    "Photo01",
    "Image001",
    "Scan",
    "Document1",
    "Episode01",
]


def normalize_templates(templates: Iterable[str]) -> List[str]:
    """
    Trim whitespace, drop empties, de-duplicate keeping first-seen order

    Args:
        templates: Raw template strings

    Returns:
        Normalized list
    """
    seen = set()
    result = []
    for template in templates:
        template = template.strip()
        if template and template not in seen:
            seen.add(template)
            result.append(template)
    return result


def merge_templates(existing: Iterable[str], new: Iterable[str]) -> List[str]:
    """Append new templates whose case-insensitive form is not present yet"""
    merged = normalize_templates(existing)
    known = {t.casefold() for t in merged}
    for template in normalize_templates(new):
        if template.casefold() not in known:
            known.add(template.casefold())
            merged.append(template)
    return merged


def decode_templates_json(text: str) -> List[str]:
    """
    Decode a top-level JSON array of strings

    Raises:
        TemplateFormatError: Not valid JSON or not an array of strings
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise TemplateFormatError(f"Invalid templates JSON: {e}") from e

    if not isinstance(data, list) or not all(isinstance(t, str) for t in data):
        raise TemplateFormatError("Templates JSON must be an array of strings")
    return normalize_templates(data)


def encode_templates_json(templates: Iterable[str]) -> str:
    return json.dumps(normalize_templates(templates), ensure_ascii=False, indent=2)


def templates_from_items(items: Iterable[Item]) -> List[str]:
    """
    One template per loaded item: its current name (with extension for files)

    Raises:
        TemplateFormatError: No items are loaded
    """
    names = [item.name for item in items]
    if not names:
        raise TemplateFormatError("No items loaded. Select a folder first.")
    return normalize_templates(names)
