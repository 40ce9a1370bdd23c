"""
name_template.py - Template Parsing and Name Generation

Provides template parsing, name construction and filename validation
"""

from typing import Optional
import re

from .models_fs import TemplateParts

# ASCII digits only
_TRAILING_DIGITS = re.compile(r"[0-9]+\Z")

INVALID_CHARS = '<>:"/\\|?*'

RESERVED_NAMES = {
    'CON', 'PRN', 'AUX', 'NUL',
    'COM1', 'COM2', 'COM3', 'COM4', 'COM5', 'COM6', 'COM7', 'COM8', 'COM9',
    'LPT1', 'LPT2', 'LPT3', 'LPT4', 'LPT5', 'LPT6', 'LPT7', 'LPT8', 'LPT9'
}


def parse_template(text: str) -> TemplateParts:
    """
    Split a template into base, start number and padding width

    "Photo01" -> ("Photo", 1, 2), "Photo7" -> ("Photo", 7, 0),
    "Photo" -> ("Photo", 1, 0).

    Args:
        text: User supplied template

    Returns:
        Parsed template parts
    """
    match = _TRAILING_DIGITS.search(text)
    if match is None:
        return TemplateParts(base=text, start=1, pad=0)

    digits = match.group()
    # Width 1 never adds a zero, so a single digit means "no padding"
    pad = len(digits) if len(digits) > 1 else 0
    return TemplateParts(base=text[:match.start()], start=int(digits), pad=pad)


def format_number(number: int, pad: int = 0) -> str:
    """Render number, zero padded to pad digits when pad > 0"""
    if pad > 0:
        return str(number).zfill(pad)
    return str(number)


def make_name(
    base: str,
    number: int,
    pad: int = 0,
    extension: Optional[str] = None,
    is_file: bool = True
) -> str:
    """
    Build the final name for one sequence position

    Args:
        base: Literal base
        number: Sequence number
        pad: Zero padding digits (0 means no padding)
        extension: Extension without dot (a leading dot is ignored)
        is_file: Folders never receive an extension

    Returns:
        New name
    """
    name = f"{base}{format_number(number, pad)}"
    if is_file and extension:
        ext = extension.lstrip(".")
        if ext:
            return f"{name}.{ext}"
    return name


def is_valid_filename(name: str) -> tuple[bool, Optional[str]]:
    """
    Check if filename is valid (mainly for Windows)

    Args:
        name: Filename

    Returns:
        (is_valid, error_reason)
    """
    if not name:
        return False, "Filename cannot be empty"

    for char in INVALID_CHARS:
        if char in name:
            return False, f"Filename contains invalid character: {char}"

    if name.endswith(' ') or name.endswith('.'):
        return False, "Filename cannot end with space or dot"

    name_upper = name.upper().split('.')[0]
    if name_upper in RESERVED_NAMES:
        return False, f"Filename is a Windows reserved name: {name_upper}"

    if len(name) > 255:
        return False, "Filename exceeds 255 characters"

    return True, None
