"""
cli_interactive.py - Interactive CLI

Provides a menu-style interactive interface. The session lives for the
whole run, so the last batch can be undone from the menu.
"""

import os
from pathlib import Path
from typing import List, Optional

from ..core import (
    RenameSession, RenamerError, Settings, merge_templates,
)

TUTORIAL = """\
How it works:
  1. Pick a folder that contains only files, or only subfolders.
  2. Type a template. Trailing digits set the first number and padding:
       Photo01 -> Photo01, Photo02, ...     Scan -> Scan1, Scan2, ...
  3. Check the preview, then confirm. Items are numbered in Finder order
     (img2 before img10). Files keep their extensions.
  4. Changed your mind? "Undo last rename" restores the previous names.
"""


def clear_screen():
    """Clear screen"""
    os.system('cls' if os.name == 'nt' else 'clear')


def print_header(title: str):
    """Print header"""
    print()
    print("=" * 60)
    print(f"  {title}")
    print("=" * 60)
    print()


def input_directory(prompt: str = "Please enter directory path") -> Optional[Path]:
    """Input and validate directory"""
    while True:
        path_str = input(f"{prompt} (q to return): ").strip()
        if path_str.lower() == 'q':
            return None

        path = Path(path_str).expanduser().resolve()
        if path.is_dir():
            return path
        else:
            print(f"Error: Directory does not exist: {path}")


def input_bool(prompt: str, default: bool = False) -> bool:
    """Input boolean value"""
    default_str = "Y/n" if default else "y/N"
    value = input(f"{prompt} ({default_str}): ").strip().lower()
    if not value:
        return default
    return value == 'y'


def input_template(templates: List[str]) -> Optional[str]:
    """Pick a saved template by number or type a new one"""
    print("Saved templates:")
    for i, template in enumerate(templates, 1):
        print(f"  {i}. {template}")
    value = input("Template number or new template (q to return): ").strip()
    if not value or value.lower() == 'q':
        return None
    if value.isdigit() and 1 <= int(value) <= len(templates):
        return templates[int(value) - 1]
    return value


def show_preview(session: RenameSession, limit: int = 15) -> None:
    plan = session.current_plan
    print(f"\nWill rename {plan.total_count} {plan.scope.value}:")
    print("-" * 70)
    for item, new_name in plan.pairs()[:limit]:
        group = f"[{item.group.name}] " if item.group is not None else ""
        print(f"  {group}{item.name:<30} -> {new_name}")
    if plan.total_count > limit:
        print(f"  ... and {plan.total_count - limit} more operations")
    print("-" * 70)
    for warn in plan.warnings:
        print(f"Warning: {warn}")


def menu_rename(session: RenameSession, settings: Settings):
    """Template rename menu"""
    print_header("Batch Rename")

    directory = input_directory("Please enter target directory")
    if directory is None:
        return

    subfolders = input_bool("Rename the files inside each subfolder", default=False)

    print(f"\nScanning {directory} ...")
    try:
        session.resolve_scope(directory, process_subfolders=subfolders)
    except RenamerError as e:
        print(f"Error: {e}")
        input("Press Enter to return...")
        return

    if not session.items:
        print("Nothing to rename")
        input("Press Enter to return...")
        return

    print(f"Found {len(session.items)} {session.scope.value}\n")

    template = input_template(settings.templates)
    if template is None:
        return

    session.plan(template)
    show_preview(session)

    print()
    if not input_bool("Confirm execution", default=False):
        print("Cancelled")
        input("Press Enter to return...")
        return

    print("\nExecuting...")
    try:
        result = session.execute()
    except RenamerError as e:
        print(f"Error: {e}")
        input("Press Enter to return...")
        return
    print()
    print(result.summary())

    if result.success and template not in settings.templates:
        if input_bool(f"Save {template!r} as a template", default=False):
            settings.templates = merge_templates(settings.templates, [template])
            settings.save()

    input("\nPress Enter to return...")


def menu_undo(session: RenameSession):
    """Undo menu"""
    print_header("Undo Last Rename")

    if not session.can_undo:
        print("Nothing to undo")
        input("Press Enter to return...")
        return

    if not input_bool(f"Restore {len(session.undo_log)} items", default=True):
        return

    result = session.undo()
    print(f"Restored: {len(result.restored)}")
    for notice in result.retargeted:
        print(f"  - {notice}")
    if result.error:
        print(f"Error: {result.error}")

    input("\nPress Enter to return...")


def menu_templates(settings: Settings):
    """Template management menu"""
    print_header("Templates")

    for i, template in enumerate(settings.templates, 1):
        print(f"  {i}. {template}")
    print()
    print("  a. Add template")
    print("  r. Reset to defaults")
    print("  q. Return")

    choice = input("Please select (a/r/q): ").strip().lower()
    if choice == 'a':
        new = input("New template: ").strip()
        if new:
            settings.templates = merge_templates(settings.templates, [new])
            settings.save()
    elif choice == 'r':
        if input_bool("Remove all current templates and restore the defaults", default=False):
            settings.reset_templates()
            settings.save()


def interactive_mode(settings: Optional[Settings] = None) -> int:
    """Interactive mode main loop"""
    settings = settings or Settings.load()
    session = RenameSession()

    if not settings.has_seen_tutorial:
        print_header("Welcome to Simple Renamer")
        print(TUTORIAL)
        settings.has_seen_tutorial = True
        settings.save()
        input("Press Enter to continue...")

    try:
        while True:
            clear_screen()
            print_header("Simple Renamer")

            print("Please select function:")
            print()
            print("  1. Batch rename")
            print(f"  2. Undo last rename{'' if session.can_undo else ' (nothing to undo)'}")
            print("  3. Templates")
            print("  h. Help")
            print()
            print("  q. Exit")
            print()

            choice = input("Please select (1/2/3/h/q): ").strip().lower()

            if choice == 'q':
                print("Goodbye!")
                return 0
            elif choice == '1':
                menu_rename(session, settings)
            elif choice == '2':
                menu_undo(session)
            elif choice == '3':
                menu_templates(settings)
            elif choice == 'h':
                print(TUTORIAL)
                input("Press Enter to continue...")
            else:
                print("Invalid choice")
                input("Press Enter to continue...")
    finally:
        session.close()
