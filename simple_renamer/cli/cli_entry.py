"""
cli_entry.py - CLI Entry Point

Supports:
- Command-line argument mode
- Interactive mode
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from ..core import (
    RenameOptions, RenameSession, RenamerError, Settings, UndoLog,
    decode_templates_json, encode_templates_json, merge_templates,
    validate_plan,
)
from .cli_interactive import interactive_mode

UNDO_FILE = ".simple_renamer_undo.json"


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser"""
    parser = argparse.ArgumentParser(
        prog="simple-renamer",
        description="Batch rename files or folders with a numbered template",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Interactive mode
  simple-renamer

  # Preview: img1.jpg, img2.jpg, img10.jpg -> Photo01.jpg, Photo02.jpg, Photo03.jpg
  simple-renamer preview ./photos Photo01

  # Rename the files inside every subfolder, numbering restarts per subfolder
  simple-renamer rename ./albums Pic --subfolders

  # Undo the last rename in a folder
  simple-renamer undo ./photos
"""
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Subcommands")

    # preview subcommand
    preview_parser = subparsers.add_parser("preview", help="Show proposed names")
    preview_parser.add_argument("directory", type=str, help="Target directory")
    preview_parser.add_argument("template", type=str, help="Naming template, e.g. Photo01")
    preview_parser.add_argument("--subfolders", "-s", action="store_true",
                                help="Rename the files inside each subfolder")

    # rename subcommand
    rename_parser = subparsers.add_parser("rename", help="Rename items")
    rename_parser.add_argument("directory", type=str, help="Target directory")
    rename_parser.add_argument("template", type=str, help="Naming template, e.g. Photo01")
    rename_parser.add_argument("--subfolders", "-s", action="store_true",
                               help="Rename the files inside each subfolder")
    rename_parser.add_argument("--dry-run", "-d", action="store_true", help="Preview only, do not execute")
    rename_parser.add_argument("--yes", "-y", action="store_true", help="Skip confirmation")
    rename_parser.add_argument("--log-dir", type=str, help="Write a JSON execution log here")

    # undo subcommand
    undo_parser = subparsers.add_parser("undo", help="Undo the last rename in a directory")
    undo_parser.add_argument("directory", type=str, help="Target directory")

    # templates subcommand
    tpl_parser = subparsers.add_parser("templates", help="Manage saved templates")
    tpl_parser.add_argument("--settings", type=str, help="Settings file")
    tpl_sub = tpl_parser.add_subparsers(dest="action", help="Template actions")
    tpl_sub.add_parser("list", help="List saved templates")
    add_parser = tpl_sub.add_parser("add", help="Add templates")
    add_parser.add_argument("names", nargs="+", help="Templates to add")
    import_parser = tpl_sub.add_parser("import", help="Import templates from a JSON file")
    import_parser.add_argument("file", type=str, help="JSON array of strings")
    export_parser = tpl_sub.add_parser("export", help="Export templates to a JSON file")
    export_parser.add_argument("file", type=str, help="Output file")
    tpl_sub.add_parser("reset", help="Restore the default templates")

    return parser


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _get_directory(path_str: str) -> Optional[Path]:
    directory = Path(path_str).expanduser().resolve()
    if not directory.is_dir():
        print(f"Error: Directory does not exist: {directory}")
        return None
    return directory


def print_plan(session: RenameSession, limit: int = 20) -> None:
    """Show preview table"""
    plan = session.current_plan
    if plan is None or plan.is_empty:
        print("No items to rename")
        return

    print(f"Will rename {plan.total_count} {plan.scope.value}:")
    print("-" * 80)
    for item, new_name in plan.pairs()[:limit]:
        group = f"[{item.group.name}] " if item.group is not None else ""
        print(f"  {group}{item.name:<40} -> {new_name}")
    if plan.total_count > limit:
        print(f"  ... and {plan.total_count - limit} more operations")
    print("-" * 80)

    if plan.warnings:
        print("Warnings:")
        for warn in plan.warnings:
            print(f"  - {warn}")


def load_session(directory: Path, template: str, subfolders: bool,
                 options: Optional[RenameOptions] = None) -> Optional[RenameSession]:
    """Scan and plan, printing errors"""
    options = options or RenameOptions()
    options.process_subfolders = subfolders
    session = RenameSession(options=options)
    try:
        session.resolve_scope(directory)
    except RenamerError as e:
        print(f"Error: {e}")
        return None
    session.plan(template)
    return session


def cmd_preview(args):
    """Handle preview command"""
    directory = _get_directory(args.directory)
    if directory is None:
        return 1

    session = load_session(directory, args.template, args.subfolders)
    if session is None:
        return 1

    print_plan(session)
    errors = validate_plan(session.current_plan)
    for err in errors:
        print(f"  - {err}")
    return 0 if not errors else 1


def cmd_rename(args):
    """Handle rename command"""
    directory = _get_directory(args.directory)
    if directory is None:
        return 1

    options = RenameOptions(dry_run=args.dry_run,
                            log_dir=Path(args.log_dir) if args.log_dir else None)
    session = load_session(directory, args.template, args.subfolders, options)
    if session is None:
        return 1

    print_plan(session)
    if session.current_plan.is_empty:
        return 0

    if args.dry_run:
        print("\n[Preview mode] Will not actually execute")
        return 0

    if not args.yes:
        confirm = input("\nConfirm execution? (y/N): ").strip().lower()
        if confirm != 'y':
            print("Cancelled")
            return 0

    print("\nExecuting...")
    try:
        result = session.execute()
    except RenamerError as e:
        print(f"Error: {e}")
        return 1
    print(result.summary())

    if session.can_undo or result.moved_any:
        session.undo_log.save(directory / UNDO_FILE)

    return 0 if result.success else 1


def cmd_undo(args):
    """Handle undo command"""
    directory = _get_directory(args.directory)
    if directory is None:
        return 1

    undo_file = directory / UNDO_FILE
    if not undo_file.exists():
        print("Nothing to undo")
        return 0

    try:
        undo_log = UndoLog.load(undo_file)
    except (OSError, ValueError, KeyError, TypeError) as e:
        print(f"Error: Unreadable undo file {undo_file}: {e}")
        return 1
    if not undo_log.can_undo:
        print("Nothing to undo")
        undo_file.unlink()
        return 0

    print(f"Undoing {len(undo_log)} renames...")
    result = undo_log.undo()
    undo_file.unlink()

    print(f"Restored: {len(result.restored)}")
    for notice in result.retargeted:
        print(f"  - {notice}")
    for path in result.stranded:
        print(f"Left at temporary name: {path}")
    if result.error:
        print(f"Error: {result.error}")
        return 1
    return 0


def cmd_templates(args):
    """Handle templates command"""
    settings_path = Path(args.settings) if args.settings else None
    settings = Settings.load(settings_path)

    if args.action in (None, "list"):
        for template in settings.templates:
            print(template)
        return 0

    if args.action == "add":
        settings.templates = merge_templates(settings.templates, args.names)
    elif args.action == "import":
        try:
            imported = decode_templates_json(Path(args.file).read_text(encoding="utf-8"))
        except (OSError, RenamerError) as e:
            print(f"Error: {e}")
            return 1
        settings.templates = merge_templates(settings.templates, imported)
        print(f"Imported {len(imported)} templates")
    elif args.action == "export":
        Path(args.file).write_text(encode_templates_json(settings.templates), encoding="utf-8")
        print(f"Exported {len(settings.templates)} templates to {args.file}")
        return 0
    elif args.action == "reset":
        settings.reset_templates()

    settings.save(settings_path)
    return 0


def main(argv=None):
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.command is None:
        # No subcommand, enter interactive mode
        return interactive_mode()

    if args.command == "preview":
        return cmd_preview(args)
    elif args.command == "rename":
        return cmd_rename(args)
    elif args.command == "undo":
        return cmd_undo(args)
    elif args.command == "templates":
        return cmd_templates(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
