"""
core - Simple Renamer Core Module

Provides folder scanning, template-based rename planning, two-phase
execution and single-batch undo.
"""

from .models_fs import (
    Item,
    BatchScope,
    TemplateParts,
    RenamePlan,
    UndoRecord,
    RenameOptions,
)

from .errors import (
    RenamerError,
    DirectoryListError,
    MixedContentError,
    AccessDeniedError,
    MoveError,
    TemplateFormatError,
    UndoCollisionResolved,
)

from .name_template import (
    parse_template,
    make_name,
    format_number,
    is_valid_filename,
)

from .sort_rules import (
    natural_key,
    compare_natural,
    display_key,
    sort_natural,
    sort_for_display,
)

from .fs_access import (
    DirectoryListing,
    LocalFileSystem,
    ScopedAccessor,
    LocalAccessor,
    NullAccessor,
    scoped_access,
)

from .scan_files import (
    resolve_scope,
    ScopeResult,
)

from .plan_rename import (
    plan_rename,
    validate_plan,
)

from .exec_rename import (
    execute_plan,
    ExecutionResult,
    save_result_log,
)

from .undo_log import (
    UndoLog,
    UndoResult,
)

from .session import (
    RenameSession,
    SessionState,
    BusyError,
)

from .templates import (
    DEFAULT_TEMPLATES,
    normalize_templates,
    merge_templates,
    decode_templates_json,
    encode_templates_json,
    templates_from_items,
)

from .settings import Settings

__all__ = [
    # Data models
    "Item",
    "BatchScope",
    "TemplateParts",
    "RenamePlan",
    "UndoRecord",
    "RenameOptions",

    # Errors
    "RenamerError",
    "DirectoryListError",
    "MixedContentError",
    "AccessDeniedError",
    "MoveError",
    "TemplateFormatError",
    "UndoCollisionResolved",

    # Naming
    "parse_template",
    "make_name",
    "format_number",
    "is_valid_filename",

    # Sorting
    "natural_key",
    "compare_natural",
    "display_key",
    "sort_natural",
    "sort_for_display",

    # File system
    "DirectoryListing",
    "LocalFileSystem",
    "ScopedAccessor",
    "LocalAccessor",
    "NullAccessor",
    "scoped_access",

    # Scanning
    "resolve_scope",
    "ScopeResult",

    # Planning
    "plan_rename",
    "validate_plan",

    # Execution
    "execute_plan",
    "ExecutionResult",
    "save_result_log",

    # Undo
    "UndoLog",
    "UndoResult",

    # Session
    "RenameSession",
    "SessionState",
    "BusyError",

    # Templates and settings
    "DEFAULT_TEMPLATES",
    "normalize_templates",
    "merge_templates",
    "decode_templates_json",
    "encode_templates_json",
    "templates_from_items",
    "Settings",
]
