"""
scan_files.py - Folder Scanning Module

Classifies a folder's contents into a batch scope and produces the items
to rename
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
import logging

from .errors import MixedContentError
from .fs_access import LocalAccessor, LocalFileSystem, ScopedAccessor, scoped_access
from .models_fs import BatchScope, Item
from .sort_rules import sort_paths

logger = logging.getLogger(__name__)


@dataclass
class ScopeResult:
    """Items found in a folder and how they are renamed"""
    items: List[Item] = field(default_factory=list)
    scope: BatchScope = BatchScope.EMPTY

    def __iter__(self):
        # Allows `items, scope = resolve_scope(...)`
        return iter((self.items, self.scope))


def resolve_scope(
    directory: Path,
    process_subfolders: bool = False,
    fs: Optional[LocalFileSystem] = None,
    accessor: Optional[ScopedAccessor] = None
) -> ScopeResult:
    """
    Scan a folder and classify its contents

    - Only files: one item per file, scope FILES
    - Only subfolders: one item per subfolder, scope FOLDERS; or, with
      process_subfolders, one item per file inside each subfolder, tagged
      with its subfolder, scope FILES
    - Nothing: scope EMPTY

    Args:
        directory: Folder to scan
        process_subfolders: Rename subfolder contents instead of the subfolders
        fs: Directory lister (defaults to the local disk)
        accessor: Scoped accessor bracketing the scan

    Returns:
        Items in natural order and the batch scope

    Raises:
        MixedContentError: Folder holds both files and subfolders
        DirectoryListError: Enumeration failed
        AccessDeniedError: Folder could not be accessed
    """
    fs = fs or LocalFileSystem()
    accessor = accessor or LocalAccessor()
    directory = Path(directory).resolve()

    with scoped_access(accessor, directory):
        listing = fs.list(directory)
        files = sort_paths(listing.files)
        folders = sort_paths(listing.subdirectories)

        if files and folders:
            logger.warning("Mixed content in %s: %d files, %d folders",
                           directory, len(files), len(folders))
            raise MixedContentError(directory)

        if files:
            result = ScopeResult([Item(location=f) for f in files], BatchScope.FILES)
        elif folders and process_subfolders:
            items: List[Item] = []
            for folder in folders:
                inner = fs.list(folder)
                for f in sort_paths(inner.files):
                    items.append(Item(location=f, group=folder))
            # Reported as files for numbering purposes
            result = ScopeResult(items, BatchScope.FILES)
        elif folders:
            result = ScopeResult([Item(location=d) for d in folders], BatchScope.FOLDERS)
        else:
            result = ScopeResult([], BatchScope.EMPTY)

    logger.info("Scanned %s: %d items, scope %s",
                directory, len(result.items), result.scope.value)
    return result
