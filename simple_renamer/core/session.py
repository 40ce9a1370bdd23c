"""
session.py - Rename Session

The caller-facing surface of the engine: scan, plan, execute (synchronous
or on a worker thread), undo. Tracks an explicit state machine

    IDLE -> PLANNING -> READY -> EXECUTING -> DONE | FAILED

and notifies listeners on every transition. Listeners registered while
an asynchronous execution runs are called from the worker thread.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import replace
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional
import logging
import threading

from .errors import RenamerError
from .exec_rename import ExecutionResult, ProgressCallback, execute_plan
from .fs_access import LocalAccessor, LocalFileSystem, ScopedAccessor
from .models_fs import BatchScope, Item, RenameOptions, RenamePlan
from .plan_rename import plan_rename
from .scan_files import ScopeResult, resolve_scope
from .undo_log import UndoLog, UndoResult

logger = logging.getLogger(__name__)


class SessionState(Enum):
    IDLE = "idle"
    PLANNING = "planning"
    READY = "ready"
    EXECUTING = "executing"
    DONE = "done"
    FAILED = "failed"


class BusyError(RuntimeError):
    """An execution is already in flight"""

    pass


Listener = Callable[[SessionState, "RenameSession"], None]
DoneCallback = Callable[[Optional[ExecutionResult], Optional[Exception]], None]


class RenameSession:
    """One working folder, its current plan and the last batch's undo log"""

    def __init__(
        self,
        options: Optional[RenameOptions] = None,
        fs: Optional[LocalFileSystem] = None,
        accessor: Optional[ScopedAccessor] = None,
        undo_log: Optional[UndoLog] = None
    ):
        self.options = options or RenameOptions()
        self.fs = fs or LocalFileSystem(include_hidden=self.options.include_hidden)
        self.accessor = accessor or LocalAccessor()
        self.undo_log = undo_log or UndoLog()

        self.directory: Optional[Path] = None
        self.items: List[Item] = []
        self.scope: BatchScope = BatchScope.EMPTY
        self.template: str = ""
        self.error: Optional[Exception] = None
        self.state = SessionState.IDLE

        self._plan: Optional[RenamePlan] = None
        self._listeners: List[Listener] = []
        self._busy = threading.Lock()
        self._executor: Optional[ThreadPoolExecutor] = None

    # ---- state ----

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _set_state(self, state: SessionState) -> None:
        self.state = state
        logger.debug("Session state -> %s", state.value)
        for listener in list(self._listeners):
            listener(state, self)

    def _fail(self, error: Exception) -> None:
        self.error = error
        self._set_state(SessionState.FAILED)

    @property
    def current_plan(self) -> Optional[RenamePlan]:
        return self._plan

    @property
    def can_undo(self) -> bool:
        return self.undo_log.can_undo

    @property
    def is_executing(self) -> bool:
        return self._busy.locked()

    # ---- scan and plan ----

    def resolve_scope(
        self,
        directory: Optional[Path] = None,
        process_subfolders: Optional[bool] = None
    ) -> ScopeResult:
        """
        (Re)scan the working folder

        A new directory or toggle value is remembered for later rescans.
        Items are created fresh; any previous plan is dropped.

        Raises:
            DirectoryListError, MixedContentError, AccessDeniedError
        """
        if directory is not None:
            self.directory = Path(directory)
        if process_subfolders is not None:
            self.options.process_subfolders = process_subfolders
        if self.directory is None:
            raise ValueError("No folder selected")

        self._plan = None
        self.items, self.scope = [], BatchScope.EMPTY
        try:
            result = resolve_scope(self.directory, self.options.process_subfolders,
                                   fs=self.fs, accessor=self.accessor)
        except RenamerError as e:
            self._fail(e)
            raise

        self.items, self.scope = result.items, result.scope
        self.error = None
        self._set_state(SessionState.IDLE)
        return result

    def plan(self, template: Optional[str] = None) -> RenamePlan:
        """Recompute proposed names for the scanned items"""
        if template is not None:
            self.template = template
        self._set_state(SessionState.PLANNING)
        self._plan = plan_rename(self.items, self.scope, self.template,
                                 self.options.process_subfolders)
        self.items = list(self._plan.items)
        self._set_state(SessionState.READY)
        return self._plan

    # ---- execute ----

    def _apply_result(self, result: ExecutionResult) -> None:
        if result.dry_run:
            return
        # A batch that moved nothing keeps the previous undo batch
        if result.success or result.moved_any:
            self.undo_log.replace(result.undo_records)
        self.items = list(result.renamed)
        self._plan = None

    def _execute(
        self,
        dry_run: Optional[bool],
        progress_callback: Optional[ProgressCallback]
    ) -> ExecutionResult:
        try:
            if self._plan is None:
                raise ValueError("Nothing planned")
            options = self.options
            if dry_run is not None and dry_run != options.dry_run:
                options = replace(options, dry_run=dry_run)

            self._set_state(SessionState.EXECUTING)
            try:
                result = execute_plan(self._plan, fs=self.fs, accessor=self.accessor,
                                      options=options, progress_callback=progress_callback)
            except RenamerError as e:
                self._fail(e)
                raise

            self._apply_result(result)
            if result.success:
                self.error = None
                self._set_state(SessionState.DONE)
            else:
                self._fail(result.error)
            return result
        finally:
            self._busy.release()

    def execute(
        self,
        dry_run: Optional[bool] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> ExecutionResult:
        """
        Apply the current plan and wait for it

        Move failures are reported in the result, not raised.

        Raises:
            BusyError: Another execution is running
            AccessDeniedError: Folder access was refused before any move
        """
        if not self._busy.acquire(blocking=False):
            raise BusyError("A rename is already in progress")
        return self._execute(dry_run, progress_callback)

    def execute_async(
        self,
        callback: Optional[DoneCallback] = None,
        dry_run: Optional[bool] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> "Future[ExecutionResult]":
        """
        Apply the current plan on a worker thread

        callback(result, error) runs on the worker when it finishes; error is
        the raised exception or the result's MoveError.

        Raises:
            BusyError: Another execution is running
        """
        if not self._busy.acquire(blocking=False):
            raise BusyError("A rename is already in progress")
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="renamer")

        future = self._executor.submit(self._execute, dry_run, progress_callback)
        if callback is not None:
            def _done(f: Future) -> None:
                error = f.exception()
                if error is not None:
                    callback(None, error)
                else:
                    result = f.result()
                    callback(result, result.error)
            future.add_done_callback(_done)
        return future

    # ---- undo ----

    def undo(self) -> UndoResult:
        """Reverse the last batch once, then rescan the folder if anything moved"""
        if self.is_executing:
            raise BusyError("Cannot undo while a rename is in progress")
        result = self.undo_log.undo(self.fs, self.options.temp_prefix)
        if result.restored and self.directory is not None:
            try:
                self.resolve_scope()
                if self.template:
                    self.plan()
            except RenamerError:
                # resolve_scope already recorded the error and moved to FAILED
                logger.warning("Rescan after undo failed: %s", self.error)
        if result.failed:
            self._fail(result.failed[0])
        return result

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
