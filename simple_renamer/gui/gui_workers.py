"""
gui_workers.py - GUI Worker Threads

Runs the rename on a background thread to avoid blocking the UI
"""

from typing import Optional

from PySide6.QtCore import QThread, Signal, QObject

from ..core import RenameSession, RenamerError


class RenameWorker(QThread):
    """Rename execution worker thread"""

    # Signals
    progress = Signal(int, int, str)    # current, total, message
    finished = Signal(object)           # ExecutionResult
    error = Signal(str)                 # Error message

    def __init__(
        self,
        session: RenameSession,
        dry_run: bool = False,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.session = session
        self.dry_run = dry_run

    def run(self):
        try:
            def progress_callback(current: int, total: int, msg: str):
                self.progress.emit(current, total, msg)

            result = self.session.execute(
                dry_run=self.dry_run,
                progress_callback=progress_callback,
            )

            self.finished.emit(result)
        except (RenamerError, RuntimeError, ValueError) as e:
            self.error.emit(str(e))
