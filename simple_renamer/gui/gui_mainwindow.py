"""
gui_mainwindow.py - GUI Main Window

Folder picker (or drag and drop), template selection, live preview,
Rename and Undo.
"""

from pathlib import Path
from typing import Optional

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QLabel, QLineEdit, QPushButton, QCheckBox, QComboBox,
    QTableWidget, QTableWidgetItem, QProgressBar,
    QFileDialog, QMessageBox, QHeaderView, QGroupBox
)
from PySide6.QtCore import Qt, Slot
from PySide6.QtGui import QColor

from ..core import (
    ExecutionResult, RenameSession, RenamerError, Settings,
    decode_templates_json, encode_templates_json, merge_templates,
    templates_from_items,
)
from .gui_workers import RenameWorker


class RenamePanel(QWidget):
    """Template rename panel"""

    def __init__(self, settings: Settings, parent=None):
        super().__init__(parent)
        self.settings = settings
        self.session = RenameSession()
        self.rename_worker: Optional[RenameWorker] = None

        self._init_ui()
        self.setAcceptDrops(True)

    def _init_ui(self):
        layout = QVBoxLayout(self)

        # Folder settings group
        dir_group = QGroupBox("Folder")
        dir_layout = QGridLayout(dir_group)

        dir_layout.addWidget(QLabel("Folder:"), 0, 0)
        self.dir_edit = QLineEdit()
        self.dir_edit.setPlaceholderText("Select a folder or drop one here...")
        self.dir_edit.returnPressed.connect(self._do_scan)
        dir_layout.addWidget(self.dir_edit, 0, 1)
        self.browse_btn = QPushButton("Browse...")
        self.browse_btn.clicked.connect(self._browse_directory)
        dir_layout.addWidget(self.browse_btn, 0, 2)

        self.subfolders_check = QCheckBox("Process subfolder contents")
        self.subfolders_check.toggled.connect(self._do_scan)
        dir_layout.addWidget(self.subfolders_check, 1, 0, 1, 3)

        layout.addWidget(dir_group)

        # Template group
        name_group = QGroupBox("Template")
        name_layout = QGridLayout(name_group)

        name_layout.addWidget(QLabel("Template:"), 0, 0)
        self.template_combo = QComboBox()
        self.template_combo.setEditable(True)
        self.template_combo.addItems(self.settings.templates)
        self.template_combo.setCurrentText("")
        self.template_combo.lineEdit().setPlaceholderText("e.g., Photo01")
        self.template_combo.editTextChanged.connect(self._do_preview)
        name_layout.addWidget(self.template_combo, 0, 1)

        self.save_template_btn = QPushButton("Save")
        self.save_template_btn.clicked.connect(self._save_template)
        name_layout.addWidget(self.save_template_btn, 0, 2)

        tpl_buttons = QHBoxLayout()
        self.import_btn = QPushButton("Import...")
        self.import_btn.clicked.connect(self._import_templates)
        self.export_btn = QPushButton("Export...")
        self.export_btn.clicked.connect(self._export_templates)
        self.from_items_btn = QPushButton("Templates From Items")
        self.from_items_btn.clicked.connect(self._templates_from_items)
        tpl_buttons.addWidget(self.import_btn)
        tpl_buttons.addWidget(self.export_btn)
        tpl_buttons.addWidget(self.from_items_btn)
        tpl_buttons.addStretch()
        name_layout.addLayout(tpl_buttons, 1, 0, 1, 3)

        layout.addWidget(name_group)

        # Preview table
        self.table = QTableWidget()
        self.table.setColumnCount(3)
        self.table.setHorizontalHeaderLabels(["Original Name", "New Name", "Folder"])
        self.table.horizontalHeader().setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
        self.table.horizontalHeader().setSectionResizeMode(1, QHeaderView.ResizeMode.Stretch)
        self.table.horizontalHeader().setSectionResizeMode(2, QHeaderView.ResizeMode.ResizeToContents)
        self.table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        layout.addWidget(self.table, 1)

        # Progress and execution
        bottom_layout = QHBoxLayout()

        self.progress_bar = QProgressBar()
        self.progress_bar.setVisible(False)
        bottom_layout.addWidget(self.progress_bar, 1)

        self.undo_btn = QPushButton("Undo")
        self.undo_btn.clicked.connect(self._do_undo)
        self.undo_btn.setEnabled(False)
        bottom_layout.addWidget(self.undo_btn)

        self.execute_btn = QPushButton("Rename")
        self.execute_btn.clicked.connect(self._do_execute)
        self.execute_btn.setEnabled(False)
        self.execute_btn.setStyleSheet("QPushButton { background-color: #4CAF50; color: white; font-weight: bold; padding: 8px 16px; }")
        bottom_layout.addWidget(self.execute_btn)

        layout.addLayout(bottom_layout)

        # Status label
        self.status_label = QLabel("")
        layout.addWidget(self.status_label)

    # ---- folder ----

    def dragEnterEvent(self, event):
        if event.mimeData().hasUrls():
            event.acceptProposedAction()

    def dropEvent(self, event):
        for url in event.mimeData().urls():
            path = Path(url.toLocalFile())
            if path.is_dir():
                self.dir_edit.setText(str(path))
                self._do_scan()
                return

    def _browse_directory(self):
        """Browse and select directory"""
        directory = QFileDialog.getExistingDirectory(self, "Select Folder")
        if directory:
            self.dir_edit.setText(directory)
            self._do_scan()

    def _do_scan(self):
        """Scan the folder with the current toggle"""
        directory = self.dir_edit.text().strip()
        if not directory:
            return

        path = Path(directory)
        if not path.is_dir():
            QMessageBox.warning(self, "Warning", f"Directory does not exist: {directory}")
            return

        try:
            self.session.resolve_scope(path, process_subfolders=self.subfolders_check.isChecked())
        except RenamerError as e:
            self.table.setRowCount(0)
            self.execute_btn.setEnabled(False)
            self.status_label.setText(str(e))
            QMessageBox.warning(self, "Warning", str(e))
            return

        self._do_preview()

    # ---- preview ----

    def _do_preview(self):
        """Recompute proposed names"""
        if not self.session.items:
            self.table.setRowCount(0)
            self.execute_btn.setEnabled(False)
            self.status_label.setText("Nothing to rename" if self.session.directory else "")
            return

        template = self.template_combo.currentText()
        plan = self.session.plan(template)
        self._update_table()

        self.execute_btn.setEnabled(bool(template.strip()) and not self.session.is_executing)
        status = f"{plan.total_count} {plan.scope.value}"
        if plan.warnings:
            status += f" ({len(plan.warnings)} invalid names)"
        self.status_label.setText(status)

    def _update_table(self):
        """Update table to display preview results"""
        items = self.session.items
        self.table.setRowCount(len(items))
        template = self.template_combo.currentText()

        for i, item in enumerate(items):
            self.table.setItem(i, 0, QTableWidgetItem(item.name))
            new_name_item = QTableWidgetItem(item.proposed_name if template else "")
            if template and item.name != item.proposed_name:
                new_name_item.setForeground(QColor(0, 150, 0))
            self.table.setItem(i, 1, new_name_item)
            folder = item.group.name if item.group is not None else ""
            self.table.setItem(i, 2, QTableWidgetItem(folder))

    # ---- templates ----

    def _reload_templates(self):
        current = self.template_combo.currentText()
        self.template_combo.blockSignals(True)
        self.template_combo.clear()
        self.template_combo.addItems(self.settings.templates)
        self.template_combo.setCurrentText(current)
        self.template_combo.blockSignals(False)
        self.settings.save()

    def _save_template(self):
        template = self.template_combo.currentText().strip()
        if template:
            self.settings.templates = merge_templates(self.settings.templates, [template])
            self._reload_templates()

    def _import_templates(self):
        filename, _ = QFileDialog.getOpenFileName(self, "Import Templates", "", "JSON (*.json)")
        if not filename:
            return
        try:
            imported = decode_templates_json(Path(filename).read_text(encoding="utf-8"))
        except (OSError, RenamerError) as e:
            QMessageBox.critical(self, "Error", f"Import failed: {e}")
            return
        self.settings.templates = merge_templates(self.settings.templates, imported)
        self._reload_templates()

    def _export_templates(self):
        filename, _ = QFileDialog.getSaveFileName(self, "Export Templates", "templates.json", "JSON (*.json)")
        if not filename:
            return
        try:
            Path(filename).write_text(encode_templates_json(self.settings.templates), encoding="utf-8")
        except OSError as e:
            QMessageBox.critical(self, "Error", f"Export failed: {e}")

    def _templates_from_items(self):
        try:
            names = templates_from_items(self.session.items)
        except RenamerError as e:
            QMessageBox.warning(self, "Warning", str(e))
            return
        self.settings.templates = merge_templates(self.settings.templates, names)
        self._reload_templates()

    # ---- execute ----

    def _set_busy(self, busy: bool):
        self.execute_btn.setEnabled(not busy)
        self.execute_btn.setText("Renaming..." if busy else "Rename")
        self.undo_btn.setEnabled(not busy and self.session.can_undo)
        self.browse_btn.setEnabled(not busy)
        self.subfolders_check.setEnabled(not busy)
        self.template_combo.setEnabled(not busy)
        self.progress_bar.setVisible(busy)

    def _do_execute(self):
        """Execute rename"""
        plan = self.session.current_plan
        if plan is None or plan.is_empty:
            return

        if plan.warnings:
            QMessageBox.warning(self, "Warning", "\n".join(plan.warnings[:10]))
            return

        self._set_busy(True)
        self.progress_bar.setRange(0, plan.total_count * 2)

        self.rename_worker = RenameWorker(self.session)
        self.rename_worker.progress.connect(self._on_rename_progress)
        self.rename_worker.finished.connect(self._on_rename_finished)
        self.rename_worker.error.connect(self._on_rename_error)
        self.rename_worker.start()

    @Slot(int, int, str)
    def _on_rename_progress(self, current: int, total: int, msg: str):
        """Execution progress update"""
        self.progress_bar.setValue(current)
        self.status_label.setText(msg)

    @Slot(object)
    def _on_rename_finished(self, result: ExecutionResult):
        """Execution complete"""
        self._set_busy(False)
        self.execute_btn.setEnabled(False)
        self._update_table()

        if result.success:
            self.status_label.setText(f"Renamed {result.success_count} items")
            return

        msg = f"Rename stopped: {result.error}"
        if result.stranded:
            msg += "\n\nThese items were left at temporary names:\n"
            msg += "\n".join(f"  {p.name}" for p in result.stranded[:5])
            if len(result.stranded) > 5:
                msg += f"\n  ... and {len(result.stranded) - 5} more"
        self.status_label.setText("Rename failed")
        QMessageBox.critical(self, "Error", msg)

    @Slot(str)
    def _on_rename_error(self, error: str):
        """Execution error"""
        self._set_busy(False)
        QMessageBox.critical(self, "Error", f"Execution failed: {error}")

    def _do_undo(self):
        """Undo the last batch"""
        result = self.session.undo()
        self.undo_btn.setEnabled(self.session.can_undo)
        self._do_preview()

        message = f"Restored {len(result.restored)} items"
        if result.retargeted:
            message += "\n\n" + "\n".join(str(n) for n in result.retargeted)
        if result.error:
            QMessageBox.critical(self, "Error", f"{message}\n\n{result.error}")
        else:
            self.status_label.setText(message.splitlines()[0])


class MainWindow(QMainWindow):
    """Main window"""

    def __init__(self, settings: Optional[Settings] = None):
        super().__init__()
        self.settings = settings or Settings.load()
        self.setWindowTitle("Simple Renamer")
        self.setMinimumSize(800, 600)

        self.panel = RenamePanel(self.settings)
        self.setCentralWidget(self.panel)

        # Status bar
        self.statusBar().showMessage("Ready")

        if not self.settings.has_seen_tutorial:
            QMessageBox.information(
                self, "Welcome",
                "Pick or drop a folder, type a template such as Photo01 and check the preview.\n"
                "Trailing digits set the first number and the zero padding.\n"
                "Undo restores the last batch."
            )
            self.settings.has_seen_tutorial = True
            self.settings.save()

    def closeEvent(self, event):
        self.panel.session.close()
        super().closeEvent(event)
