"""
gui - PySide6 interface for Simple Renamer
"""

from .gui_entry import main

__all__ = ["main"]
