"""
Simple Renamer - batch rename files or folders with a numbered template
"""

__version__ = "1.0.0"
