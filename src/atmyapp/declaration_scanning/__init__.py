"""Declaration scanning exports."""

from .file_scanner import IGNORED_DIRECTORIES, scan_declaration_files

__all__ = ["IGNORED_DIRECTORIES", "scan_declaration_files"]
