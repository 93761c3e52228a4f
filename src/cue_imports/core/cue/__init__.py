"""
CUE Front-End and Back-End.

This package provides a pure Python lexer, parser and scope analysis for CUE
source files, plus a printer that regenerates only the import region of a file
so that every other declaration round-trips byte-for-byte.
"""

from cue_imports.core.cue.nodes import File, ImportDecl, ImportSpec
from cue_imports.core.cue.parser import CueParser, parse_file, parse_package_clause
from cue_imports.core.cue.printer import format_import_decl, render_file

__all__ = [
  "CueParser",
  "File",
  "ImportDecl",
  "ImportSpec",
  "format_import_decl",
  "parse_file",
  "parse_package_clause",
  "render_file",
]
