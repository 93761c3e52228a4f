"""
Filesystem Helpers for the Import Fixer.

Every read performed during resolution goes through these helpers so that
operating system failures surface uniformly as `FilesystemError`.
"""

import os
from pathlib import Path
from typing import List

from cue_imports.errors import FilesystemError, ParseError


def read_source(path: Path) -> str:
  """
  Reads a CUE source file as UTF-8 text.

  Args:
      path: File to read.

  Returns:
      str: The file content.

  Raises:
      FilesystemError: If the file cannot be read.
      ParseError: If the content is not valid UTF-8.
  """
  try:
    data = path.read_bytes()
  except OSError as exc:
    raise FilesystemError(f"read {path}: {exc.strerror or exc}", path=str(path)) from exc
  try:
    return data.decode("utf-8")
  except UnicodeDecodeError as exc:
    raise ParseError(f"invalid UTF-8 at byte {exc.start}", str(path)) from exc


def list_directory(directory: Path) -> List[os.DirEntry]:
  """
  Lists a directory in lexical order of entry names.

  Raises:
      FilesystemError: If the directory cannot be listed.
  """
  try:
    with os.scandir(directory) as it:
      return sorted(it, key=lambda entry: entry.name)
  except OSError as exc:
    raise FilesystemError(f"list {directory}: {exc.strerror or exc}", path=str(directory)) from exc


def source_files(directory: Path, extension: str) -> List[Path]:
  """Regular files of `directory` ending in `extension`, sorted by name. Hidden files are skipped."""
  return [
    Path(entry.path)
    for entry in list_directory(directory)
    if entry.name.endswith(extension) and not entry.name.startswith(".") and entry.is_file()
  ]
