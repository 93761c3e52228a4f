"""
Exception Hierarchy.

All failures raised by the engine derive from `CueImportsError`, so callers
(the CLI batch runner in particular) can catch one type per file.

Unresolvable identifiers are deliberately absent: a name that cannot be mapped
to an import is left unimported rather than reported.
"""

from typing import Optional


class CueImportsError(Exception):
  """Base class for all cue-imports failures."""


class ParseError(CueImportsError):
  """
  Raised when CUE source cannot be tokenized or parsed.

  Attributes:
      filename: File the error occurred in (may be empty for unnamed input).
      line: 1-based line number, or 0 when unknown.
      column: 1-based column number, or 0 when unknown.
      message: Description of the problem without location prefix.
  """

  def __init__(self, message: str, filename: str = "", line: int = 0, column: int = 0):
    self.filename = filename
    self.line = line
    self.column = column
    self.message = message
    super().__init__(self._format())

  def _format(self) -> str:
    location = self.filename or "<input>"
    if self.line:
      location = f"{location}:{self.line}:{self.column}"
    return f"{location}: {self.message}"


class FilesystemError(CueImportsError):
  """
  Raised when a file or directory needed for resolution cannot be read.

  Attributes:
      path: The offending path, if known.
  """

  def __init__(self, message: str, path: Optional[str] = None):
    self.path = path
    super().__init__(message)


class ModuleRootNotFoundError(FilesystemError):
  """Raised in strict mode when no `cue.mod` directory encloses the file."""


class ManifestFormatError(CueImportsError):
  """Raised when `cue.mod/module.cue` exists but does not declare a quoted module name."""
