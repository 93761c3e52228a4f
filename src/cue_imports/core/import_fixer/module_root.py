"""
Module Root Locator.

A CUE module is the directory holding `cue.mod/`. Its manifest,
`cue.mod/module.cue`, declares the module name that prefixes every local
import path:

    module: "example.com/mod@v0"

The major version suffix is not part of import paths and is stripped.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from cue_imports.core.cue.literals import unquote
from cue_imports.core.cue.nodes import BasicLit, Field, Ident
from cue_imports.core.cue.parser import parse_file
from cue_imports.core.import_fixer.utils import read_source
from cue_imports.errors import ManifestFormatError, ParseError

CUE_MOD = "cue.mod"
MANIFEST = "module.cue"
VENDOR_ROOTS = ("pkg", "gen", "usr")

_MAJOR_VERSION = re.compile(r"@v\d+$")


@dataclass(frozen=True)
class ModuleRoot:
  """
  A located module.

  Attributes:
      root: Directory containing `cue.mod`.
      module: Module name from the manifest, without major version suffix.
  """

  root: Path
  module: str

  @property
  def cue_mod(self) -> Path:
    return self.root / CUE_MOD


def find_module_root(start: Path) -> Optional[ModuleRoot]:
  """
  Ascends from `start` to the first directory containing `cue.mod`.

  Args:
      start: Directory to begin the search in.

  Returns:
      Optional[ModuleRoot]: The module, or None if no ancestor has `cue.mod`.

  Raises:
      FilesystemError: If the manifest cannot be read.
      ManifestFormatError: If the manifest has no usable `module` field.
  """
  current = start.resolve()
  for directory in [current, *current.parents]:
    if (directory / CUE_MOD).is_dir():
      return ModuleRoot(directory, read_module_name(directory / CUE_MOD / MANIFEST))
  return None


def read_module_name(manifest: Path) -> str:
  """
  Extracts the module name from a `module.cue` manifest.

  Args:
      manifest: Path of the manifest.

  Returns:
      str: The module name, e.g. `example.com/mod`.

  Raises:
      FilesystemError: If the manifest cannot be read.
      ManifestFormatError: If it is malformed or lacks a quoted `module` value.
  """
  source = read_source(manifest)
  try:
    file = parse_file(source, str(manifest))
  except ParseError as exc:
    raise ManifestFormatError(f"{manifest}: invalid manifest: {exc.message}") from exc

  for decl in file.decls:
    if not (isinstance(decl, Field) and isinstance(decl.label, Ident) and decl.label.name == "module"):
      continue
    if not (isinstance(decl.value, BasicLit) and decl.value.kind == "STRING"):
      raise ManifestFormatError(f"{manifest}: module name must be a quoted string")
    try:
      name = _MAJOR_VERSION.sub("", unquote(decl.value.value))
    except ValueError as exc:
      raise ManifestFormatError(f"{manifest}: invalid module name: {exc}") from exc
    if not name:
      raise ManifestFormatError(f"{manifest}: module name is empty")
    return name

  raise ManifestFormatError(f"{manifest}: missing module field")
