"""
Sibling-Package Filter.

Files of the same directory that declare the same package share one namespace
with the file being fixed. Names they declare at top level are therefore not
missing imports and are removed from the pending set.
"""

from pathlib import Path

from cue_imports.core.cue.parser import parse_file
from cue_imports.core.cue.scope import declared_names
from cue_imports.core.import_fixer.types import UnresolvedSet
from cue_imports.core.import_fixer.utils import read_source, source_files
from cue_imports.utils.console import log_debug


def filter_sibling_declarations(
  unresolved: UnresolvedSet,
  filename: str,
  package_name: str,
  extension: str = ".cue",
) -> None:
  """
  Removes names declared by same-package siblings of `filename`.

  Args:
      unresolved: Pending names, filtered in place.
      filename: Path of the file being fixed.
      package_name: Its package name ("" when it has no package clause).
      extension: Source file extension.

  Raises:
      FilesystemError: If the directory or a sibling cannot be read.
      ParseError: If a sibling is malformed.
  """
  target = Path(filename)
  directory = target.parent.resolve()

  for path in source_files(directory, extension):
    if path.name == target.name:
      continue
    sibling = parse_file(read_source(path), str(path))
    if sibling.package_name != package_name:
      continue
    for name in declared_names(sibling.decls):
      if unresolved.pop(name, None) is not None:
        log_debug(f"sibling: {name} declared in {path.name}")
