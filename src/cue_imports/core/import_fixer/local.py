"""
Local Module Resolver.

Maps pending names to packages of the enclosing CUE module, including the
packages vendored under `cue.mod/pkg`, `cue.mod/gen` and `cue.mod/usr`.

Resolution walks the module depth-first in lexical order. For each directory
only the package clause of its first source file is read; a directory is
inspected further only when that package name is pending. A candidate is
confirmed when its files declare at least one of the members the fixed file
selects from it, so an unrelated package that happens to share the name is not
imported. The first confirmed directory wins.
"""

from pathlib import Path
from typing import Iterator, Optional

from cue_imports.config import RuntimeConfig
from cue_imports.core.cue.parser import parse_file, parse_package_clause
from cue_imports.core.cue.scope import declared_names
from cue_imports.core.import_fixer.module_root import CUE_MOD, VENDOR_ROOTS, ModuleRoot, find_module_root
from cue_imports.core.import_fixer.types import ImportReq, ResolvedMap, UnresolvedSet
from cue_imports.core.import_fixer.utils import list_directory, read_source, source_files
from cue_imports.errors import ModuleRootNotFoundError
from cue_imports.utils.console import log_debug


def iter_package_dirs(module: ModuleRoot) -> Iterator[Path]:
  """
  Yields the module's directories depth-first in lexical order, root first.

  Hidden directories and nested `cue.mod` directories are skipped together
  with their subtrees. Nested module roots are skipped as well, except below
  the root's own `cue.mod`: vendored modules ship their own manifest but their
  packages are still importable.

  Args:
      module: The module to walk.

  Yields:
      Path: Candidate package directories.

  Raises:
      FilesystemError: If a directory cannot be listed.
  """
  stack = [module.root]
  while stack:
    directory = stack.pop()
    yield directory
    children = []
    for entry in list_directory(directory):
      if entry.name.startswith(".") or not entry.is_dir():
        continue
      path = Path(entry.path)
      if entry.name == CUE_MOD:
        if path != module.cue_mod:
          continue
      elif (path / CUE_MOD).is_dir() and not _is_vendored(module, path):
        continue
      children.append(path)
    stack.extend(reversed(children))


def _is_vendored(module: ModuleRoot, path: Path) -> bool:
  return module.cue_mod in path.parents


def import_path_for(module: ModuleRoot, directory: Path, package: str) -> str:
  """
  Computes the import path of the package declared in `directory`.

  Args:
      module: The enclosing module.
      directory: Directory of the package, inside `module.root`.
      package: Declared package name.

  Returns:
      str: `module/rel/dir`, the path below a vendor root for vendored
      packages, suffixed with `:package` when the last path element differs
      from the package name.
  """
  rel = directory.relative_to(module.root).as_posix()
  parts = rel.split("/")
  if len(parts) > 2 and parts[0] == CUE_MOD and parts[1] in VENDOR_ROOTS:
    path = "/".join(parts[2:])
  elif rel == ".":
    path = module.module
  else:
    path = f"{module.module}/{rel}"

  if path.rsplit("/", 1)[-1] != package:
    path = f"{path}:{package}"
  return path


class LocalModuleResolver:
  """
  Resolves pending names against the packages of the enclosing module.

  Args:
      config: Runtime settings (module root policy and source extension).
  """

  def __init__(self, config: Optional[RuntimeConfig] = None):
    self.config = config or RuntimeConfig()

  def resolve(self, unresolved: UnresolvedSet, filename: str) -> ResolvedMap:
    """
    Claims pending names that name packages of the enclosing module.

    Args:
        unresolved: Pending names; resolved entries are removed in place.
        filename: Path of the file being fixed.

    Returns:
        ResolvedMap: The local imports found. Names not found stay pending.

    Raises:
        ModuleRootNotFoundError: In strict mode, when no module encloses the file.
        FilesystemError: If a directory or file cannot be read.
        ManifestFormatError: If the module manifest is malformed.
        ParseError: If a candidate package file is malformed.
    """
    resolved: ResolvedMap = {}
    if not unresolved:
      return resolved

    start = Path(filename).parent
    module = find_module_root(start)
    if module is None:
      if self.config.strict_module_root:
        raise ModuleRootNotFoundError(
          f"no {CUE_MOD} directory found above {start.resolve()}",
          path=str(start),
        )
      log_debug(f"local: no module root above {start.resolve()}, skipping {sorted(unresolved)}")
      return resolved

    log_debug(f"local: module {module.module} at {module.root}")
    for directory in iter_package_dirs(module):
      self._resolve_in_directory(module, directory, unresolved, resolved)
      if not unresolved:
        break
    return resolved

  def _resolve_in_directory(
    self,
    module: ModuleRoot,
    directory: Path,
    unresolved: UnresolvedSet,
    resolved: ResolvedMap,
  ) -> None:
    files = source_files(directory, self.config.extension)
    if not files:
      return

    package = parse_package_clause(read_source(files[0]), str(files[0]))
    if package not in unresolved:
      return

    declared = set()
    for path in files:
      file = parse_file(read_source(path), str(path))
      if file.package_name == package:
        declared.update(declared_names(file.decls))

    if not any(member in declared for member in unresolved[package]):
      log_debug(f"local: {directory} declares package {package} without the selected members")
      return

    req = ImportReq(import_path_for(module, directory, package))
    resolved[package] = req
    del unresolved[package]
    log_debug(f"local: {package} -> {req.path}")
