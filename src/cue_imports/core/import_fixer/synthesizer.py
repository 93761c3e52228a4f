"""
Import Synthesizer.

Turns the resolved imports into the file's final import declaration:

1.  **Reconciliation**: existing imports whose binding name is used as a
    selector base are kept exactly (path and alias) and take precedence over a
    fresh resolution of the same name or of the same path. A bare name that
    resolves to a path already imported under an alias stays unimported.
    Unused imports are dropped.
2.  **Grouping**: standard library imports first, then everything else, each
    group sorted by path and free of duplicate paths.
3.  **Placement**: all previous import declarations are deleted and a single
    new one is inserted after the package clause, unless nothing is imported.
"""

from dataclasses import dataclass, field
from typing import List

from cue_imports.core.cue.edits import insert_after_package, remove_decls_of_kind
from cue_imports.core.cue.literals import quote
from cue_imports.core.cue.nodes import BasicLit, File, Ident, ImportDecl, ImportSpec
from cue_imports.core.cue.printer import render_file
from cue_imports.core.cue.scope import import_name
from cue_imports.core.import_fixer.extractor import selector_bases
from cue_imports.core.import_fixer.stdlib import is_stdlib_path
from cue_imports.core.import_fixer.types import ImportReq, ResolvedMap
from cue_imports.utils.console import log_debug


def unused_imports(file: File) -> List[ImportSpec]:
  """
  Lists the import specs whose binding name is never used as a selector base.

  Args:
      file: The parsed file.

  Returns:
      List[ImportSpec]: Unused specs in source order.
  """
  bases = selector_bases(file)
  return [spec for spec in file.imports if import_name(spec) not in bases]


def _dedupe(reqs: List[ImportReq]) -> List[ImportReq]:
  """Sorts by path and keeps one requirement per path, preferring an unaliased one."""
  ordered = sorted(reqs, key=lambda r: (r.path, r.alias is not None, r.alias or ""))
  unique: List[ImportReq] = []
  for req in ordered:
    if unique and unique[-1].path == req.path:
      continue
    unique.append(req)
  return unique


@dataclass
class ImportBlock:
  """
  The planned import declaration.

  Attributes:
      std: Standard library imports, sorted by path.
      other: All other imports, sorted by path.
  """

  std: List[ImportReq] = field(default_factory=list)
  other: List[ImportReq] = field(default_factory=list)

  @property
  def is_empty(self) -> bool:
    return not self.std and not self.other

  @property
  def paths(self) -> List[str]:
    return [req.path for req in self.std + self.other]

  def to_decl(self) -> ImportDecl:
    """Builds the synthesized declaration; the first spec of the second group gets a blank line."""
    specs = []
    for group in (self.std, self.other):
      for idx, req in enumerate(group):
        specs.append(
          ImportSpec(
            BasicLit("STRING", quote(req.path)),
            alias=Ident(req.alias) if req.alias else None,
            blank_before=idx == 0 and bool(specs),
          )
        )
    return ImportDecl(specs, parenthesized=len(specs) > 1)


class ImportSynthesizer:
  """
  Rewrites the import declarations of a file from a ResolvedMap.
  """

  def plan(self, file: File, resolved: ResolvedMap) -> ImportBlock:
    """
    Merges existing used imports with the resolved ones and groups them.

    Args:
        file: The parsed file (its existing imports are reconciled).
        resolved: Freshly resolved imports by binding name.

    Returns:
        ImportBlock: The grouped, sorted, deduplicated imports.
    """
    bases = selector_bases(file)
    kept = {}
    for spec in file.imports:
      if import_name(spec) not in bases:
        log_debug(f"synthesize: dropping unused import {spec.path_value}")
        continue
      req = ImportReq(spec.path_value, spec.alias.name if spec.alias else None)
      kept[req.name] = req

    existing_paths = {req.path for req in kept.values()}
    merged = {}
    for name, req in resolved.items():
      if req.path in existing_paths:
        log_debug(f"synthesize: {req.path} already imported, not adding it for {name}")
        continue
      merged[name] = req
    merged.update(kept)

    reqs = list(merged.values())
    return ImportBlock(
      std=_dedupe([r for r in reqs if is_stdlib_path(r.path)]),
      other=_dedupe([r for r in reqs if not is_stdlib_path(r.path)]),
    )

  def synthesize(self, file: File, resolved: ResolvedMap) -> File:
    """
    Replaces the import declarations of `file` in place.

    Args:
        file: The tree to edit.
        resolved: Freshly resolved imports by binding name.

    Returns:
        File: The same tree, edited.
    """
    block = self.plan(file, resolved)
    remove_decls_of_kind(file, ImportDecl)
    if not block.is_empty:
      insert_after_package(file, block.to_decl())
    log_debug(f"synthesize: imports {block.paths}")
    return file

  def render(self, file: File) -> str:
    return render_file(file)
