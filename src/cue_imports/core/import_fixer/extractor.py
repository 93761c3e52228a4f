"""
Identifier Extraction.

Collects the `name.member` selectors of a file whose base identifier is not
declared anywhere in the file. Only dotted uses matter: a bare unresolved
identifier can never be satisfied by an import.
"""

from typing import Iterable, Set

from cue_imports.core.cue.nodes import File, Ident, SelectorExpr
from cue_imports.core.cue.visitor import CueVisitor
from cue_imports.core.import_fixer.types import UnresolvedSet


class IdentifierExtractor(CueVisitor):
  """
  Records the member names selected from each unresolved base identifier.

  Attributes:
      names: Base identifiers eligible for recording.
      unresolved: Result map in first-seen order; members may repeat.
  """

  def __init__(self, names: Iterable[str]):
    self.names: Set[str] = set(names)
    self.unresolved: UnresolvedSet = {}

  def visit_SelectorExpr(self, node: SelectorExpr) -> None:
    if isinstance(node.x, Ident) and isinstance(node.sel, Ident) and node.x.name in self.names:
      self.unresolved.setdefault(node.x.name, []).append(node.sel.name)


class SelectorBaseCollector(CueVisitor):
  """Collects every identifier used as the base of a selector."""

  def __init__(self) -> None:
    self.bases: Set[str] = set()

  def visit_SelectorExpr(self, node: SelectorExpr) -> None:
    if isinstance(node.x, Ident):
      self.bases.add(node.x.name)


def extract_unresolved(file: File) -> UnresolvedSet:
  """
  Builds the UnresolvedSet of a parsed file.

  Args:
      file: A file produced by `parse_file` (scope analysis already applied).

  Returns:
      UnresolvedSet: name -> member names, for unresolved selector bases only.
  """
  extractor = IdentifierExtractor(ident.name for ident in file.unresolved)
  extractor.walk(file)
  return extractor.unresolved


def selector_bases(file: File) -> Set[str]:
  collector = SelectorBaseCollector()
  collector.walk(file)
  return collector.bases
