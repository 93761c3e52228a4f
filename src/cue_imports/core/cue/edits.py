"""
Explicit Tree Edits.

The import fixer changes a file in exactly two ways: it deletes declarations of
one kind and inserts a declaration right after the package clause. Both edits
operate in place on a `File` and keep its comment list consistent with the
declarations that remain.
"""

from typing import List, Type

from cue_imports.core.cue.nodes import Decl, File, line_number


def remove_decls_of_kind(file: File, kind: Type) -> List[Decl]:
  """
  Deletes every top-level declaration of type `kind`.

  Comments located inside a deleted declaration, or trailing on its last
  line, are deleted with it. Comments on the lines above a declaration are
  left alone.

  Args:
      file: The tree to edit.
      kind: Node class to remove, e.g. `ImportDecl`.

  Returns:
      List[Decl]: The removed declarations, in source order.
  """
  removed = [decl for decl in file.decls if isinstance(decl, kind)]
  if not removed:
    return []

  file.decls = [decl for decl in file.decls if not isinstance(decl, kind)]

  spans = [(decl.start, decl.end, line_number(file.source, decl.end)) for decl in removed if not decl.synthesized]
  file.comments = [
    comment
    for comment in file.comments
    if not any(start <= comment.start < end or comment.line == last_line for start, end, last_line in spans)
  ]
  return removed


def insert_after_package(file: File, decl: Decl) -> None:
  """
  Inserts `decl` as the first declaration after the package clause.

  Without a package clause the declaration becomes the first of the file.
  """
  file.decls.insert(0, decl)
