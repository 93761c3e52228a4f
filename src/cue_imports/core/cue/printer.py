"""
Trivia-Preserving Printer.

Renders an edited `File` back to source text. Only the import region is
regenerated; everything else is copied from the original source so untouched
declarations keep their exact formatting.

The output is assembled from four sections, each optional:

1.  **Head**: source up to the end of the package clause line (leading
    comments and file attributes included).
2.  **Floating comments**: comments that sat between the head and the first
    kept declaration without being its doc comment. Comment lines that were
    adjacent stay adjacent; groups are separated by one blank line.
3.  **Import block**: the synthesized import declaration(s).
4.  **Rest**: source from the doc comment of the first kept declaration to the
    end of the file.
"""

from typing import List, Tuple

from cue_imports.core.cue.nodes import Comment, Decl, File, ImportDecl, ImportSpec, line_number, line_start


def format_import_spec(spec: ImportSpec) -> str:
  if spec.alias is not None:
    return f"{spec.alias.name} {spec.path.value}"
  return spec.path.value


def format_import_decl(decl: ImportDecl) -> str:
  """
  Renders an import declaration canonically.

  A single spec renders as `import "path"`; several specs render as a
  parenthesized, tab-indented block in which `blank_before` specs are
  preceded by an empty line.

  Args:
      decl: The declaration to render.

  Returns:
      str: Declaration text without a trailing newline.
  """
  if len(decl.specs) == 1:
    return f"import {format_import_spec(decl.specs[0])}"
  lines = ["import ("]
  for spec in decl.specs:
    if spec.blank_before:
      lines.append("")
    lines.append(f"\t{format_import_spec(spec)}")
  lines.append(")")
  return "\n".join(lines)


def _doc_start(file: File, decl: Decl) -> int:
  """Start of the line holding the first doc comment of `decl`, or of `decl` itself."""
  source = file.source
  start = line_start(source, decl.start)
  line = line_number(source, decl.start)
  for comment in reversed([c for c in file.comments if c.start < decl.start]):
    alone = not source[line_start(source, comment.start) : comment.start].strip()
    if comment.line != line - 1 or not alone:
      break
    line = comment.line
    start = line_start(source, comment.start)
  return start


def _group_comments(comments: List[Comment]) -> List[List[Comment]]:
  groups: List[List[Comment]] = []
  for comment in comments:
    if groups and comment.line == groups[-1][-1].line + 1:
      groups[-1].append(comment)
    else:
      groups.append([comment])
  return groups


def render_file(file: File) -> str:
  """
  Renders a file whose only edits are the removal and insertion of import
  declarations.

  Args:
      file: The edited tree. Synthesized declarations are rendered canonically,
          the remaining ones are copied from `file.source`.

  Returns:
      str: The file content, ending with exactly one newline.
  """
  source = file.source
  kept = [decl for decl in file.decls if not decl.synthesized]
  inserted = [decl for decl in file.decls if decl.synthesized and isinstance(decl, ImportDecl)]

  head_end = 0
  if file.package is not None:
    newline = source.find("\n", file.package.end)
    head_end = len(source) if newline == -1 else newline

  rest_start = max(_doc_start(file, kept[0]), head_end) if kept else len(source)
  floating = [c for c in file.comments if head_end <= c.start < rest_start]

  sections: List[Tuple[str, str]] = []
  head = source[:head_end].rstrip()
  if head:
    sections.append(("head", head))
  for group in _group_comments(floating):
    sections.append(("comment", "\n".join(c.text.rstrip() for c in group)))
  for decl in inserted:
    sections.append(("import", format_import_decl(decl)))
  rest = source[rest_start:].rstrip()
  if rest:
    sections.append(("rest", rest))

  if not sections:
    return "\n"

  out = [sections[0][1]]
  for (prev_kind, _), (kind, text) in zip(sections, sections[1:]):
    out.append("\n" if prev_kind == "comment" and kind == "import" else "\n\n")
    out.append(text)
  out.append("\n")
  return "".join(out)
