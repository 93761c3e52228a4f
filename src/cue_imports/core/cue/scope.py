"""
Lexical Scope Analysis.

Binds every identifier reference of a parsed file to the declaration it refers
to and reports the references that bind to nothing. Those unresolved
identifiers are the raw material of the import fixer: `json` in
`json.Marshal(x)` is unresolved precisely when no import, field, alias or
`let` of the file declares it.

Scopes:
1.  **File**: import binding names plus top-level field labels, aliases and lets.
2.  **Struct**: the labels, aliases and lets declared directly in the struct.
3.  **Comprehension**: each `for`/`let` clause opens a scope for the clauses
    after it and the produced struct.
4.  **Pattern**: `[X=expr]: value` binds `X` inside `value`.
"""

from typing import Iterable, List, Optional, Set

from cue_imports.core.cue.nodes import (
  Alias,
  Comprehension,
  Decl,
  Field,
  File,
  ForClause,
  Ident,
  IfClause,
  ImportSpec,
  Interpolation,
  Label,
  LetClause,
  ParenExpr,
  PatternLabel,
  SelectorExpr,
  StructLit,
)
from cue_imports.core.cue.visitor import CueVisitor

# Identifiers provided by the language itself.
PREDECLARED = frozenset(
  {
    "_",
    "bool",
    "bytes",
    "float",
    "float32",
    "float64",
    "int",
    "int8",
    "int16",
    "int32",
    "int64",
    "int128",
    "uint",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "uint128",
    "rune",
    "number",
    "string",
    "len",
    "close",
    "and",
    "or",
    "div",
    "mod",
    "quo",
    "rem",
    "error",
    "matchN",
    "matchIf",
  }
)


def import_path_name(path: str) -> str:
  """
  Returns the name an import path binds when imported without an alias.

  Args:
      path: Unquoted import path, e.g. `encoding/json`, `example.com/m/foo:bar`
          or `example.com/m@v1`.

  Returns:
      str: The `:qualifier` if present, else the last path element without a
      `@version` suffix.
  """
  if ":" in path:
    return path.rsplit(":", 1)[1]
  return path.rsplit("/", 1)[-1].split("@", 1)[0]


def import_name(spec: ImportSpec) -> str:
  """The identifier bound by an import spec: its alias or the path-derived name."""
  if spec.alias is not None:
    return spec.alias.name
  return import_path_name(spec.path_value)


def declared_names(decls: Iterable[Decl]) -> List[str]:
  """
  Names declared directly by a declaration list.

  Covers identifier field labels (including definitions and hidden fields),
  label aliases and `let` clauses. Quoted and computed labels declare nothing
  referable.

  Args:
      decls: Declarations of a file or struct literal.

  Returns:
      List[str]: Declared names in source order.
  """
  names: List[str] = []
  for decl in decls:
    if isinstance(decl, Field):
      label = decl.label
      if isinstance(label, Alias):
        names.append(label.ident.name)
        label = label.label
      if isinstance(label, Ident):
        names.append(label.name)
    elif isinstance(decl, LetClause):
      names.append(decl.ident.name)
  return names


class Scope:
  """A set of names with a link to the enclosing scope."""

  def __init__(self, names: Iterable[str], parent: Optional["Scope"] = None):
    self.names: Set[str] = set(names)
    self.parent = parent

  def lookup(self, name: str) -> bool:
    scope: Optional[Scope] = self
    while scope is not None:
      if name in scope.names:
        return True
      scope = scope.parent
    return False


class ScopeResolver(CueVisitor):
  """
  Visitor collecting the identifier references that no scope declares.

  Only reference positions are checked: plain field labels, the member of a
  selector and import aliases are declarations or names, not references.
  """

  def __init__(self, file: File):
    file_names = [import_name(spec) for spec in file.imports]
    file_names.extend(declared_names(file.decls))
    self.scope = Scope(file_names)
    self.unresolved: List[Ident] = []

  def _push(self, names: Iterable[str]) -> None:
    self.scope = Scope(names, self.scope)

  def _pop(self) -> None:
    self.scope = self.scope.parent

  def visit_Ident(self, node: Ident) -> None:
    if node.name not in PREDECLARED and not self.scope.lookup(node.name):
      self.unresolved.append(node)

  def visit_SelectorExpr(self, node: SelectorExpr) -> bool:
    self.walk(node.x)
    return False

  def visit_Package(self, node) -> bool:
    return False

  def visit_ImportDecl(self, node) -> bool:
    return False

  def visit_StructLit(self, node: StructLit) -> bool:
    self._push(declared_names(node.elts))
    for elt in node.elts:
      self.walk(elt)
    self._pop()
    return False

  def visit_Field(self, node: Field) -> bool:
    self._visit_label(node.label)
    pattern = node.label.label if isinstance(node.label, Alias) else node.label
    if isinstance(pattern, PatternLabel) and pattern.alias is not None:
      self._push([pattern.alias.name])
      self.walk(node.value)
      self._pop()
    else:
      self.walk(node.value)
    return False

  def _visit_label(self, label: Label) -> None:
    if isinstance(label, Alias):
      self._visit_label(label.label)
    elif isinstance(label, Interpolation):
      for part in label.parts:
        self.walk(part)
    elif isinstance(label, (ParenExpr, PatternLabel)):
      self.walk(label.expr)

  def visit_LetClause(self, node: LetClause) -> bool:
    self.walk(node.expr)
    return False

  def visit_Comprehension(self, node: Comprehension) -> bool:
    pushed = 0
    for clause in node.clauses:
      if isinstance(clause, ForClause):
        self.walk(clause.source)
        self._push([ident.name for ident in (clause.key, clause.value) if ident is not None])
        pushed += 1
      elif isinstance(clause, IfClause):
        self.walk(clause.condition)
      else:
        self.walk(clause.expr)
        self._push([clause.ident.name])
        pushed += 1
    self.walk(node.value)
    for _ in range(pushed):
      self._pop()
    return False


def resolve_identifiers(file: File) -> List[Ident]:
  """
  Runs scope analysis over a file.

  Args:
      file: A freshly parsed file.

  Returns:
      List[Ident]: Unresolved identifier references in source order.
  """
  resolver = ScopeResolver(file)
  for decl in file.decls:
    resolver.walk(decl)
  return resolver.unresolved
