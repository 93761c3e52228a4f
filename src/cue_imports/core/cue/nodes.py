"""
CUE Syntax Tree Nodes.

This module defines the data structures for representing a parsed CUE file.
Every node records the source offsets it was parsed from (`start`, `end`);
nodes synthesized by the import fixer use `-1` for both, which tells the
printer to render them canonically instead of copying source text.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union

from cue_imports.core.cue.literals import unquote

NO_POS = -1


@dataclass
class Node:
  """Base class for all CUE syntax nodes."""

  start: int = field(default=NO_POS, kw_only=True)
  end: int = field(default=NO_POS, kw_only=True)

  @property
  def synthesized(self) -> bool:
    return self.start == NO_POS


@dataclass
class Comment(Node):
  """A `//` line comment, including the slashes."""

  text: str
  line: int = 0


# --- Expressions ---


@dataclass
class Ident(Node):
  """An identifier: plain, `#Definition`, `_hidden` or `_#hiddenDefinition`."""

  name: str


@dataclass
class BasicLit(Node):
  """
  A literal without interpolation.

  Attributes:
      kind: One of "INT", "FLOAT", "STRING", "TRUE", "FALSE", "NULL".
      value: The literal exactly as written in source.
  """

  kind: str
  value: str


@dataclass
class Interpolation(Node):
  """A string literal containing `\\(expr)` parts; only the embedded expressions are kept."""

  value: str
  parts: List["Expr"] = field(default_factory=list)


@dataclass
class BottomLit(Node):
  """The bottom value `_|_`."""


@dataclass
class ParenExpr(Node):
  expr: "Expr"


@dataclass
class SelectorExpr(Node):
  """`x.sel`, where `sel` is an identifier or a quoted string."""

  x: "Expr"
  sel: Union[Ident, BasicLit]


@dataclass
class IndexExpr(Node):
  x: "Expr"
  index: "Expr"


@dataclass
class CallExpr(Node):
  fun: "Expr"
  args: List["Expr"] = field(default_factory=list)


@dataclass
class UnaryExpr(Node):
  op: str
  x: "Expr"


@dataclass
class BinaryExpr(Node):
  op: str
  x: "Expr"
  y: "Expr"


@dataclass
class StructLit(Node):
  elts: List["Decl"] = field(default_factory=list)


@dataclass
class ListLit(Node):
  elts: List["Expr"] = field(default_factory=list)


@dataclass
class Ellipsis(Node):
  """`...` or `...T` inside a struct or list."""

  type: Optional["Expr"] = None


Expr = Union[
  Ident,
  BasicLit,
  Interpolation,
  BottomLit,
  ParenExpr,
  SelectorExpr,
  IndexExpr,
  CallExpr,
  UnaryExpr,
  BinaryExpr,
  StructLit,
  ListLit,
  Ellipsis,
  "Comprehension",
]


# --- Labels ---


@dataclass
class Alias(Node):
  """`X=label` in label position, binding `X` to the field."""

  ident: Ident
  label: "Label"


@dataclass
class PatternLabel(Node):
  """`[expr]` or `[X=expr]` pattern constraint label."""

  expr: "Expr"
  alias: Optional[Ident] = None


Label = Union[Ident, BasicLit, Interpolation, ParenExpr, Alias, PatternLabel]


# --- Declarations ---


@dataclass
class Attribute(Node):
  text: str


@dataclass
class Field(Node):
  """
  A struct field `label: value`.

  Attributes:
      label: The field label.
      value: The field value. `a: b: c` is stored as a field whose value is a
          single-field StructLit.
      constraint: "?" for optional, "!" for required fields, else "".
      attrs: Trailing `@attr(...)` annotations.
  """

  label: Label
  value: "Expr"
  constraint: str = ""
  attrs: List[Attribute] = field(default_factory=list)


@dataclass
class LetClause(Node):
  ident: Ident
  expr: "Expr"


@dataclass
class ForClause(Node):
  value: Ident
  source: "Expr"
  key: Optional[Ident] = None


@dataclass
class IfClause(Node):
  condition: "Expr"


Clause = Union[ForClause, IfClause, LetClause]


@dataclass
class Comprehension(Node):
  clauses: List[Clause]
  value: StructLit


@dataclass
class EmbedDecl(Node):
  """An expression embedded directly in a struct or file."""

  expr: "Expr"


@dataclass
class Package(Node):
  name: Ident


@dataclass
class ImportSpec(Node):
  """
  A single import: optional alias plus quoted path literal.

  Attributes:
      path: The path literal as written in source.
      alias: Explicit binding name, if any.
      blank_before: Set on the first spec of a new group in a synthesized
          declaration; rendered as an empty line.
  """

  path: BasicLit
  alias: Optional[Ident] = None
  blank_before: bool = False

  @property
  def path_value(self) -> str:
    """The unquoted import path, e.g. `encoding/json` or `example.com/m:pkg`."""
    return unquote(self.path.value)


@dataclass
class ImportDecl(Node):
  specs: List[ImportSpec] = field(default_factory=list)
  parenthesized: bool = False


Decl = Union[Field, LetClause, Comprehension, EmbedDecl, Ellipsis, Attribute, ImportDecl]


@dataclass
class File(Node):
  """
  A parsed CUE source file.

  Attributes:
      filename: Name the file was parsed under.
      source: The complete source text.
      package: The package clause, if any.
      decls: Top-level declarations in source order, import declarations included.
      comments: Every comment in the file, in source order.
      unresolved: Identifiers not bound by any declaration of this file
          (filled in by the scope analysis).
  """

  filename: str
  source: str
  package: Optional[Package] = None
  decls: List[Decl] = field(default_factory=list)
  comments: List[Comment] = field(default_factory=list)
  unresolved: List[Ident] = field(default_factory=list)

  @property
  def package_name(self) -> str:
    return self.package.name.name if self.package else ""

  @property
  def import_decls(self) -> List[ImportDecl]:
    return [d for d in self.decls if isinstance(d, ImportDecl)]

  @property
  def imports(self) -> List[ImportSpec]:
    """All import specs of the file, in source order."""
    return [spec for decl in self.import_decls for spec in decl.specs]


def iter_children(node: Node) -> Iterator[Node]:
  """
  Yields the direct child nodes of `node` in source order.

  Args:
      node: Any syntax node.

  Yields:
      Child nodes. Comments are not part of the traversal.
  """
  if isinstance(node, File):
    if node.package:
      yield node.package
    yield from node.decls
  elif isinstance(node, (StructLit, ListLit)):
    yield from node.elts
  elif isinstance(node, Field):
    yield node.label
    yield node.value
    yield from node.attrs
  elif isinstance(node, Alias):
    yield node.ident
    yield node.label
  elif isinstance(node, PatternLabel):
    if node.alias:
      yield node.alias
    yield node.expr
  elif isinstance(node, LetClause):
    yield node.ident
    yield node.expr
  elif isinstance(node, ForClause):
    if node.key:
      yield node.key
    yield node.value
    yield node.source
  elif isinstance(node, IfClause):
    yield node.condition
  elif isinstance(node, Comprehension):
    yield from node.clauses
    yield node.value
  elif isinstance(node, EmbedDecl):
    yield node.expr
  elif isinstance(node, Ellipsis):
    if node.type is not None:
      yield node.type
  elif isinstance(node, Package):
    yield node.name
  elif isinstance(node, ImportDecl):
    yield from node.specs
  elif isinstance(node, ImportSpec):
    if node.alias:
      yield node.alias
    yield node.path
  elif isinstance(node, Interpolation):
    yield from node.parts
  elif isinstance(node, ParenExpr):
    yield node.expr
  elif isinstance(node, SelectorExpr):
    yield node.x
    yield node.sel
  elif isinstance(node, IndexExpr):
    yield node.x
    yield node.index
  elif isinstance(node, CallExpr):
    yield node.fun
    yield from node.args
  elif isinstance(node, UnaryExpr):
    yield node.x
  elif isinstance(node, BinaryExpr):
    yield node.x
    yield node.y


def line_number(source: str, offset: int) -> int:
  """1-based line number of `offset` in `source`."""
  return source.count("\n", 0, offset) + 1


def line_start(source: str, offset: int) -> int:
  """Offset of the first character on the line containing `offset`."""
  return source.rfind("\n", 0, offset) + 1
