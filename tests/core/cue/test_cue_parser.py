"""
Tests for the CUE Parser.

Verifies:
1. Package clause and import declarations (single, grouped, aliased).
2. Field forms: nested labels, aliases, patterns, optional and required markers.
3. Expressions: precedence, unary constraints, calls, lists, comprehensions.
4. Comment collection and error reporting.
"""

import pytest

from cue_imports.core.cue.nodes import (
  Alias,
  BasicLit,
  BinaryExpr,
  CallExpr,
  Comprehension,
  Ellipsis,
  EmbedDecl,
  Field,
  ForClause,
  Ident,
  IfClause,
  ImportDecl,
  Interpolation,
  LetClause,
  ListLit,
  ParenExpr,
  PatternLabel,
  SelectorExpr,
  StructLit,
  UnaryExpr,
)
from cue_imports.core.cue.parser import parse_file, parse_package_clause
from cue_imports.errors import ParseError


def only_field(src: str) -> Field:
  file = parse_file(src)
  assert len(file.decls) == 1
  assert isinstance(file.decls[0], Field)
  return file.decls[0]


def test_package_and_grouped_imports():
  src = 'package foo\n\nimport (\n\t"strings"\n\tj "encoding/json"\n)\n\nx: 1\n'
  file = parse_file(src, "foo.cue")

  assert file.package_name == "foo"
  assert [spec.path_value for spec in file.imports] == ["strings", "encoding/json"]
  assert file.imports[0].alias is None
  assert file.imports[1].alias.name == "j"

  decl = file.import_decls[0]
  assert decl.parenthesized
  assert src[decl.start : decl.end] == 'import (\n\t"strings"\n\tj "encoding/json"\n)'


def test_multiple_single_imports():
  file = parse_file('import "math"\nimport "list"\n\na: 1\n')
  assert [type(d) for d in file.decls] == [ImportDecl, ImportDecl, Field]
  assert file.package_name == ""


def test_attribute_before_package_clause():
  file = parse_file("@if(prod)\npackage foo\n\na: 1\n")
  assert file.package_name == "foo"
  assert [type(d) for d in file.decls] == [Field]


def test_nested_field_shorthand():
  field = only_field("a: b: c: 1\n")
  assert field.label.name == "a"
  assert isinstance(field.value, StructLit)
  inner = field.value.elts[0]
  assert inner.label.name == "b"
  assert inner.value.elts[0].label.name == "c"
  assert inner.value.elts[0].value.value == "1"


def test_label_forms():
  file = parse_file('#Def: {}\n_hidden: 1\n"quoted-label": 2\nopt?: int\nreq!: string\nX=aliased: 3\n(k): 4\n')
  labels = [d.label for d in file.decls]

  assert labels[0].name == "#Def"
  assert labels[1].name == "_hidden"
  assert isinstance(labels[2], BasicLit)
  assert file.decls[3].constraint == "?"
  assert file.decls[4].constraint == "!"
  assert isinstance(labels[5], Alias) and labels[5].ident.name == "X" and labels[5].label.name == "aliased"
  assert isinstance(labels[6], ParenExpr)


def test_pattern_label_with_alias():
  field = only_field("[Name=string]: {name: Name}\n")
  assert isinstance(field.label, PatternLabel)
  assert field.label.alias.name == "Name"
  assert field.label.expr.name == "string"


def test_list_value_is_not_mistaken_for_pattern():
  field = only_field("a: [1, 2, {b: [3]}]\n")
  assert isinstance(field.value, ListLit)
  assert len(field.value.elts) == 3


def test_keywords_as_labels():
  file = parse_file("if: 1\nfor: 2\nlet: 3\nin: 4\nimport: 5\npackage: 6\n")
  assert [d.label.name for d in file.decls] == ["if", "for", "let", "in", "import", "package"]
  assert file.package is None


def test_let_and_comprehension():
  file = parse_file("let L = [1, 2]\nfor i, v in L if v > 1 let w = v {\n\t\"f\\(i)\": w\n}\n")
  let_decl, comp = file.decls

  assert isinstance(let_decl, LetClause) and let_decl.ident.name == "L"
  assert isinstance(comp, Comprehension)
  assert isinstance(comp.clauses[0], ForClause)
  assert comp.clauses[0].key.name == "i"
  assert comp.clauses[0].value.name == "v"
  assert isinstance(comp.clauses[1], IfClause)
  assert isinstance(comp.clauses[2], LetClause)
  assert isinstance(comp.value.elts[0].label, Interpolation)


def test_list_comprehension_and_ellipsis():
  field = only_field("a: [for x in y {x}, ...int]\n")
  comp, ell = field.value.elts
  assert isinstance(comp, Comprehension)
  assert isinstance(comp.value.elts[0], EmbedDecl)
  assert isinstance(ell, Ellipsis) and ell.type.name == "int"


def test_open_struct_ellipsis():
  field = only_field("a: {b: 1, ...}\n")
  assert isinstance(field.value.elts[1], Ellipsis)
  assert field.value.elts[1].type is None


def test_binary_precedence():
  field = only_field("a: 1 + 2 * 3\n")
  expr = field.value
  assert isinstance(expr, BinaryExpr) and expr.op == "+"
  assert isinstance(expr.y, BinaryExpr) and expr.y.op == "*"


def test_default_marker_and_disjunction():
  field = only_field('a: *"x" | string\n')
  expr = field.value
  assert expr.op == "|"
  assert isinstance(expr.x, UnaryExpr) and expr.x.op == "*"


def test_bound_constraints():
  field = only_field("a: >=0 & <10\n")
  assert field.value.op == "&"
  assert field.value.x.op == ">="
  assert field.value.y.op == "<"


def test_selector_call_and_index():
  field = only_field("a: strings.Split(b, \",\")[0]\n")
  index = field.value
  call = index.x
  assert isinstance(call, CallExpr)
  assert isinstance(call.fun, SelectorExpr)
  assert call.fun.x.name == "strings" and call.fun.sel.name == "Split"
  assert len(call.args) == 2


def test_interpolation_parts_are_parsed():
  field = only_field('a: "v\\(math.Floor(b))"\n')
  assert isinstance(field.value, Interpolation)
  part = field.value.parts[0]
  assert isinstance(part, CallExpr)
  assert part.fun.x.name == "math"


def test_field_attributes():
  field = only_field('a: int @go(A) @json("a")\n')
  assert [attr.text for attr in field.attrs] == ["@go(A)", '@json("a")']


def test_embedded_expression():
  file = parse_file("#Base & {a: 1}\n")
  assert isinstance(file.decls[0], EmbedDecl)


def test_comments_are_collected_in_order():
  file = parse_file("// one\npackage p\n\n// two\na: 1 // three\n")
  assert [c.text for c in file.comments] == ["// one", "// two", "// three"]
  assert [c.line for c in file.comments] == [1, 4, 5]


def test_node_offsets_match_source():
  src = "package p\n\nvalue: {\n\tx: 1\n}\n"
  field = parse_file(src).decls[0]
  assert src[field.start : field.end] == "value: {\n\tx: 1\n}"


def test_import_after_declaration_is_rejected():
  with pytest.raises(ParseError, match="unexpected 'import'"):
    parse_file('a: 1\nimport "math"\n')


def test_unbalanced_paren_reports_position():
  with pytest.raises(ParseError) as exc:
    parse_file("a: 1\nb: (1 + 2", "bad.cue")
  assert exc.value.filename == "bad.cue"
  assert exc.value.line == 2


def test_missing_separator():
  with pytest.raises(ParseError, match="missing ','"):
    parse_file("a: 1 b: 2\n")


def test_package_clause_only():
  assert parse_package_clause("// header\npackage foo\n\n^^^ not parsed") == "foo"
  assert parse_package_clause("@if(x)\npackage bar\n") == "bar"
  assert parse_package_clause("a: 1\n") == ""
  assert parse_package_clause("") == ""


def test_empty_file():
  file = parse_file("")
  assert file.decls == []
  assert file.package is None
  assert isinstance(file.unresolved, list)


def test_ident_values():
  field = only_field("a: b\n")
  assert isinstance(field.value, Ident)
