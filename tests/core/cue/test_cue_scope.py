"""
Tests for Scope Analysis.

An identifier is unresolved when no import, field, alias, let clause,
comprehension variable or pattern alias in an enclosing scope declares it.
"""

import pytest

from cue_imports.core.cue.parser import parse_file
from cue_imports.core.cue.scope import import_path_name


def unresolved(src: str):
  return [ident.name for ident in parse_file(src).unresolved]


def test_selector_base_is_unresolved_member_is_not():
  assert unresolved("a: b.c\n") == ["b"]


def test_imported_name_is_resolved():
  assert unresolved('import "strings"\n\na: strings.ToUpper("x")\n') == []


def test_aliased_and_qualified_imports():
  src = 'import (\n\tj "encoding/json"\n\t"example.com/m/foo:bar"\n)\n\na: j.Marshal(bar.X)\n'
  assert unresolved(src) == []


def test_top_level_fields_resolve():
  assert unresolved("a: 1\nb: a + 1\n#D: {x: int}\nc: #D\n") == []


def test_outer_fields_visible_in_nested_structs():
  assert unresolved("a: 1\nb: {c: a, d: {e: c}}\n") == []


def test_inner_fields_not_visible_outside():
  assert unresolved("a: {x: 1}\nb: x\n") == ["x"]


def test_alias_and_let():
  assert unresolved("X=a: 1\nlet L = X + 1\nb: L\n") == []


def test_pattern_alias_scoped_to_value():
  assert unresolved("[N=string]: {name: N}\nother: N\n") == ["N"]


def test_comprehension_variables():
  src = "src: {a: 1}\nfor k, v in src if v > 0 let w = v * 2 {\n\t(k): w\n}\nafter: k\n"
  assert unresolved(src) == ["k"]


def test_comprehension_source_is_outer_scope():
  assert unresolved("for x in list.Range(0, 3, 1) {\n\tf: x\n}\n") == ["list"]


def test_predeclared_identifiers():
  assert unresolved("a: int & >0\nb: len(c)\nd: string | *null\ne: _\n") == ["c"]


def test_interpolation_references():
  assert unresolved('a: "\\(strings.ToUpper("x"))"\n') == ["strings"]


def test_dynamic_label_expression_is_a_reference():
  assert unresolved("(key): 1\n") == ["key"]


def test_quoted_labels_declare_nothing():
  assert unresolved('"a": 1\nb: a\n') == ["a"]


@pytest.mark.parametrize(
  "path, name",
  [
    ("encoding/json", "json"),
    ("math", "math"),
    ("example.com/m/foo:bar", "bar"),
    ("example.com/m@v1", "m"),
  ],
)
def test_import_path_name(path, name):
  assert import_path_name(path) == name
