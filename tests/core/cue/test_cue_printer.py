"""
Tests for the Printer and Tree Edits.

Verifies:
1. Canonical import declaration formatting.
2. Untouched declarations are copied byte for byte.
3. Comments inside removed imports are dropped; surrounding comments survive.
"""

from cue_imports.core.cue.edits import insert_after_package, remove_decls_of_kind
from cue_imports.core.cue.nodes import BasicLit, Ident, ImportDecl, ImportSpec
from cue_imports.core.cue.parser import parse_file
from cue_imports.core.cue.printer import format_import_decl, render_file


def spec(path: str, alias: str = None, blank_before: bool = False) -> ImportSpec:
  return ImportSpec(BasicLit("STRING", f'"{path}"'), alias=Ident(alias) if alias else None, blank_before=blank_before)


def replace_imports(src: str, *specs: ImportSpec) -> str:
  file = parse_file(src)
  remove_decls_of_kind(file, ImportDecl)
  if specs:
    insert_after_package(file, ImportDecl(list(specs), parenthesized=len(specs) > 1))
  return render_file(file)


def test_format_single_import():
  assert format_import_decl(ImportDecl([spec("strings")])) == 'import "strings"'


def test_format_aliased_import():
  assert format_import_decl(ImportDecl([spec("encoding/json", "j")])) == 'import j "encoding/json"'


def test_format_grouped_imports():
  decl = ImportDecl([spec("strings"), spec("example.com/foo", blank_before=True)], parenthesized=True)
  assert format_import_decl(decl) == 'import (\n\t"strings"\n\n\t"example.com/foo"\n)'


def test_tidy_file_renders_unchanged():
  src = 'package p\n\nimport "strings"\n\na: strings.ToUpper("x")\n'
  assert replace_imports(src, spec("strings")) == src


def test_body_formatting_is_preserved():
  src = 'package p\n\nimport "math"\n\na:    1\nb: {\n    c:   math.Pi\n}\n'
  assert replace_imports(src, spec("math")) == src


def test_comments_around_removed_imports():
  src = (
    "package p\n\n"
    "// about imports\n"
    'import (\n\t"strings" // used\n\t"math"\n)\n\n'
    "// doc for a\n"
    'a: strings.ToUpper("x")\n'
  )
  expected = 'package p\n\n// about imports\nimport "strings"\n\n// doc for a\na: strings.ToUpper("x")\n'
  assert replace_imports(src, spec("strings")) == expected


def test_insertion_without_package_clause():
  assert replace_imports("a: math.Pi\n", spec("math")) == 'import "math"\n\na: math.Pi\n'


def test_insertion_below_leading_comment_and_package():
  src = "// header\n\npackage p\n\na: math.Pi\n"
  assert replace_imports(src, spec("math")) == '// header\n\npackage p\n\nimport "math"\n\na: math.Pi\n'


def test_all_imports_removed():
  assert replace_imports('package p\n\nimport "math"\n\na: 1\n') == "package p\n\na: 1\n"


def test_empty_result_is_single_newline():
  assert replace_imports("") == "\n"
  assert replace_imports('import "math"\n') == "\n"


def test_output_ends_with_one_newline():
  assert replace_imports("package p\n\na: 1\n\n\n").endswith("a: 1\n")


def test_remove_returns_removed_decls():
  file = parse_file('import "a.com/x"\nimport "b.com/y"\n\nv: 1\n')
  removed = remove_decls_of_kind(file, ImportDecl)
  assert len(removed) == 2
  assert file.import_decls == []
  assert remove_decls_of_kind(file, ImportDecl) == []
