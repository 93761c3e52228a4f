"""
Tests for the CUE Tokenizer.

Verifies:
1. Token kinds for identifiers, literals, operators and attributes.
2. Automatic comma insertion at newlines and end of input.
3. Comments, raw strings and string interpolation.
4. Error reporting with positions.
"""

import pytest

from cue_imports.core.cue.lexer import Tokenizer
from cue_imports.core.cue.tokens import TokenKind
from cue_imports.errors import ParseError


def kinds(text: str):
  return [t.kind for t in Tokenizer(text).tokenize()]


def texts(text: str):
  return [t.text for t in Tokenizer(text).tokenize() if t.kind not in (TokenKind.COMMA, TokenKind.EOF)]


def test_simple_fields():
  assert kinds('a: 1\nb: "x"\n') == [
    TokenKind.IDENT,
    TokenKind.SYMBOL,
    TokenKind.INT,
    TokenKind.COMMA,
    TokenKind.IDENT,
    TokenKind.SYMBOL,
    TokenKind.STRING,
    TokenKind.COMMA,
    TokenKind.EOF,
  ]


def test_no_comma_after_open_brace():
  tokens = list(Tokenizer("a: {\n\tb: 1\n}\n").tokenize())
  assert [t.text for t in tokens] == ["a", ":", "{", "b", ":", "1", "\n", "}", "\n", ""]
  assert tokens[6].implicit
  assert tokens[-1].kind == TokenKind.EOF


def test_comma_at_end_of_input():
  tokens = list(Tokenizer("a: 1").tokenize())
  assert tokens[-2].kind == TokenKind.COMMA
  assert tokens[-2].implicit
  assert tokens[-1].kind == TokenKind.EOF


def test_explicit_comma_is_not_implicit():
  tokens = list(Tokenizer("a: 1, b: 2").tokenize())
  assert tokens[3].kind == TokenKind.COMMA
  assert not tokens[3].implicit


def test_comment_after_value_inserts_comma_first():
  assert kinds("a: 1 // note\n") == [
    TokenKind.IDENT,
    TokenKind.SYMBOL,
    TokenKind.INT,
    TokenKind.COMMA,
    TokenKind.COMMENT,
    TokenKind.EOF,
  ]


def test_keywords_suppress_comma():
  tokens = list(Tokenizer("package\nfoo\n").tokenize())
  assert [t.text for t in tokens] == ["package", "foo", "\n", ""]


def test_identifier_forms():
  assert texts("#Def _hidden _#hiddenDef $x _") == ["#Def", "_hidden", "_#hiddenDef", "$x", "_"]


def test_numbers():
  tokens = [t for t in Tokenizer("0x1F 1_000 1.5e3 2Ki .5 0o17 0b101").tokenize() if t.kind != TokenKind.COMMA]
  assert [t.kind for t in tokens[:-1]] == [
    TokenKind.INT,
    TokenKind.INT,
    TokenKind.FLOAT,
    TokenKind.INT,
    TokenKind.FLOAT,
    TokenKind.INT,
    TokenKind.INT,
  ]


def test_operators_longest_match():
  assert texts("a: >=1 & !=2 & =~\"x\" & [...]") == ["a", ":", ">=", "1", "&", "!=", "2", "&", "=~", '"x"', "&", "[", "...", "]"]


def test_bottom_and_attribute():
  tokens = [t for t in Tokenizer('a: _|_ @go(A,type="x")\n').tokenize()]
  assert tokens[2].kind == TokenKind.BOTTOM
  assert tokens[3].kind == TokenKind.ATTRIBUTE
  assert tokens[3].text == '@go(A,type="x")'
  assert tokens[4].implicit


def test_raw_string_with_embedded_quote():
  tokens = list(Tokenizer('a: #"say "hi""#\n').tokenize())
  assert tokens[2].kind == TokenKind.STRING
  assert tokens[2].text == '#"say "hi""#'


def test_multiline_string_is_one_token():
  src = 'a: """\n\tline one\n\tline two\n\t"""\nb: 1\n'
  tokens = list(Tokenizer(src).tokenize())
  assert tokens[2].kind == TokenKind.STRING
  assert tokens[2].text.startswith('"""') and tokens[2].text.endswith('"""')
  assert tokens[4].text == "b"


def test_interpolation_tokens_are_attached():
  tokens = list(Tokenizer('a: "x\\(strings.ToUpper("y"))z"\n').tokenize())
  string = tokens[2]
  assert string.kind == TokenKind.STRING
  assert len(string.interpolations) == 1
  assert [t.text for t in string.interpolations[0]] == ["strings", ".", "ToUpper", "(", '"y"', ")"]
  assert tokens[3].implicit


def test_position_is_one_based():
  tokenizer = Tokenizer("a\nbc")
  assert tokenizer.position(0) == (1, 1)
  assert tokenizer.position(3) == (2, 2)


def test_illegal_character_reports_location():
  with pytest.raises(ParseError) as exc:
    list(Tokenizer("a: 1\nb: ^", "x.cue").tokenize())
  assert exc.value.line == 2
  assert exc.value.column == 4
  assert str(exc.value).startswith("x.cue:2:4:")


def test_unterminated_string():
  with pytest.raises(ParseError, match="not terminated"):
    list(Tokenizer('a: "abc\nb: 1').tokenize())


def test_tokenize_is_lazy():
  stream = Tokenizer("package foo\n^^^").tokenize()
  assert next(stream).text == "package"
  assert next(stream).text == "foo"
