"""
CUE Recursive Descent Parser.

This module parses CUE source text into the syntax tree defined in `nodes.py`.
Comments are collected on the side (`File.comments`) so that the printer can
keep them when it rewrites the import block; every node records its source
offsets so untouched declarations can be re-emitted byte-for-byte.

Two entry points are provided:

- `parse_file`: full parse followed by scope analysis, filling `File.unresolved`.
- `parse_package_clause`: reads only as many tokens as needed to return the
  declared package name. Used to prune directories during local resolution.
"""

from typing import Iterable, List, Optional

from cue_imports.core.cue.lexer import Tokenizer
from cue_imports.core.cue.literals import unquote
from cue_imports.core.cue.nodes import (
  Alias,
  Attribute,
  BasicLit,
  BinaryExpr,
  BottomLit,
  CallExpr,
  Clause,
  Comment,
  Comprehension,
  Decl,
  Ellipsis,
  EmbedDecl,
  Expr,
  Field,
  File,
  ForClause,
  Ident,
  IfClause,
  ImportDecl,
  ImportSpec,
  IndexExpr,
  Interpolation,
  Label,
  LetClause,
  ListLit,
  Package,
  ParenExpr,
  PatternLabel,
  SelectorExpr,
  StructLit,
  UnaryExpr,
)
from cue_imports.core.cue.scope import resolve_identifiers
from cue_imports.core.cue.tokens import BINARY_PRECEDENCE, UNARY_OPERATORS, Symbol, Token, TokenKind
from cue_imports.errors import ParseError

_CLAUSE_KEYWORDS = ("for", "if", "let")
_OPENERS = {"(": ")", "[": "]", "{": "}"}


class CueParser:
  """
  Parser over a lazily produced token stream.

  Args:
      text: The complete source text (used for offsets and error positions).
      filename: Name used in error messages.
      tokens: Optional pre-lexed tokens (interpolation parts); when omitted the
          whole text is tokenized.
  """

  def __init__(self, text: str, filename: str = "", tokens: Optional[Iterable[Token]] = None):
    self.text = text
    self.filename = filename
    self.tokenizer = Tokenizer(text, filename)
    self.comments: List[Comment] = []
    self._stream = iter(tokens) if tokens is not None else self.tokenizer.tokenize()
    self._tokens: List[Token] = []
    self._exhausted = False
    self.pos = 0

  # --- Token buffer ---

  def peek(self, offset: int = 0) -> Token:
    idx = self.pos + offset
    while len(self._tokens) <= idx and not self._exhausted:
      tok = next(self._stream, None)
      if tok is None:
        end = len(self.text) if not self._tokens else self._tokens[-1].end
        line, col = self.tokenizer.position(end)
        tok = Token(TokenKind.EOF, "", end, end, line, col)
      if tok.kind == TokenKind.COMMENT:
        self.comments.append(Comment(tok.text, line=tok.line, start=tok.start, end=tok.end))
        continue
      self._tokens.append(tok)
      if tok.kind == TokenKind.EOF:
        self._exhausted = True
    if idx >= len(self._tokens):
      return self._tokens[-1]
    return self._tokens[idx]

  def consume(self) -> Token:
    token = self.peek()
    if token.kind != TokenKind.EOF:
      self.pos += 1
    return token

  def at_symbol(self, symbol: str, offset: int = 0) -> bool:
    return self.peek(offset).is_symbol(symbol)

  def at_keyword(self, keyword: str, offset: int = 0) -> bool:
    tok = self.peek(offset)
    return tok.kind == TokenKind.IDENT and tok.text == keyword

  def expect_symbol(self, symbol: str) -> Token:
    if not self.at_symbol(symbol):
      raise self.error(f"expected '{symbol}'")
    return self.consume()

  def expect_kind(self, kind: TokenKind) -> Token:
    if self.peek().kind != kind:
      raise self.error(f"expected {kind.value.lower()}")
    return self.consume()

  def error(self, message: str, token: Optional[Token] = None) -> ParseError:
    tok = token or self.peek()
    found = "end of input" if tok.kind == TokenKind.EOF else f"'{tok.text}'" if tok.text.strip() else "newline"
    return ParseError(f"{message}, found {found}", self.filename, tok.line, tok.col)

  # --- File level ---

  def parse_file(self) -> File:
    """
    Parses a complete file: attributes, package clause, imports, declarations.

    Returns:
        File: The syntax tree with `unresolved` populated.

    Raises:
        ParseError: On any syntax error.
    """
    decls: List[Decl] = []
    preamble: List[Decl] = []
    while self.peek().kind == TokenKind.ATTRIBUTE and not self._is_field_ahead():
      preamble.append(self._parse_attribute())
      self._expect_separator(None)

    package = None
    if self.at_keyword("package") and self.peek(1).kind == TokenKind.IDENT:
      start = self.consume()
      name_tok = self.consume()
      package = Package(
        Ident(name_tok.text, start=name_tok.start, end=name_tok.end),
        start=start.start,
        end=name_tok.end,
      )
      self._expect_separator(None)
    else:
      decls.extend(preamble)

    while self._at_import():
      decls.append(self._parse_import_decl())
      self._expect_separator(None)

    while self.peek().kind != TokenKind.EOF:
      decls.append(self.parse_decl())
      self._expect_separator(None)

    file = File(
      self.filename,
      self.text,
      package=package,
      decls=decls,
      comments=self.comments,
      start=0,
      end=len(self.text),
    )
    file.unresolved = resolve_identifiers(file)
    return file

  def parse_package_name(self) -> str:
    """Returns the declared package name, reading no further than the package clause."""
    while self.peek().kind in (TokenKind.ATTRIBUTE, TokenKind.COMMA):
      self.consume()
    if self.at_keyword("package") and self.peek(1).kind == TokenKind.IDENT:
      return self.peek(1).text
    return ""

  def _at_import(self) -> bool:
    if not self.at_keyword("import"):
      return False
    nxt = self.peek(1)
    return nxt.kind in (TokenKind.STRING, TokenKind.IDENT) or nxt.is_symbol("(")

  def _parse_import_decl(self) -> ImportDecl:
    start = self.consume()
    specs: List[ImportSpec] = []
    if self.at_symbol("("):
      self.consume()
      while not self.at_symbol(")"):
        specs.append(self._parse_import_spec())
        self._expect_separator(")")
      end = self.expect_symbol(")")
      return ImportDecl(specs, parenthesized=True, start=start.start, end=end.end)
    spec = self._parse_import_spec()
    return ImportDecl([spec], start=start.start, end=spec.end)

  def _parse_import_spec(self) -> ImportSpec:
    alias = None
    if self.peek().kind == TokenKind.IDENT:
      tok = self.consume()
      alias = Ident(tok.text, start=tok.start, end=tok.end)
    tok = self.expect_kind(TokenKind.STRING)
    if tok.interpolations:
      raise self.error("import path may not contain interpolations", tok)
    try:
      unquote(tok.text)
    except ValueError as exc:
      raise ParseError(f"invalid import path: {exc}", self.filename, tok.line, tok.col) from exc
    path = BasicLit("STRING", tok.text, start=tok.start, end=tok.end)
    return ImportSpec(path, alias=alias, start=(alias or path).start, end=path.end)

  def _expect_separator(self, closer: Optional[str]) -> None:
    tok = self.peek()
    if tok.kind == TokenKind.COMMA:
      self.consume()
      return
    if tok.kind == TokenKind.EOF or (closer and tok.is_symbol(closer)):
      return
    raise self.error("missing ',' in declaration list")

  # --- Declarations ---

  def parse_decl(self) -> Decl:
    """Parses one struct or file level declaration."""
    tok = self.peek()

    if tok.kind == TokenKind.ATTRIBUTE:
      return self._parse_attribute()

    if tok.is_symbol(Symbol.ELLIPSIS.value):
      return self._parse_ellipsis("}")

    if tok.kind == TokenKind.IDENT and not self._is_field_ahead():
      if tok.text == "let" and self.peek(1).kind == TokenKind.IDENT and self.at_symbol("=", 2):
        return self._parse_let()
      if tok.text in ("for", "if"):
        return self._parse_comprehension()
      if tok.text in ("package", "import"):
        raise self.error(f"unexpected '{tok.text}' clause after declarations")

    if self._is_field_ahead():
      return self._parse_field()

    expr = self.parse_expr()
    return EmbedDecl(expr, start=expr.start, end=expr.end)

  def _parse_attribute(self) -> Attribute:
    tok = self.consume()
    return Attribute(tok.text, start=tok.start, end=tok.end)

  def _parse_ellipsis(self, closer: str) -> Ellipsis:
    tok = self.consume()
    nxt = self.peek()
    if nxt.kind in (TokenKind.COMMA, TokenKind.EOF) or nxt.is_symbol(closer):
      return Ellipsis(start=tok.start, end=tok.end)
    type_expr = self.parse_expr()
    return Ellipsis(type_expr, start=tok.start, end=type_expr.end)

  def _parse_let(self) -> LetClause:
    start = self.consume()
    name = self.expect_kind(TokenKind.IDENT)
    self.expect_symbol("=")
    expr = self.parse_expr()
    return LetClause(Ident(name.text, start=name.start, end=name.end), expr, start=start.start, end=expr.end)

  def _parse_comprehension(self) -> Comprehension:
    start = self.peek()
    clauses: List[Clause] = [self._parse_clause()]
    while self.peek().kind == TokenKind.IDENT and self.peek().text in _CLAUSE_KEYWORDS:
      clauses.append(self._parse_clause())
    if not self.at_symbol("{"):
      raise self.error("expected '{' after comprehension clauses")
    value = self._parse_struct()
    return Comprehension(clauses, value, start=start.start, end=value.end)

  def _parse_clause(self) -> Clause:
    tok = self.peek()
    if tok.text == "let":
      return self._parse_let()
    self.consume()
    if tok.text == "if":
      cond = self.parse_expr()
      return IfClause(cond, start=tok.start, end=cond.end)

    first = self.expect_kind(TokenKind.IDENT)
    key = None
    value = Ident(first.text, start=first.start, end=first.end)
    if self.peek().kind == TokenKind.COMMA and not self.peek().implicit:
      self.consume()
      second = self.expect_kind(TokenKind.IDENT)
      key, value = value, Ident(second.text, start=second.start, end=second.end)
    if not self.at_keyword("in"):
      raise self.error("expected 'in'")
    self.consume()
    source = self.parse_expr()
    return ForClause(value, source, key=key, start=tok.start, end=source.end)

  def _parse_field(self) -> Field:
    label = self._parse_label()
    constraint = ""
    if self.at_symbol("?") or self.at_symbol("!"):
      constraint = self.consume().text
    self.expect_symbol(":")

    if self._is_field_ahead():
      inner = self._parse_field()
      value: Expr = StructLit([inner], start=inner.start, end=inner.end)
    else:
      value = self.parse_expr()

    attrs: List[Attribute] = []
    while self.peek().kind == TokenKind.ATTRIBUTE:
      attrs.append(self._parse_attribute())

    end = attrs[-1].end if attrs else value.end
    return Field(label, value, constraint=constraint, attrs=attrs, start=label.start, end=end)

  def _parse_label(self) -> Label:
    tok = self.peek()
    if tok.kind == TokenKind.IDENT:
      self.consume()
      ident = Ident(tok.text, start=tok.start, end=tok.end)
      if self.at_symbol("="):
        self.consume()
        inner = self._parse_label()
        return Alias(ident, inner, start=ident.start, end=inner.end)
      return ident

    if tok.kind == TokenKind.STRING:
      return self._parse_string(self.consume())

    if tok.is_symbol("("):
      self.consume()
      expr = self.parse_expr()
      self._skip_implicit_comma()
      end = self.expect_symbol(")")
      return ParenExpr(expr, start=tok.start, end=end.end)

    if tok.is_symbol("["):
      self.consume()
      alias = None
      if self.peek().kind == TokenKind.IDENT and self.at_symbol("=", 1):
        name = self.consume()
        self.consume()
        alias = Ident(name.text, start=name.start, end=name.end)
      expr = self.parse_expr()
      self._skip_implicit_comma()
      end = self.expect_symbol("]")
      return PatternLabel(expr, alias=alias, start=tok.start, end=end.end)

    raise self.error("expected label")

  def _label_length(self, offset: int) -> int:
    """Number of tokens forming a label at `offset`, or 0 if no label starts there."""
    tok = self.peek(offset)
    if tok.kind == TokenKind.IDENT:
      if self.at_symbol("=", offset + 1):
        inner = self._label_length(offset + 2)
        return 2 + inner if inner else 0
      return 1
    if tok.kind == TokenKind.STRING:
      return 1
    if tok.is_symbol("(") or tok.is_symbol("["):
      close = self._matching_close(offset)
      return close - offset + 1 if close else 0
    return 0

  def _matching_close(self, offset: int) -> int:
    depth = 0
    idx = offset
    while True:
      tok = self.peek(idx)
      if tok.kind == TokenKind.EOF:
        return 0
      if tok.kind == TokenKind.SYMBOL:
        if tok.text in _OPENERS:
          depth += 1
        elif tok.text in _OPENERS.values():
          depth -= 1
          if depth == 0:
            return idx
      idx += 1

  def _is_field_ahead(self, offset: int = 0) -> bool:
    length = self._label_length(offset)
    if not length:
      return False
    nxt = offset + length
    if self.at_symbol(":", nxt):
      return True
    return (self.at_symbol("?", nxt) or self.at_symbol("!", nxt)) and self.at_symbol(":", nxt + 1)

  def _skip_implicit_comma(self) -> None:
    if self.peek().kind == TokenKind.COMMA and self.peek().implicit:
      self.consume()

  # --- Expressions ---

  def parse_expr(self) -> Expr:
    """Parses a full expression using precedence climbing."""
    return self._parse_binary(1)

  def _parse_binary(self, min_prec: int) -> Expr:
    x = self._parse_unary()
    while True:
      tok = self.peek()
      if tok.kind != TokenKind.SYMBOL:
        return x
      prec = BINARY_PRECEDENCE.get(tok.text)
      if prec is None or prec < min_prec:
        return x
      self.consume()
      y = self._parse_binary(prec + 1)
      x = BinaryExpr(tok.text, x, y, start=x.start, end=y.end)

  def _parse_unary(self) -> Expr:
    tok = self.peek()
    if tok.kind == TokenKind.SYMBOL and tok.text in UNARY_OPERATORS:
      self.consume()
      x = self._parse_unary()
      return UnaryExpr(tok.text, x, start=tok.start, end=x.end)
    return self._parse_primary()

  def _parse_primary(self) -> Expr:
    x = self._parse_operand()
    while True:
      if self.at_symbol("."):
        self.consume()
        tok = self.peek()
        if tok.kind == TokenKind.IDENT:
          self.consume()
          sel = Ident(tok.text, start=tok.start, end=tok.end)
        elif tok.kind == TokenKind.STRING and not tok.interpolations:
          self.consume()
          sel = BasicLit("STRING", tok.text, start=tok.start, end=tok.end)
        else:
          raise self.error("expected selector")
        x = SelectorExpr(x, sel, start=x.start, end=sel.end)
      elif self.at_symbol("["):
        self.consume()
        index = self.parse_expr()
        self._skip_implicit_comma()
        end = self.expect_symbol("]")
        x = IndexExpr(x, index, start=x.start, end=end.end)
      elif self.at_symbol("("):
        self.consume()
        args: List[Expr] = []
        while not self.at_symbol(")"):
          args.append(self.parse_expr())
          if self.peek().kind != TokenKind.COMMA:
            break
          self.consume()
        end = self.expect_symbol(")")
        x = CallExpr(x, args, start=x.start, end=end.end)
      else:
        return x

  def _parse_operand(self) -> Expr:
    tok = self.peek()
    if tok.kind in (TokenKind.INT, TokenKind.FLOAT):
      self.consume()
      return BasicLit(tok.kind.value, tok.text, start=tok.start, end=tok.end)
    if tok.kind == TokenKind.STRING:
      return self._parse_string(self.consume())
    if tok.kind == TokenKind.BOTTOM:
      self.consume()
      return BottomLit(start=tok.start, end=tok.end)
    if tok.kind == TokenKind.IDENT:
      self.consume()
      if tok.text in ("true", "false", "null"):
        return BasicLit(tok.text.upper(), tok.text, start=tok.start, end=tok.end)
      return Ident(tok.text, start=tok.start, end=tok.end)
    if tok.is_symbol("("):
      self.consume()
      expr = self.parse_expr()
      self._skip_implicit_comma()
      end = self.expect_symbol(")")
      return ParenExpr(expr, start=tok.start, end=end.end)
    if tok.is_symbol("{"):
      return self._parse_struct()
    if tok.is_symbol("["):
      return self._parse_list()
    raise self.error("expected operand")

  def _parse_struct(self) -> StructLit:
    start = self.expect_symbol("{")
    elts: List[Decl] = []
    while not self.at_symbol("}"):
      if self.peek().kind == TokenKind.EOF:
        raise self.error("expected '}'")
      elts.append(self.parse_decl())
      self._expect_separator("}")
    end = self.consume()
    return StructLit(elts, start=start.start, end=end.end)

  def _parse_list(self) -> ListLit:
    start = self.expect_symbol("[")
    elts: List[Expr] = []
    while not self.at_symbol("]"):
      tok = self.peek()
      if tok.kind == TokenKind.EOF:
        raise self.error("expected ']'")
      if tok.is_symbol(Symbol.ELLIPSIS.value):
        elts.append(self._parse_ellipsis("]"))
      elif tok.kind == TokenKind.IDENT and tok.text in ("for", "if") and not self.at_symbol(".", 1):
        elts.append(self._parse_comprehension())
      else:
        elts.append(self.parse_expr())
      if self.peek().kind == TokenKind.COMMA:
        self.consume()
      elif not self.at_symbol("]"):
        raise self.error("missing ',' in list literal")
    end = self.consume()
    return ListLit(elts, start=start.start, end=end.end)

  def _parse_string(self, tok: Token) -> Expr:
    if not tok.interpolations:
      return BasicLit("STRING", tok.text, start=tok.start, end=tok.end)
    parts = [self._parse_interpolation_part(tokens, tok) for tokens in tok.interpolations]
    return Interpolation(tok.text, parts, start=tok.start, end=tok.end)

  def _parse_interpolation_part(self, tokens: List[Token], owner: Token) -> Expr:
    if not tokens:
      raise self.error("empty interpolation", owner)
    sub = CueParser(self.text, self.filename, tokens=tokens)
    expr = sub.parse_expr()
    if sub.peek().kind != TokenKind.EOF:
      raise sub.error("unexpected token in interpolation")
    return expr


def parse_file(source: str, filename: str = "") -> File:
  """
  Parses CUE source into a syntax tree and runs scope analysis.

  Args:
      source: The file content.
      filename: Name recorded on the tree and used in error messages.

  Returns:
      File: The parsed file.

  Raises:
      ParseError: If the source is malformed.
  """
  return CueParser(source, filename).parse_file()


def parse_package_clause(source: str, filename: str = "") -> str:
  """
  Reads only the package clause of a file.

  Args:
      source: The file content.
      filename: Used in error messages.

  Returns:
      str: The declared package name, or "" if the file has no package clause.

  Raises:
      ParseError: If the tokens before the package clause are malformed.
  """
  return CueParser(source, filename).parse_package_name()
