"""
CUE Token Definitions.

Defines the enumerations for Token Kinds and Symbols used by the Lexer and Parser.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class TokenKind(str, Enum):
  """Enumeration of Lexer Token Types."""

  IDENT = "IDENT"
  INT = "INT"
  FLOAT = "FLOAT"
  STRING = "STRING"
  BOTTOM = "BOTTOM"
  ATTRIBUTE = "ATTRIBUTE"
  SYMBOL = "SYMBOL"
  COMMA = "COMMA"
  COMMENT = "COMMENT"
  EOF = "EOF"


class Symbol(str, Enum):
  """Enumeration of Punctuation and Operator Symbols."""

  ELLIPSIS = "..."
  AND = "&&"
  OR = "||"
  EQL = "=="
  NEQ = "!="
  MAT = "=~"
  NMAT = "!~"
  LEQ = "<="
  GEQ = ">="
  LSS = "<"
  GTR = ">"
  UNIFY = "&"
  DISJUNCTION = "|"
  ADD = "+"
  SUB = "-"
  MUL = "*"
  QUO = "/"
  NOT = "!"
  BIND = "="
  COLON = ":"
  OPTION = "?"
  PERIOD = "."
  LPAREN = "("
  RPAREN = ")"
  LBRACK = "["
  RBRACK = "]"
  LBRACE = "{"
  RBRACE = "}"


# Longest first so that the lexer's alternation prefers multi-character operators.
OPERATORS = sorted((s.value for s in Symbol), key=len, reverse=True)

# Identifiers with special meaning in some positions. All of them remain valid field labels.
KEYWORDS = frozenset({"package", "import", "for", "in", "if", "let", "true", "false", "null"})

# Binary operator precedence, loosest first.
BINARY_PRECEDENCE = {
  "|": 1,
  "&": 2,
  "||": 3,
  "&&": 4,
  "==": 5,
  "!=": 5,
  "<": 5,
  "<=": 5,
  ">": 5,
  ">=": 5,
  "=~": 5,
  "!~": 5,
  "+": 6,
  "-": 6,
  "*": 7,
  "/": 7,
}

UNARY_OPERATORS = frozenset({"+", "-", "!", "*", "<", "<=", ">", ">=", "==", "!=", "=~", "!~"})


@dataclass
class Token:
  """
  A lexical unit.

  Attributes:
      kind: The token category.
      text: The raw source text ("" for implicit commas and EOF).
      start: Offset of the first character in the source.
      end: Offset one past the last character.
      line: 1-based line number.
      col: 1-based column number.
      interpolations: For interpolated strings, the token stream of each `\\(...)` part.
  """

  kind: TokenKind
  text: str
  start: int
  end: int
  line: int
  col: int
  interpolations: List[List["Token"]] = field(default_factory=list)

  @property
  def implicit(self) -> bool:
    """True for commas inserted automatically at a newline."""
    return self.kind == TokenKind.COMMA and self.text != ","

  def is_symbol(self, symbol: str) -> bool:
    return self.kind == TokenKind.SYMBOL and self.text == symbol
