"""
CUE Tokenizer.

Decomposes CUE source text into a lazy stream of `Token` objects. Besides the
usual lexemes it implements the two pieces of CUE lexical structure the parser
relies on:

1.  **Automatic comma insertion**: a newline (or end of input, or a trailing
    comment) after an identifier, literal, attribute, `)`, `]`, `}`, `...` or
    `_|_` produces an implicit COMMA token.
2.  **String interpolation**: `\\(expr)` inside a string is lexed recursively;
    the resulting tokens are attached to the STRING token so the parser can
    build expressions from them.

The stream is a generator so that `parse_package_clause` can stop reading after
the first few tokens of a file.
"""

import bisect
import re
from typing import Generator, List, Optional, Tuple

from cue_imports.core.cue.tokens import KEYWORDS, OPERATORS, Token, TokenKind
from cue_imports.errors import ParseError

_IDENT = re.compile(r"(?:_?#)?[A-Za-z_$][A-Za-z0-9_$]*")
_NUMBER = re.compile(
  r"0[xX][0-9a-fA-F_]+"
  r"|0[oO][0-7_]+"
  r"|0[bB][01_]+"
  r"|(?:\d[\d_]*(?:\.(?!\.)[\d_]*)?|\.\d[\d_]*)(?:[eE][+-]?\d[\d_]*)?(?:[KMGTP]i?)?"
)
_OPERATOR = re.compile("|".join(re.escape(op) for op in OPERATORS))
_WHITESPACE = " \t\r\ufeff"

# Keywords after which a newline never ends the element.
_NO_COMMA_KEYWORDS = KEYWORDS - {"true", "false", "null"}


class Tokenizer:
  """
  Regex-assisted scanner for CUE source.

  Attributes:
      text: The source being scanned.
      filename: Used in error messages only.
  """

  def __init__(self, text: str, filename: str = ""):
    self.text = text
    self.filename = filename
    self._line_starts = [0] + [m.end() for m in re.finditer("\n", text)]

  def position(self, offset: int) -> Tuple[int, int]:
    """
    Converts a source offset to a 1-based (line, column) pair.

    Args:
        offset: Character offset into `text`.

    Returns:
        Tuple of line and column numbers.
    """
    line_idx = bisect.bisect_right(self._line_starts, offset) - 1
    return line_idx + 1, offset - self._line_starts[line_idx] + 1

  def error(self, message: str, offset: int) -> ParseError:
    line, col = self.position(offset)
    return ParseError(message, self.filename, line, col)

  def tokenize(self) -> Generator[Token, None, None]:
    """
    Yields the tokens of the whole source, comments included, ending with EOF.

    Raises:
        ParseError: On illegal characters or unterminated literals.
    """
    yield from self._scan(0, nested=False)

  def _make(self, kind: TokenKind, start: int, end: int, text: Optional[str] = None) -> Token:
    line, col = self.position(start)
    return Token(kind, self.text[start:end] if text is None else text, start, end, line, col)

  def _scan(self, pos: int, nested: bool) -> Generator[Token, None, None]:
    """
    Core scanning loop.

    In nested mode (inside an interpolation) scanning stops after the `)` that
    closes the interpolation; that token is yielded last. Comma insertion is
    disabled in nested mode.
    """
    text = self.text
    length = len(text)
    insert_comma = False
    depth = 0

    while True:
      # Whitespace and newlines
      while pos < length and (text[pos] in _WHITESPACE or text[pos] == "\n"):
        if text[pos] == "\n" and insert_comma and not nested:
          yield self._make(TokenKind.COMMA, pos, pos, text="\n")
          insert_comma = False
        pos += 1

      if pos >= length:
        if nested:
          raise self.error("interpolation not terminated", pos)
        if insert_comma:
          yield self._make(TokenKind.COMMA, pos, pos, text="")
        yield self._make(TokenKind.EOF, pos, pos)
        return

      ch = text[pos]

      if text.startswith("//", pos):
        end = text.find("\n", pos)
        end = length if end == -1 else end
        if insert_comma and not nested:
          yield self._make(TokenKind.COMMA, pos, pos, text="\n")
          insert_comma = False
        yield self._make(TokenKind.COMMENT, pos, end)
        pos = end
        continue

      if text.startswith("_|_", pos):
        yield self._make(TokenKind.BOTTOM, pos, pos + 3)
        pos += 3
        insert_comma = True
        continue

      if ch in "\"'" or (ch == "#" and self._raw_string_ahead(pos)):
        token = self._scan_string(pos)
        yield token
        pos = token.end
        insert_comma = True
        continue

      if ch == "@":
        end = self._scan_attribute(pos)
        yield self._make(TokenKind.ATTRIBUTE, pos, end)
        pos = end
        insert_comma = True
        continue

      if ch.isdigit() or (ch == "." and pos + 1 < length and text[pos + 1].isdigit()):
        match = _NUMBER.match(text, pos)
        value = match.group()
        is_float = value[:2].lower() not in ("0x", "0o", "0b") and ("." in value or "e" in value.lower())
        yield self._make(TokenKind.FLOAT if is_float else TokenKind.INT, pos, match.end())
        pos = match.end()
        insert_comma = True
        continue

      match = _IDENT.match(text, pos)
      if match:
        yield self._make(TokenKind.IDENT, pos, match.end())
        insert_comma = match.group() not in _NO_COMMA_KEYWORDS
        pos = match.end()
        continue

      if ch == ",":
        yield self._make(TokenKind.COMMA, pos, pos + 1)
        pos += 1
        insert_comma = False
        continue

      match = _OPERATOR.match(text, pos)
      if match:
        op = match.group()
        if nested:
          if op == "(":
            depth += 1
          elif op == ")":
            if depth == 0:
              yield self._make(TokenKind.SYMBOL, pos, match.end())
              return
            depth -= 1
        yield self._make(TokenKind.SYMBOL, pos, match.end())
        pos = match.end()
        insert_comma = op in (")", "]", "}", "...")
        continue

      raise self.error(f"illegal character {ch!r}", pos)

  def _raw_string_ahead(self, pos: int) -> bool:
    idx = pos
    while idx < len(self.text) and self.text[idx] == "#":
      idx += 1
    return idx < len(self.text) and self.text[idx] in "\"'"

  def _scan_string(self, pos: int) -> Token:
    """
    Scans a simple, multi-line or raw string (or bytes) literal starting at `pos`.

    Args:
        pos: Offset of the first `#` or quote character.

    Returns:
        A STRING token; `interpolations` holds the token list of each `\\(...)`.
    """
    text = self.text
    length = len(text)
    hashes = 0
    while text[pos + hashes] == "#":
      hashes += 1
    quote = text[pos + hashes]
    multiline = text.startswith(quote * 3, pos + hashes)
    opener = hashes + (3 if multiline else 1)
    closer = quote * (3 if multiline else 1) + "#" * hashes
    escape = "\\" + "#" * hashes

    interpolations: List[List[Token]] = []
    idx = pos + opener
    while True:
      if idx >= length:
        raise self.error("string literal not terminated", pos)
      if text.startswith(closer, idx):
        end = idx + len(closer)
        break
      if text.startswith(escape, idx):
        after = idx + len(escape)
        if after < length and text[after] == "(":
          inner = list(self._scan(after + 1, nested=True))
          interpolations.append(inner[:-1])
          idx = inner[-1].end
          continue
        idx = after + 1
        continue
      if text[idx] == "\n" and not multiline:
        raise self.error("string literal not terminated", pos)
      idx += 1

    token = self._make(TokenKind.STRING, pos, end)
    token.interpolations = interpolations
    return token

  def _scan_attribute(self, pos: int) -> int:
    text = self.text
    match = _IDENT.match(text, pos + 1)
    if not match:
      raise self.error("invalid attribute", pos)
    idx = match.end()
    if idx >= len(text) or text[idx] != "(":
      return idx
    depth = 0
    while idx < len(text):
      ch = text[idx]
      if ch == "\n":
        break
      if ch == '"':
        idx += 1
        while idx < len(text) and text[idx] not in '"\n':
          idx += 2 if text[idx] == "\\" else 1
      elif ch == "(":
        depth += 1
      elif ch == ")":
        depth -= 1
        if depth == 0:
          return idx + 1
      idx += 1
    raise self.error("attribute not terminated", pos)
