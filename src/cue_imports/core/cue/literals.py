"""
String Literal Helpers.

Decodes CUE string literals (simple, multi-line and `#`-raw forms) into their
Python string values. Interpolated strings cannot be decoded statically and are
rejected.
"""

_SIMPLE_ESCAPES = {
  "a": "\a",
  "b": "\b",
  "f": "\f",
  "n": "\n",
  "r": "\r",
  "t": "\t",
  "v": "\v",
  "/": "/",
  "\\": "\\",
  '"': '"',
  "'": "'",
}


def unquote(literal: str) -> str:
  """
  Returns the value of a quoted CUE string literal.

  Args:
      literal: The literal as written in source, including quotes and any `#` fences.

  Returns:
      str: The decoded string.

  Raises:
      ValueError: If the literal is malformed or contains an interpolation.
  """
  hashes = len(literal) - len(literal.lstrip("#"))
  if hashes and not literal.endswith("#" * hashes):
    raise ValueError(f"unbalanced raw string fence in {literal!r}")
  body = literal[hashes : len(literal) - hashes]

  if len(body) < 2 or body[0] not in "\"'" or body[-1] != body[0]:
    raise ValueError(f"not a quoted string: {literal!r}")

  quote = body[0]
  multiline = body.startswith(quote * 3) and len(body) >= 6 and body.endswith(quote * 3)
  if multiline:
    body = _strip_multiline(body[3:-3])
  else:
    body = body[1:-1]
    if "\n" in body:
      raise ValueError(f"newline in string literal {literal!r}")

  escape = "\\" + "#" * hashes
  out = []
  idx = 0
  while idx < len(body):
    if not body.startswith(escape, idx):
      if body[idx] == quote and not hashes and not multiline:
        raise ValueError(f"unescaped quote in {literal!r}")
      out.append(body[idx])
      idx += 1
      continue

    idx += len(escape)
    if idx >= len(body):
      raise ValueError(f"dangling escape in {literal!r}")
    ch = body[idx]
    if ch == "(":
      raise ValueError(f"cannot unquote interpolated string {literal!r}")
    if ch in _SIMPLE_ESCAPES:
      out.append(_SIMPLE_ESCAPES[ch])
      idx += 1
    elif ch in "uU":
      width = 4 if ch == "u" else 8
      digits = body[idx + 1 : idx + 1 + width]
      if len(digits) != width or not all(c in "0123456789abcdefABCDEF" for c in digits):
        raise ValueError(f"invalid unicode escape in {literal!r}")
      out.append(chr(int(digits, 16)))
      idx += 1 + width
    elif ch == "x":
      digits = body[idx + 1 : idx + 3]
      if len(digits) != 2:
        raise ValueError(f"invalid hex escape in {literal!r}")
      out.append(chr(int(digits, 16)))
      idx += 3
    elif ch in "01234567":
      digits = body[idx : idx + 3]
      out.append(chr(int(digits, 8)))
      idx += 3
    else:
      raise ValueError(f"unknown escape sequence \\{ch} in {literal!r}")

  return "".join(out)


def _strip_multiline(body: str) -> str:
  """Removes the leading newline and the closing-line indentation of a multi-line string."""
  if not body.startswith("\n"):
    raise ValueError("multi-line string must start with a newline")
  lines = body[1:].split("\n")
  indent = lines[-1]
  if indent.strip():
    raise ValueError("closing quote of multi-line string must be on its own line")
  stripped = [line[len(indent) :] if line.startswith(indent) else line for line in lines[:-1]]
  return "\n".join(stripped)


def quote(value: str) -> str:
  """Returns `value` as a simple double-quoted CUE string literal."""
  escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n").replace("\t", "\\t")
  return f'"{escaped}"'
