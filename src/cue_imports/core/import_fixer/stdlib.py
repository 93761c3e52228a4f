"""
Standard Library Registry and Resolver.

The registry maps the short name a standard library package binds to its
canonical import path (CUE v0.4.3). It is immutable and shared by every run.
"""

from types import MappingProxyType
from typing import Mapping

from cue_imports.core.import_fixer.types import ImportReq, ResolvedMap, UnresolvedSet
from cue_imports.utils.console import log_debug

STDLIB: Mapping[str, str] = MappingProxyType(
  {
    "crypto": "crypto",
    "ed25519": "crypto/ed25519",
    "hmac": "crypto/hmac",
    "md5": "crypto/md5",
    "sha1": "crypto/sha1",
    "sha256": "crypto/sha256",
    "sha512": "crypto/sha512",
    "base64": "encoding/base64",
    "encoding": "encoding",
    "csv": "encoding/csv",
    "hex": "encoding/hex",
    "json": "encoding/json",
    "yaml": "encoding/yaml",
    "html": "html",
    "list": "list",
    "math": "math",
    "bits": "math/bits",
    "net": "net",
    "path": "path",
    "regexp": "regexp",
    "strconv": "strconv",
    "strings": "strings",
    "struct": "struct",
    "text": "text",
    "tabwriter": "text/tabwriter",
    "template": "text/template",
    "time": "time",
    "tool": "tool",
    "cli": "tool/cli",
    "exec": "tool/exec",
    "file": "tool/file",
    "http": "tool/http",
    "os": "tool/os",
    "uuid": "uuid",
  }
)


def is_stdlib_path(path: str) -> bool:
  """
  True if `path` is exactly a standard library import path.

  A path merely ending in a standard library name (`example.com/m/json`) is not.
  """
  return STDLIB.get(path.rsplit("/", 1)[-1]) == path


def resolve_in_stdlib(unresolved: UnresolvedSet) -> ResolvedMap:
  """
  Claims every pending name that is a standard library package.

  Args:
      unresolved: Pending names; resolved entries are removed in place.

  Returns:
      ResolvedMap: The standard library imports found.
  """
  resolved: ResolvedMap = {}
  for name in list(unresolved):
    path = STDLIB.get(name)
    if path is not None:
      resolved[name] = ImportReq(path)
      del unresolved[name]
      log_debug(f"stdlib: {name} -> {path}")
  return resolved
