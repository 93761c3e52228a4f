"""
Shared Data Types of the Import Fixer.

- `UnresolvedSet`: name -> member names seen in `name.member` selectors. Entries
  are removed as the resolution passes claim them.
- `ImportReq`: a normalized import requirement (path plus optional alias).
- `ResolvedMap`: binding name -> `ImportReq`.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from cue_imports.core.cue.scope import import_path_name

UnresolvedSet = Dict[str, List[str]]


@dataclass(frozen=True)
class ImportReq:
  """
  Represents a normalized import requirement, `import alias "path"`.
  """

  path: str
  alias: Optional[str] = None

  @property
  def name(self) -> str:
    """The identifier this import binds in the importing file."""
    return self.alias or import_path_name(self.path)


ResolvedMap = Dict[str, ImportReq]
