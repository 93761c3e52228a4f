"""
cue-imports Package.

Adds missing and removes unused import declarations in CUE source files.
Missing imports are resolved against the CUE standard library and the packages
of the enclosing CUE module.

Usage
-----

.. code-block:: python

    import cue_imports

    fixed = cue_imports.fix_imports("config/app.cue")

    # Or with in-memory content, located as if it lived in the given file:
    fixed = cue_imports.fix_imports("config/app.cue", content=b"b: math.Round(1.5)\\n")
"""

from typing import Optional

from cue_imports.config import RuntimeConfig
from cue_imports.core.engine import ImportEngine

__version__ = "0.1.0"


def fix_imports(filename: str = "", content: Optional[bytes] = None, strict: bool = False) -> bytes:
  """
  Fixes the import declarations of a single CUE file.

  Args:
      filename: Location of the file. Empty means `_.cue` in the working directory.
      content: Source bytes; read from `filename` when omitted.
      strict: If True, fail when names remain unresolved outside any CUE module.

  Returns:
      bytes: The fixed source.
  """
  config = RuntimeConfig(strict_module_root=strict)
  return ImportEngine(config).run(filename, content)


__all__ = ["ImportEngine", "RuntimeConfig", "fix_imports", "__version__"]
