"""
Orchestration Engine for Import Fixing.

This module provides the `ImportEngine`, the per-file driver of the import
fixer. Each run is strictly linear:

1.  **Parsed**: the source is parsed and scope analysis marks unresolved identifiers.
2.  **Extracted**: unresolved selector bases are collected with their members.
3.  **SiblingFiltered**: names declared by same-package files of the directory are dropped.
4.  **StdlibResolved**: standard library packages are claimed.
5.  **LocallyResolved**: remaining names are looked up in the enclosing CUE module.
6.  **Synthesized**: the import declarations are replaced by the planned block.
7.  **Rendered**: the edited tree is printed back to bytes.

When nothing is missing and no import is unused the input bytes are returned
unchanged, which makes the engine a no-op on already tidy files.
"""

from pathlib import Path
from typing import Optional

from cue_imports.config import RuntimeConfig
from cue_imports.core.cue.parser import parse_file
from cue_imports.core.import_fixer import (
  ImportSynthesizer,
  LocalModuleResolver,
  extract_unresolved,
  filter_sibling_declarations,
  resolve_in_stdlib,
  unused_imports,
)
from cue_imports.errors import FilesystemError, ParseError
from cue_imports.utils.console import log_debug

DEFAULT_FILENAME = "_.cue"


class ImportEngine:
  """
  Fixes the imports of one CUE file at a time.

  Args:
      config: Runtime settings; defaults are used when omitted.
  """

  def __init__(self, config: Optional[RuntimeConfig] = None):
    self.config = config or RuntimeConfig()
    self.local_resolver = LocalModuleResolver(self.config)
    self.synthesizer = ImportSynthesizer()

  def run(self, filename: str = "", content: Optional[bytes] = None) -> bytes:
    """
    Returns the content of `filename` with its import declarations fixed.

    Args:
        filename: Location of the file; it determines the sibling files and the
            enclosing module. Empty means `_.cue` in the working directory.
        content: Source bytes. When None the file is read from disk.

    Returns:
        bytes: The fixed source, or `content` itself when nothing changes.

    Raises:
        ValueError: If neither filename nor content is given.
        ParseError: If the file (or a file consulted during resolution) is malformed.
        FilesystemError: If a required file or directory cannot be read.
        ManifestFormatError: If the module manifest is malformed.
    """
    if not filename and content is None:
      raise ValueError("filename or content must be provided")
    if not filename:
      filename = DEFAULT_FILENAME

    if content is None:
      try:
        content = Path(filename).read_bytes()
      except OSError as exc:
        raise FilesystemError(f"read {filename}: {exc.strerror or exc}", path=filename) from exc

    try:
      file = parse_file(content.decode("utf-8"), filename)
    except UnicodeDecodeError as exc:
      raise ParseError(f"parse error: invalid UTF-8 at byte {exc.start}", filename) from exc
    except ParseError as exc:
      raise ParseError(f"parse error: {exc.message}", exc.filename, exc.line, exc.column) from exc

    unresolved = extract_unresolved(file)
    unused = unused_imports(file)
    log_debug(f"{filename}: unresolved {dict(unresolved)}, unused {[s.path_value for s in unused]}")

    if unresolved:
      filter_sibling_declarations(unresolved, filename, file.package_name, self.config.extension)

    if not unresolved and not unused:
      log_debug(f"{filename}: imports already up to date")
      return content

    resolved = resolve_in_stdlib(unresolved)
    if unresolved:
      resolved.update(self.local_resolver.resolve(unresolved, filename))
    if unresolved:
      log_debug(f"{filename}: leaving {sorted(unresolved)} unimported")
    if not resolved and not unused:
      return content

    self.synthesizer.synthesize(file, resolved)
    return self.synthesizer.render(file).encode("utf-8")
