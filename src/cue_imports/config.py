"""
Runtime Configuration Store.

Settings are read from the `[tool.cue_imports]` table of the nearest
`pyproject.toml` (searched upwards from the working directory) and can be
overridden by explicit arguments, typically coming from the command line.
"""

import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field, field_validator
from rich.markup import escape

from cue_imports.utils.console import log_warning

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

TOOL_SECTION = "cue_imports"


class RuntimeConfig(BaseModel):
  """
  Global configuration container for the import engine.
  """

  strict_module_root: bool = Field(
    False,
    description="If True, fail when unresolved names remain and no cue.mod directory encloses the file.",
  )
  extension: str = Field(".cue", description="Extension of CUE source files.")

  @field_validator("extension")
  @classmethod
  def validate_extension(cls, v: str) -> str:
    """
    Ensures the extension is a dotted suffix such as `.cue`.

    Args:
        v: The configured extension.

    Returns:
        str: The validated extension.

    Raises:
        ValueError: If the value does not start with a dot or is just a dot.
    """
    if not v.startswith(".") or len(v) < 2 or "/" in v:
      raise ValueError(f"Invalid source extension '{v}': expected a suffix like '.cue'")
    return v

  @classmethod
  def load(
    cls,
    strict_module_root: Optional[bool] = None,
    extension: Optional[str] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with explicit arguments.

    Args:
        strict_module_root (Optional[bool]): Override for the module root policy.
        extension (Optional[str]): Override for the source file extension.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.
    """
    toml_config, _ = _load_toml_settings(search_path or Path.cwd())

    if strict_module_root is None:
      strict_module_root = toml_config.get("strict_module_root", False)
    final_extension = extension or toml_config.get("extension", ".cue")

    return cls(strict_module_root=strict_module_root, extension=final_extension)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches `start_path` and its parents for `pyproject.toml` and extracts the tool table.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError) as exc:
        log_warning(f"Ignoring unreadable {escape(str(toml_path))}: {escape(str(exc))}")
        return {}, None
      return data.get("tool", {}).get(TOOL_SECTION, {}), parent

  return {}, None
