"""
Tests for Runtime Configuration.

Verifies that:
1. Defaults apply without a pyproject.toml.
2. `[tool.cue_imports]` is found in parent directories.
3. Explicit arguments override TOML values.
4. Invalid values are rejected.
"""

import pytest
from pydantic import ValidationError

from cue_imports.config import RuntimeConfig


@pytest.fixture
def toml_file(tmp_path):
  fpath = tmp_path / "pyproject.toml"
  fpath.write_text('[tool.cue_imports]\nstrict_module_root = true\nextension = ".cuex"\n', encoding="utf-8")
  return fpath


def test_defaults(tmp_path):
  config = RuntimeConfig.load(search_path=tmp_path)
  assert config.strict_module_root is False
  assert config.extension == ".cue"


def test_load_from_toml(tmp_path, toml_file):
  config = RuntimeConfig.load(search_path=tmp_path)
  assert config.strict_module_root is True
  assert config.extension == ".cuex"


def test_toml_in_parent_directory(tmp_path, toml_file):
  nested = tmp_path / "a" / "b"
  nested.mkdir(parents=True)
  assert RuntimeConfig.load(search_path=nested).strict_module_root is True


def test_arguments_override_toml(tmp_path, toml_file):
  config = RuntimeConfig.load(strict_module_root=False, extension=".cue", search_path=tmp_path)
  assert config.strict_module_root is False
  assert config.extension == ".cue"


def test_other_tool_sections_ignored(tmp_path):
  (tmp_path / "pyproject.toml").write_text('[tool.other]\nextension = "x"\n')
  assert RuntimeConfig.load(search_path=tmp_path).extension == ".cue"


def test_unreadable_toml_falls_back_to_defaults(tmp_path, captured_console):
  (tmp_path / "pyproject.toml").write_text("[tool.cue_imports\n")
  assert RuntimeConfig.load(search_path=tmp_path).extension == ".cue"
  assert "Ignoring unreadable" in captured_console.getvalue()


@pytest.mark.parametrize("extension", ["cue", ".", "a/.cue"])
def test_invalid_extension(extension):
  with pytest.raises(ValidationError):
    RuntimeConfig(extension=extension)
