"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- A factory writing CUE module trees into a temporary directory.
- Console capture for asserting on log output.
"""

import io
import sys
from pathlib import Path
from typing import Callable, Dict

import pytest
from rich.console import Console

# Add src to path so we can import 'cue_imports' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from cue_imports.config import RuntimeConfig  # noqa: E402
from cue_imports.core.engine import ImportEngine  # noqa: E402
from cue_imports.utils.console import reset_console, set_console, set_verbose  # noqa: E402


@pytest.fixture
def cue_tree(tmp_path: Path) -> Callable[[Dict[str, str]], Path]:
  """
  Returns a function writing `{relative path: content}` below `tmp_path`.

  The function returns `tmp_path` so tests can chain it.
  """

  def _write(files: Dict[str, str]) -> Path:
    for rel, content in files.items():
      target = tmp_path / rel
      target.parent.mkdir(parents=True, exist_ok=True)
      target.write_text(content, encoding="utf-8")
    return tmp_path

  return _write


@pytest.fixture
def engine() -> ImportEngine:
  return ImportEngine(RuntimeConfig())


@pytest.fixture
def captured_console():
  """Routes console and log output into a string buffer for the duration of a test."""
  buf = io.StringIO()
  set_console(Console(file=buf, width=200, force_terminal=False))
  yield buf
  set_verbose(False)
  reset_console()
