"""
Tests for Logging and Console Injection.
"""

import io

from rich.console import Console

from cue_imports.utils.console import (
  console,
  log_debug,
  log_error,
  log_info,
  log_success,
  log_warning,
  set_console,
  set_verbose,
)


def test_proxy_forwards_to_backend(captured_console):
  assert hasattr(console, "print")
  assert isinstance(console.backend, Console)
  console.print("hello proxy")
  assert "hello proxy" in captured_console.getvalue()


def test_levels_are_rendered(captured_console):
  log_info("info message")
  log_success("done message")
  log_warning("careful message")
  log_error("failed message")

  output = captured_console.getvalue()
  for text in ["info message", "done message", "careful message", "failed message"]:
    assert text in output
  assert "SUCCESS" in output


def test_debug_only_when_verbose(captured_console):
  log_debug("hidden trace")
  assert "hidden trace" not in captured_console.getvalue()

  set_verbose(True)
  log_debug("visible [trace]")
  assert "visible [trace]" in captured_console.getvalue()


def test_handler_follows_new_console(captured_console):
  other = io.StringIO()
  set_console(Console(file=other, width=200))
  log_info("moved")
  assert "moved" in other.getvalue()
  assert "moved" not in captured_console.getvalue()
