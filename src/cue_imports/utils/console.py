"""
Central Logging and Console Utilities.

All diagnostics of the tool go through the standard `logging` library rendered
by `rich`. Output is written to standard error so that the fixed source can be
streamed to standard output when the tool runs as a filter.

The module exposes:
1.  **Logging helpers** (`log_info`, `log_success`, `log_warning`, `log_error`,
    `log_debug`) plus a SUCCESS level between INFO and WARNING.
2.  **A console proxy**: a stable `console` object whose backing Rich console
    can be swapped with `set_console` (tests use this to capture output).

Attributes:
    console (_ConsoleProxy): A global, stable reference to the active Rich Console.
"""

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

SUCCESS_LEVEL_NUM = 25
logging.addLevelName(SUCCESS_LEVEL_NUM, "SUCCESS")

LOGGER_NAME = "cue_imports"

_THEME = Theme(
  {
    "logging.level.success": "green",
    "info": "dim cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "green",
    "path": "bold blue",
  }
)


def _default_console() -> Console:
  return Console(theme=_THEME, stderr=True)


class _ConsoleProxy:
  """
  Forwards printing to a swappable `rich.console.Console`.

  Modules import the `console` object once; replacing the backend also moves
  the logging handler so that log records follow the new destination.

  Attributes:
      _backend (Console): The active Rich Console instance.
  """

  def __init__(self) -> None:
    self._backend: Console = _default_console()
    self._configure_logging()

  def set_backend(self, new_console: Console) -> None:
    """
    Injects a new Console backend and updates logging handlers.

    Args:
        new_console (Console): The new Rich Console instance to use.
    """
    self._backend = new_console
    self._configure_logging()

  def reset(self) -> None:
    self._backend = _default_console()
    self._configure_logging()

  @property
  def backend(self) -> Console:
    return self._backend

  def _configure_logging(self) -> None:
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
      if isinstance(handler, RichHandler):
        logger.removeHandler(handler)

    rich_handler = RichHandler(
      console=self._backend,
      show_time=False,
      omit_repeated_times=False,
      show_path=False,
      markup=True,
      rich_tracebacks=True,
    )
    if logger.level == logging.NOTSET:
      logger.setLevel(logging.INFO)
    logger.addHandler(rich_handler)

  def print(self, *args: Any, **kwargs: Any) -> None:
    self._backend.print(*args, **kwargs)

  def __getattr__(self, name: str) -> Any:
    return getattr(self._backend, name)


console = _ConsoleProxy()
logger = logging.getLogger(LOGGER_NAME)


def set_console(new_console: Console) -> None:
  """
  Global helper to inject a specific console instance.

  Args:
      new_console (Console): The configured Rich console to use globally.
  """
  console.set_backend(new_console)


def reset_console() -> None:
  """Global helper to reset logging and console to standard error."""
  console.reset()


def set_verbose(verbose: bool) -> None:
  """
  Switches debug output of the pipeline stages on or off.

  Args:
      verbose: True to log at DEBUG level, False for INFO.
  """
  logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def log_info(msg: str) -> None:
  """
  Logs an informational message.

  Args:
      msg (str): The message content. Can include rich markup like [bold].
  """
  logger.info(f"ℹ️  {msg}", extra={"markup": True})


def log_success(msg: str) -> None:
  logger.log(SUCCESS_LEVEL_NUM, f"✅ {msg}", extra={"markup": True})


def log_warning(msg: str) -> None:
  logger.warning(f"⚠️  {msg}", extra={"markup": True})


def log_error(msg: str) -> None:
  """
  Logs an error message.

  Args:
      msg (str): The message content. Escape user-provided text with
          `rich.markup.escape` before passing it in.
  """
  logger.error(f"❌ {msg}", extra={"markup": True})


def log_debug(msg: str) -> None:
  """Logs a pipeline trace message, shown only with `--verbose`."""
  logger.debug(msg, extra={"markup": False})
