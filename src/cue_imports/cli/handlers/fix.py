"""
Fix Command Handlers.

Implements the two modes of the command line tool:
1. **Filter mode** (`handle_stdin`): read standard input, write the fixed
   source to standard output.
2. **Batch mode** (`handle_paths`): fix files and directory trees in place,
   writing only files whose content changes. `--list` and `--diff` report
   instead of writing.

All diagnostics go to standard error through the logging helpers; standard
output carries only source text, file names or diffs.
"""

import difflib
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional

from rich.markup import escape
from rich.table import Table

from cue_imports.config import RuntimeConfig
from cue_imports.core.engine import ImportEngine
from cue_imports.core.fix_result import FixResult
from cue_imports.errors import CueImportsError, FilesystemError
from cue_imports.utils.console import console, log_debug, log_error, log_success

STDIN_LABEL = "<standard input>"


def _unified_diff(before: bytes, after: bytes, name: str) -> str:
  lines = difflib.unified_diff(
    before.decode("utf-8").splitlines(keepends=True),
    after.decode("utf-8").splitlines(keepends=True),
    fromfile=f"{name}.orig",
    tofile=name,
  )
  return "".join(lines)


def handle_stdin(
  config: RuntimeConfig,
  stdin_filename: Optional[str],
  list_only: bool = False,
  show_diff: bool = False,
) -> int:
  """
  Fixes source read from standard input.

  Args:
      config: Runtime configuration.
      stdin_filename: Location the input is assumed to have (siblings and
          module lookup start there). Defaults to `_.cue` in the working directory.
      list_only: Print the input label if the imports would change, nothing else.
      show_diff: Print a unified diff instead of the fixed source.

  Returns:
      int: Exit code (0 for success, 2 for failure).
  """
  content = sys.stdin.buffer.read()
  try:
    fixed = ImportEngine(config).run(stdin_filename or "", content)
  except CueImportsError as e:
    log_error(escape(str(e)))
    return 2

  if list_only:
    if fixed != content:
      print(stdin_filename or STDIN_LABEL)
  elif show_diff:
    sys.stdout.write(_unified_diff(content, fixed, stdin_filename or STDIN_LABEL))
  else:
    sys.stdout.buffer.write(fixed)
    sys.stdout.flush()
  return 0


def collect_files(paths: List[Path], extension: str) -> List[Path]:
  """
  Expands the command line paths into the list of files to process.

  Directories are walked recursively in sorted order; only non-hidden files
  with the source extension are taken from them. Explicit file arguments are
  taken as given.

  Args:
      paths: Files and directories from the command line.
      extension: Source file extension.

  Returns:
      List[Path]: Files in processing order.

  Raises:
      FilesystemError: If a path does not exist.
  """
  files: List[Path] = []
  for path in paths:
    if path.is_dir():
      for root, dirnames, filenames in os.walk(path):
        dirnames.sort()
        for name in sorted(filenames):
          if name.endswith(extension) and not name.startswith("."):
            files.append(Path(root) / name)
    elif path.exists():
      files.append(path)
    else:
      raise FilesystemError(f"stat {path}: no such file or directory", path=str(path))
  return files


def fix_file(path: Path, engine: ImportEngine, list_only: bool = False, show_diff: bool = False) -> FixResult:
  """
  Fixes one file in place, or reports what would change.

  Args:
      path: The file to process.
      engine: Engine to run.
      list_only: Print the path if it would change, do not write.
      show_diff: Print a unified diff, do not write.

  Returns:
      FixResult: Whether the file changed.

  Raises:
      CueImportsError: On any failure of the engine, reading or writing.
  """
  try:
    content = path.read_bytes()
  except OSError as exc:
    raise FilesystemError(f"read {path}: {exc.strerror or exc}", path=str(path)) from exc

  fixed = engine.run(str(path), content)
  result = FixResult(path=str(path), changed=fixed != content)
  if not result.changed:
    log_debug(f"{path}: unchanged")
    return result

  if list_only:
    print(path)
  elif show_diff:
    sys.stdout.write(_unified_diff(content, fixed, str(path)))
  else:
    try:
      path.write_bytes(fixed)
    except OSError as exc:
      raise FilesystemError(f"write {path}: {exc.strerror or exc}", path=str(path)) from exc
    log_success(f"Fixed imports: [path]{escape(str(path))}[/path]")
  return result


def handle_paths(
  paths: List[Path],
  config: RuntimeConfig,
  list_only: bool = False,
  show_diff: bool = False,
  keep_going: bool = False,
) -> int:
  """
  Handles batch processing of files and directories.

  Args:
      paths: Files and directories to process.
      config: Runtime configuration.
      list_only: Report changed files instead of writing them.
      show_diff: Print diffs instead of writing.
      keep_going: Continue after a failing file and print a summary table.

  Returns:
      int: Exit code (0 for success, 2 if any file failed).
  """
  try:
    files = collect_files(paths, config.extension)
  except FilesystemError as e:
    log_error(escape(str(e)))
    return 2

  engine = ImportEngine(config)
  results: Dict[str, FixResult] = {}
  for path in files:
    try:
      results[str(path)] = fix_file(path, engine, list_only, show_diff)
    except CueImportsError as e:
      log_error(escape(str(e)))
      if not keep_going:
        return 2
      results[str(path)] = FixResult(path=str(path), errors=[str(e)])

  if keep_going:
    _print_batch_summary(results)
  return 0 if all(r.success for r in results.values()) else 2


def _print_batch_summary(results: Dict[str, FixResult]) -> None:
  """
  Renders a summary table of failed files to the console.

  Args:
      results: Dictionary mapping file paths to fix results.
  """
  total = len(results)
  changed = sum(1 for r in results.values() if r.changed)
  failures = [r for r in results.values() if not r.success]

  if not failures:
    log_success(f"Batch Complete: {total} files checked, {changed} changed.")
    return

  table = Table(title="Import Fix Report")
  table.add_column("File", style="cyan")
  table.add_column("Status", justify="center")
  table.add_column("Issues", style="red")
  for res in failures:
    table.add_row(escape(res.path), "❌ Failed", escape("; ".join(res.errors)))

  console.print(table)
  console.print(f"\n[bold]Summary:[/bold] {total - len(failures)} Passed, {len(failures)} Failed.")
