"""
Main Entry Point for the cue-imports CLI.

With no path arguments the tool acts as a filter from standard input to
standard output; otherwise it fixes the given files and directories in place.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError
from rich.markup import escape

from cue_imports import __version__
from cue_imports.cli.handlers import handle_paths, handle_stdin
from cue_imports.config import RuntimeConfig
from cue_imports.utils.console import log_error, set_verbose


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, 2 for failure).
  """
  parser = argparse.ArgumentParser(
    prog="cue-imports",
    description="cue-imports: add missing and remove unused imports in CUE files",
  )
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
  parser.add_argument("paths", nargs="*", type=Path, help="Files or directories to fix in place")
  parser.add_argument("-l", "--list", action="store_true", help="List files whose imports would change")
  parser.add_argument("-d", "--diff", action="store_true", help="Print diffs instead of rewriting files")
  parser.add_argument(
    "--strict",
    action="store_true",
    default=None,
    help="Fail when names remain unresolved and no cue.mod directory is found (Overrides config)",
  )
  parser.add_argument(
    "--keep-going",
    action="store_true",
    help="Continue after a failing file and print a summary",
  )
  parser.add_argument(
    "--stdin-filename",
    default=None,
    help="Path assumed for standard input (default: _.cue in the working directory)",
  )
  parser.add_argument("-v", "--verbose", action="store_true", help="Log the pipeline stages")

  args = parser.parse_args(argv)
  set_verbose(args.verbose)

  try:
    config = RuntimeConfig.load(strict_module_root=args.strict)
  except ValidationError as e:
    log_error(f"Invalid configuration: {escape(str(e))}")
    return 2

  if not args.paths:
    return handle_stdin(config, args.stdin_filename, list_only=args.list, show_diff=args.diff)
  return handle_paths(
    args.paths,
    config,
    list_only=args.list,
    show_diff=args.diff,
    keep_going=args.keep_going,
  )


if __name__ == "__main__":
  sys.exit(main())
