from .fix import collect_files, fix_file, handle_paths, handle_stdin, _print_batch_summary
