#!/usr/bin/env python3
"""
List the contents of a directory tree.

**Purpose**: Command-line front end for src.files.scanner.scan(). Prints one
path per line.

**Usage**:
    From project root:
    ```bash
    python actions/scan_directory_tree.py ~/Projects
    python actions/scan_directory_tree.py ~/Projects --deep --relative --sort
    python actions/scan_directory_tree.py /Applications --deep --package-contents
    ```

**Options**:
  --deep              Descend into subdirectories.
  --hidden            Include dot-prefixed entries.
  --package-contents  Descend into package directories (e.g. Foo.app); --deep only.
  --relative          Print paths relative to the root.
  --sort              Sort output (enumeration order is otherwise unspecified).
  --kind              Append "/" to directories.

**Exit codes**:
  - 0: Success (including a root that is not a directory: nothing is printed)
  - 1: The scan failed (permission denied, entry vanished, ...)
  - 2: Invalid settings (SCAN_*, LOG_*)
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

# Ensure project root is on path for imports
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from src.files.scanner import DirectoryEntry, DirectoryScanError, ScanOptions, scan_entries
from src.utils.log import configure_logging, get_logger

logger = get_logger("actions.scan_directory_tree")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="List the contents of a directory tree.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("root", type=str, help="Directory to scan.")
    parser.add_argument("--deep", action="store_true", help="Descend into subdirectories.")
    parser.add_argument("--hidden", action="store_true", help="Include dot-prefixed entries.")
    parser.add_argument(
        "--package-contents",
        action="store_true",
        help="Descend into package directories instead of listing them as single entries.",
    )
    parser.add_argument("--relative", action="store_true", help="Print paths relative to the root.")
    parser.add_argument("--sort", action="store_true", help="Sort the output.")
    parser.add_argument("--kind", action="store_true", help="Append '/' to directories.")
    return parser


def format_entries(entries: List[DirectoryEntry], sort: bool = False, show_kind: bool = False) -> List[str]:
    """
    Render scanned entries as output lines.

    Args:
        entries: Entries from scan_entries().
        sort: Sort lines by their POSIX path text.
        show_kind: Append "/" to directory entries.
    """
    lines = [
        entry.path.as_posix() + ("/" if show_kind and entry.is_directory else "")
        for entry in entries
    ]
    return sorted(lines) if sort else lines


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entrypoint for the directory scan action.

    Returns:
        Process exit code (0 on success, 1 if the scan failed, 2 on invalid settings).
    """
    args = build_parser().parse_args(argv)

    overrides = {
        "deep": args.deep,
        "include_package_contents": args.package_contents,
        "relative_paths": args.relative,
    }
    # Without --hidden the SCAN_INCLUDE_HIDDEN default applies
    if args.hidden:
        overrides["include_hidden"] = True
    try:
        configure_logging()
        options = ScanOptions.from_settings(**overrides)
    except ValueError as e:
        print(f"ERROR: invalid settings: {e}", file=sys.stderr)
        return 2

    root = Path(args.root).expanduser()
    try:
        entries = scan_entries(root, options)
    except DirectoryScanError as e:
        logger.error("Scan failed: %s", e)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    for line in format_entries(entries, sort=args.sort, show_kind=args.kind):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
