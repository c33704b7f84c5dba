"""
Shallow and recursive directory scanning.

**Conceptual**: A scan turns a root directory into a flat list of the paths
below it. Options control how far it descends and what it reports:
  - deep: descend into subdirectories (otherwise immediate children only),
  - include_hidden: report dot-prefixed names (a hidden directory is pruned
    together with everything inside it when excluded),
  - include_package_contents: descend into package directories (bundles such
    as "Foo.app") instead of reporting them as single leaf entries,
  - relative_paths: report paths relative to the scan root.

**Functionally**:
  - A root that is not a directory (missing, or a regular file) yields [].
  - Results are in enumeration order, which the OS does not guarantee to be
    sorted; sort explicitly when determinism matters.
  - Symlinks are reported as entries but never followed.
  - Scans are all-or-nothing: any OSError while enumerating raises
    DirectoryScanError and no partial result is returned.

Each scan is independent blocking I/O with no shared state, so distinct roots
may be scanned from multiple threads at once.
"""

import logging
import os
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional, Union

from src.config.settings import DEFAULT_PACKAGE_EXTENSIONS

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


class DirectoryScanError(OSError):
    """
    Raised when enumerating a directory tree fails.

    Wraps the underlying OSError (permission denied, entry removed mid-scan,
    unreadable device) with the scan root and the path that failed. The
    original exception is chained as __cause__.
    """

    def __init__(self, root: Path, path: Path, cause: OSError):
        self.root = root
        self.path = path
        super().__init__(
            cause.errno,
            f"Failed to scan {root}: could not enumerate {path} ({cause.strerror or cause})",
            str(path),
        )


class EntryKind(Enum):
    """Binary classification of a scanned entry."""
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class DirectoryEntry:
    """
    One scanned file-system location.

    Attributes:
        path: Absolute path as enumerated (or relative to the root when the
              scan rewrote it).
        kind: FILE or DIRECTORY. Symlinks are FILE regardless of their target.
    """
    path: Path
    kind: EntryKind

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE


@dataclass(frozen=True)
class ScanOptions:
    """
    Options for scan() and scan_entries().

    Attributes:
        deep: Descend into subdirectories (default False: immediate children only).
        include_hidden: Include dot-prefixed entries (default False).
        include_package_contents: Descend into package directories. Only has
                                 an effect when deep is True (default False).
        relative_paths: Rewrite result paths relative to the scan root
                       (default False: absolute paths).
        package_extensions: Lowercase directory suffixes recognised as packages.
    """
    deep: bool = False
    include_hidden: bool = False
    include_package_contents: bool = False
    relative_paths: bool = False
    package_extensions: FrozenSet[str] = field(default=DEFAULT_PACKAGE_EXTENSIONS)

    @classmethod
    def from_settings(cls, settings=None, **overrides) -> "ScanOptions":
        """
        Build options whose defaults come from ScanSettings.

        Args:
            settings: Optional ScanSettings. If omitted, uses get_settings().scan.
            **overrides: Any ScanOptions field, applied on top.
        """
        if settings is None:
            from src.config.settings import get_settings
            settings = get_settings().scan
        options = cls(
            include_hidden=settings.include_hidden,
            package_extensions=settings.package_extensions,
        )
        return replace(options, **overrides)


def is_hidden(name: str) -> bool:
    return name.startswith(".")


def is_package(path: PathLike, extensions: Iterable[str] = DEFAULT_PACKAGE_EXTENSIONS) -> bool:
    """
    True if `path` is a directory whose suffix marks it as a package.

    The match is case-insensitive ("Preview.APP" is a package). Symlinks are
    not followed, and regular files are never packages.
    """
    path = Path(path)
    if path.is_symlink() or not path.is_dir():
        return False
    return path.suffix.lower() in frozenset(extensions)


def quick_scan(root: PathLike, include_hidden: bool = False) -> List[Path]:
    """
    List the immediate children of `root`.

    Args:
        root: Directory to list.
        include_hidden: Include dot-prefixed names.

    Returns:
        Absolute paths of the children in enumeration order, or [] if `root`
        is not a directory.

    Raises:
        DirectoryScanError: If the directory cannot be read.
    """
    return scan(root, ScanOptions.from_settings(include_hidden=include_hidden))


def scan_entries(root: PathLike, options: Optional[ScanOptions] = None) -> List[DirectoryEntry]:
    """
    Scan `root` and return classified entries.

    **Functionally**:
      - Shallow (deep=False): immediate children, filtered for hidden names.
      - Deep (deep=True): every descendant, depth-first in enumeration order.
        Hidden directories (when excluded) and packages (unless
        include_package_contents) are not descended; a package still appears
        as one entry of kind DIRECTORY.
      - relative_paths=True: each path is rewritten by relative_to_root().

    Args:
        root: Scan root.
        options: ScanOptions. Defaults to ScanOptions.from_settings(): shallow,
                 absolute paths, hidden entries and package extensions from
                 SCAN_INCLUDE_HIDDEN / SCAN_PACKAGE_EXTENSIONS.

    Returns:
        List of DirectoryEntry; [] if `root` is not a directory.

    Raises:
        DirectoryScanError: On any enumeration failure (no partial results).
    """
    options = options or ScanOptions.from_settings()
    root = Path(root)
    if not root.is_dir():
        logger.debug("Scan root %s is not a directory; nothing to scan", root)
        return []

    resolved_root = root.resolve()
    extensions = frozenset(ext.lower() for ext in options.package_extensions)
    entries: List[DirectoryEntry] = []
    pending = [resolved_root]

    logger.debug("Scanning %s (deep=%s, include_hidden=%s)", resolved_root, options.deep, options.include_hidden)

    while pending:
        directory = pending.pop()
        children: List[DirectoryEntry] = []
        try:
            with os.scandir(directory) as iterator:
                for child in iterator:
                    if not options.include_hidden and is_hidden(child.name):
                        continue
                    is_dir = child.is_dir(follow_symlinks=False)
                    kind = EntryKind.DIRECTORY if is_dir else EntryKind.FILE
                    children.append(DirectoryEntry(path=Path(child.path), kind=kind))
        except OSError as e:
            raise DirectoryScanError(resolved_root, Path(directory), e) from e

        entries.extend(children)
        if not options.deep:
            continue
        descend = [
            entry.path for entry in children
            if entry.is_directory
            and (options.include_package_contents or not is_package(entry.path, extensions))
        ]
        # Reversed so the stack visits subdirectories in enumeration order
        pending.extend(reversed(descend))

    logger.debug("Scanned %s: %d entries", resolved_root, len(entries))

    if options.relative_paths:
        entries = [
            DirectoryEntry(path=relative_to_root(entry.path, resolved_root), kind=entry.kind)
            for entry in entries
        ]
    return entries


def scan(root: PathLike, options: Optional[ScanOptions] = None, **overrides) -> List[Path]:
    """
    Scan `root` and return paths.

    Options may be passed as a ScanOptions, as keyword overrides, or both
    (overrides win):

        scan(root, deep=True, relative_paths=True)

    Without `options`, defaults come from ScanOptions.from_settings().

    Returns:
        List of Path; [] if `root` is not a directory.

    Raises:
        DirectoryScanError: On any enumeration failure (no partial results).
    """
    options = options or ScanOptions.from_settings()
    if overrides:
        options = replace(options, **overrides)
    return [entry.path for entry in scan_entries(root, options)]


def relative_to_root(path: PathLike, root: PathLike) -> Path:
    """
    Rewrite `path` relative to the scan root.

    The prefix is the root's resolved absolute path plus exactly one
    separator. The entry's fully resolved path must start with that prefix;
    the remainder of its (unresolved) absolute path is returned. An entry that
    resolves outside the root, such as a symlink escaping it, is returned as
    its absolute path unchanged.
    """
    absolute = Path(os.path.abspath(path))
    root_text = str(Path(root).resolve())
    prefix = root_text if root_text.endswith(os.sep) else root_text + os.sep

    if not str(absolute.resolve()).startswith(prefix) or not str(absolute).startswith(prefix):
        logger.warning("%s resolves outside scan root %s; keeping absolute path", absolute, root_text)
        return absolute
    return Path(str(absolute)[len(prefix):])
