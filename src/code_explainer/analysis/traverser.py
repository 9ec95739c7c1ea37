"""Recursive file discovery with ignored-directory pruning."""

import logging
from pathlib import Path

from ..exceptions import FileSystemError
from ..parser.languages import IGNORED_DIRECTORIES

logger = logging.getLogger(__name__)


def list_files_recursively(
    directory: Path | str,
    ignored: frozenset[str] = IGNORED_DIRECTORIES,
) -> list[Path]:
    """List every file below a directory, depth first.

    Entries are visited in the order the file system returns them. Any entry
    whose name is in ``ignored`` is pruned together with its descendants.
    Symlinked directories are not followed.

    Args:
        directory: Root directory to scan
        ignored: Directory names to skip

    Returns:
        File paths in visitation order

    Raises:
        FileSystemError: If the root does not exist, is not a directory,
            or cannot be listed
    """
    root = Path(directory)
    if not root.exists():
        raise FileSystemError(f"Folder does not exist: {root}", path=str(root))
    if not root.is_dir():
        raise FileSystemError(f"Not a directory: {root}", path=str(root))

    try:
        entries = list(root.iterdir())
    except OSError as e:
        raise FileSystemError(f"Cannot read folder {root}: {e}", path=str(root)) from e

    logger.debug(f"Scanning directory: {root}")
    files: list[Path] = []
    _collect(entries, ignored, files)
    return files


def _collect(entries: list[Path], ignored: frozenset[str], files: list[Path]) -> None:
    for entry in entries:
        if entry.name in ignored:
            logger.debug(f"Skipping ignored entry: {entry}")
            continue

        if entry.is_dir():
            if entry.is_symlink():
                logger.debug(f"Not following symlinked directory: {entry}")
                continue
            try:
                children = list(entry.iterdir())
            except OSError as e:
                logger.warning(f"Cannot read directory {entry}: {e}")
                continue
            _collect(children, ignored, files)
        else:
            files.append(entry)
