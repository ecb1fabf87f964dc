"""Filesystem helpers."""

import shutil
from pathlib import Path


def directory_exists(path: Path) -> bool:
    """Check if path is an existing directory.

    Symlinks to directories count as directories.

    Args:
        path: Path to check

    Returns:
        True if path exists and is a directory
    """
    return Path(path).is_dir()


def remove_recursive(path: Path) -> None:
    """Remove a file, symlink or directory tree.

    A missing path is not an error.

    Args:
        path: Path to remove

    Raises:
        OSError: If the path exists but cannot be removed.
    """
    path = Path(path)
    if path.is_symlink() or path.is_file():
        path.unlink(missing_ok=True)
    elif path.is_dir():
        shutil.rmtree(path)


def empty_directory(path: Path) -> list[str]:
    """Remove every entry inside a directory, keeping the directory.

    Args:
        path: Directory to empty

    Returns:
        Names of the removed entries, sorted.

    Raises:
        OSError: If an entry cannot be removed.
    """
    path = Path(path)
    removed = []
    for entry in sorted(path.iterdir()):
        remove_recursive(entry)
        removed.append(entry.name)
    return removed
