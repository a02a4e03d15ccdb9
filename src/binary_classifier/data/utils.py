"""Utility functions for the data pipeline."""

from pathlib import Path


def get_files(root: Path, extensions: tuple[str, ...] | None = None) -> list[Path]:
    """Find regular files directly inside root, optionally filtered by extension.

    Subdirectories are not descended into and hidden files (names starting
    with ``.``) are ignored.

    Args:
        root: Directory to search.
        extensions: Tuple of lowercase extensions including dot
            (e.g., (".jpg", ".png")). ``None`` accepts every file.

    Returns:
        Sorted list of matching file paths.
    """
    files = []
    for p in root.iterdir():
        if not p.is_file() or p.name.startswith("."):
            continue
        if extensions is None or p.suffix.lower() in extensions:
            files.append(p)
    return sorted(files)
