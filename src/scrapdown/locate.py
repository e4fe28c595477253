"""Utilities for finding input documents and naming their Markdown outputs."""

from pathlib import Path

from .errors import InputNotFoundError


def should_skip(path: Path) -> bool:
    """
    Check if a file should be ignored.

    Hidden files and editor temp/swap files are never treated as documents.
    """
    name = path.name

    # Skip hidden files
    if name.startswith("."):
        return True

    # Skip temp/swap files
    if name.endswith("~") or name.endswith(".swp") or name.startswith(".#"):
        return True

    return False


def matches(path: Path, root: Path, pattern: str) -> bool:
    """True if ``path`` (somewhere below ``root``) is a document selected by ``pattern``."""
    if should_skip(path):
        return False
    try:
        rel = path.relative_to(root)
    except ValueError:
        return False
    if "**" not in pattern and len(rel.parts) != len(Path(pattern).parts):
        return False
    # "**/" prefixes also match files directly in root
    if pattern.startswith("**/") and rel.match(pattern[3:]):
        return True
    return rel.match(pattern)


def locate_inputs(path: Path, pattern: str = "*.txt") -> list[Path]:
    """
    Resolve the documents to convert.

    Args:
        path: A single document, or a directory to scan
        pattern: Glob used inside a directory (e.g. "*.txt", "**/*.txt")

    Returns:
        Sorted list of document paths

    Raises:
        InputNotFoundError: If path does not exist or the directory has no matches
    """
    if not path.exists():
        raise InputNotFoundError(f"Input not found: {path}")

    if path.is_file():
        return [path]

    found = sorted(
        p for p in path.glob(pattern)
        if p.is_file() and not any(should_skip(Path(part)) for part in p.relative_to(path).parts)
    )
    if not found:
        raise InputNotFoundError(f"No documents matching {pattern!r} in {path}")
    return found


def output_path_for(src: Path, root: Path, out_dir: Path) -> Path:
    """
    Map an input document to its Markdown output path.

    ``root/notes/a.txt`` becomes ``out_dir/notes/a.md``. A single-file input
    (``src == root``) maps to ``out_dir/<stem>.md``.
    """
    if src == root:
        rel = Path(src.name)
    else:
        rel = src.relative_to(root)
    return (out_dir / rel).with_suffix(".md")
