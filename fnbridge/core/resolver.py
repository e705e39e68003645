"""
Function module resolution.

Maps a logical function name to its source file and its compiled output,
and decides when the compiled output needs to be regenerated.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Sequence, Union

logger = logging.getLogger("fnbridge.resolver")

# Priority order matters: the first existing candidate wins.
DEFAULT_EXTENSIONS = (".py", ".pyw", ".py3", ".pyt", ".pys", ".pyi")
OUTPUT_EXTENSION = ".py"

PathLike = Union[str, "os.PathLike[str]"]


def resolve_file(
    directory: PathLike, name: str, extensions: Sequence[str] = DEFAULT_EXTENSIONS
) -> Optional[Path]:
    """
    Locate the source file of a function.

    Args:
        directory: functions source directory
        name: logical function name (no extension)
        extensions: candidate extensions, in priority order

    Returns:
        Path of the first existing ``directory/name<ext>``, or None
    """
    base = Path(directory)
    for ext in extensions:
        candidate = base / f"{name}{ext}"
        if candidate.is_file():
            return candidate
    logger.debug(f"No source found for '{name}' in {base} (tried {list(extensions)})")
    return None


def compiled_path(output_dir: PathLike, name: str) -> Path:
    """Compiled output location of a function."""
    return Path(output_dir) / f"{name}{OUTPUT_EXTENSION}"


def is_stale(source_path: PathLike, output_path: PathLike) -> bool:
    """
    True when the source was modified strictly after the compiled output.

    Both files must exist. Only modification times are compared.
    """
    return os.stat(source_path).st_mtime_ns > os.stat(output_path).st_mtime_ns


def needs_compile(source_path: PathLike, output_path: PathLike) -> bool:
    """Missing or stale compiled output."""
    return not os.path.exists(output_path) or is_stale(source_path, output_path)


def logical_name(path_tail: str) -> Optional[str]:
    """
    Derive the logical function name from the path segment after the prefix.

    The trailing slash is trimmed. Returns None for names that cannot refer
    to a file in the functions directory.
    """
    name = path_tail.rstrip("/")
    if not name or name.startswith("/") or "\\" in name:
        return None
    if any(part in ("", ".", "..") for part in name.split("/")):
        return None
    return name
