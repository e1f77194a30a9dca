"""Rendering of ordering results: concatenated output and cycle chains."""

import logging
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import BinaryIO

from ._graph import Node

logger = logging.getLogger(__name__)


def concatenate(ids: Sequence[str], output: Path | BinaryIO) -> int:
    """Write the raw contents of each file, in order, to output.

    Args:
        ids: Paths of the files to concatenate.
        output: Destination file (parent directories are created) or an
            open binary stream.

    Returns:
        The number of bytes written.

    """
    if isinstance(output, Path):
        output.parent.mkdir(parents=True, exist_ok=True)
        with output.open("wb") as f:
            return _write_all(ids, f)
    return _write_all(ids, output)


def _write_all(ids: Sequence[str], stream: BinaryIO) -> int:
    written = 0
    for file_id in ids:
        content = Path(file_id).read_bytes()
        stream.write(content)
        written += len(content)
        logger.debug(f"Appended {file_id} ({len(content)} bytes)")
    return written


def format_cycle(ids: Sequence[str], separator: str = " -> ") -> str:
    """Render a cycle as a chain, repeating the first id at the end.

    Example:
        >>> format_cycle(["a", "b"])
        'a -> b -> a'

    """
    if not ids:
        return ""
    return separator.join([*ids, ids[0]])


def relative_name(file_id: str, root: Path) -> str:
    """Return file_id relative to root in POSIX form, or file_id itself if it lies outside root."""
    path = Path(file_id)
    if path.is_relative_to(root):
        return path.relative_to(root).as_posix()
    return file_id


def display_key(root: Path) -> Callable[[Node], str]:
    """Tie-break key ordering nodes by their path relative to root."""
    resolved_root = Path(root).resolve()

    def key(node: Node) -> str:
        return relative_name(node.id, resolved_root)

    return key
