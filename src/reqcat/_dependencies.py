"""Build the dependency map of a directory tree."""

import logging
from pathlib import Path, PurePath

from ._errors import InvalidArgumentError
from ._extract import PatternExtractor

logger = logging.getLogger(__name__)


def iter_files(root: Path) -> list[Path]:
    """Return every regular file under root, recursively, in sorted order."""
    return sorted(path for path in root.rglob("*") if path.is_file())


def resolve_requirement(root: Path, token: str) -> Path | None:
    """Resolve a required path token against root.

    Returns:
        The canonical absolute path, or None if it is not an existing file.

    """
    relative = PurePath(token)
    if relative.is_absolute():
        # An absolute token names a path under root, not on the filesystem
        relative = relative.relative_to(relative.anchor)
    candidate = (root / relative).resolve()
    if not candidate.is_file():
        return None
    return candidate


def read_dependency_map(
    root: Path,
    *,
    invert: bool = False,
    extractor: PatternExtractor | None = None,
) -> dict[str, set[str]]:
    """Read the requirements declared by every file under root.

    Required paths are resolved relative to root, whichever file declares
    them. Requirements that do not name an existing file are dropped.
    All ids are canonical absolute paths.

    Args:
        root: Directory to scan.
        invert: Direction of the mapping. False maps each file to the files
            it requires, True maps each file to the files requiring it.
        extractor: Extractor used on each file. Defaults to the
            ``require 'path'`` pattern.

    Returns:
        Mapping that has every scanned file as a key, possibly with an
        empty set.

    Raises:
        InvalidArgumentError: If root is None or not a directory.

    """
    if root is None:
        msg = "Root path cannot be None"
        raise InvalidArgumentError(msg)
    root = Path(root)
    if not root.is_dir():
        msg = f"{root} does not exist or is not a directory"
        raise InvalidArgumentError(msg)
    if extractor is None:
        extractor = PatternExtractor()

    root = root.resolve()
    dependency_map: dict[str, set[str]] = {}

    for path in iter_files(root):
        file_id = str(path.resolve())
        try:
            tokens = extractor.find_all(path)
        except OSError as e:
            logger.warning(f"Skipping unreadable file {path}: {e}")
            continue

        requirements: set[str] = set()
        for token in tokens:
            resolved = resolve_requirement(root, token)
            if resolved is None:
                logger.debug(f"Dropping unresolved requirement '{token}' in {path}")
                continue
            requirements.add(str(resolved))

        if invert:
            dependency_map.setdefault(file_id, set())
            for requirement in requirements:
                dependency_map.setdefault(requirement, set()).add(file_id)
        else:
            dependency_map[file_id] = requirements

    logger.debug(f"Read dependencies of {len(dependency_map)} file(s) under {root}")
    return dependency_map
