"""Configuration loading from pyproject.toml."""

import codecs
import re
import tomllib
from dataclasses import dataclass
from pathlib import Path


class ConfigError(Exception):
    """Error in reqcat configuration."""


@dataclass(slots=True, frozen=True)
class ReqcatConfig:
    """Configuration loaded from pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).
    """

    root: Path | None = None
    output: Path | None = None
    pattern: str | None = None
    encoding: str | None = None
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def _parse_path(section: dict[str, object], name: str, project_root: Path) -> Path | None:
    """Parse an optional path field, resolving it against the project root.

    Raises:
        ConfigError: If the value is not a string

    """
    if name not in section:
        return None
    value = section[name]
    if not isinstance(value, str):
        msg = f"Invalid [tool.reqcat].{name}: expected string path"
        raise ConfigError(msg)
    path = Path(value)
    if not path.is_absolute():
        path = project_root / path
    return path


def _parse_str(section: dict[str, object], name: str) -> str | None:
    if name not in section:
        return None
    value = section[name]
    if not isinstance(value, str):
        msg = f"Invalid [tool.reqcat].{name}: expected string"
        raise ConfigError(msg)
    return value


def load_config(pyproject_path: Path) -> ReqcatConfig:
    """Load and validate [tool.reqcat] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed ReqcatConfig

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    # Extract [tool.reqcat] section
    tool_section = data.get("tool", {})
    reqcat_section = tool_section.get("reqcat", {})

    if not reqcat_section:
        # No [tool.reqcat] section - return empty config
        return ReqcatConfig(project_root=project_root)

    pattern = _parse_str(reqcat_section, "pattern")
    if pattern is not None:
        try:
            compiled = re.compile(pattern)
        except re.error as e:
            msg = f"Invalid [tool.reqcat].pattern: {e}"
            raise ConfigError(msg) from e
        if compiled.groups < 1:
            msg = "Invalid [tool.reqcat].pattern: expected at least one capturing group"
            raise ConfigError(msg)

    encoding = _parse_str(reqcat_section, "encoding")
    if encoding is not None:
        try:
            codecs.lookup(encoding)
        except LookupError as e:
            msg = f"Invalid [tool.reqcat].encoding: unknown encoding {encoding!r}"
            raise ConfigError(msg) from e

    return ReqcatConfig(
        root=_parse_path(reqcat_section, "root", project_root),
        output=_parse_path(reqcat_section, "output", project_root),
        pattern=pattern,
        encoding=encoding,
        project_root=project_root,
    )


def get_config() -> ReqcatConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        ReqcatConfig (may be empty if no pyproject.toml or no [tool.reqcat] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return ReqcatConfig()
    return load_config(pyproject_path)
