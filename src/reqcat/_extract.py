"""Line-oriented extraction of tokens matched by a regular expression."""

import codecs
import logging
import re
from collections.abc import Callable
from pathlib import Path

from ._errors import InvalidArgumentError

logger = logging.getLogger(__name__)

REQUIRE_PATTERN = r"require *' *(.*?) *'"
"""A quoted path following the ``require`` keyword, blanks stripped."""


class PatternExtractor:
    """Collect tokens matched by a pattern, one line at a time.

    The pattern never spans lines. An instance can be reused for any number
    of files.

    Args:
        pattern: Regular expression applied to each line.
        extract: Function turning a line's matches into tokens. Defaults to
            the first capturing group of every match.
        encoding: Text encoding used to read files. Undecodable bytes are
            replaced rather than rejected.

    Raises:
        InvalidArgumentError: If the pattern does not compile, or has no
            capturing group while no extract function is given, or if
            the encoding is unknown.

    """

    def __init__(
        self,
        pattern: str = REQUIRE_PATTERN,
        extract: Callable[[list[re.Match[str]]], list[str]] | None = None,
        *,
        encoding: str = "utf-8",
    ) -> None:
        try:
            self._pattern = re.compile(pattern)
        except re.error as e:
            msg = f"Invalid pattern {pattern!r}: {e}"
            raise InvalidArgumentError(msg) from e
        if extract is None and self._pattern.groups < 1:
            msg = f"Pattern {pattern!r} has no capturing group to extract"
            raise InvalidArgumentError(msg)
        try:
            codecs.lookup(encoding)
        except LookupError as e:
            msg = f"Unknown encoding {encoding!r}"
            raise InvalidArgumentError(msg) from e
        self._extract = extract if extract is not None else _first_groups
        self._encoding = encoding

    @property
    def pattern(self) -> str:
        """The source text of the compiled pattern."""
        return self._pattern.pattern

    def find_in_line(self, line: str) -> list[str]:
        """Return every token found in a single line."""
        return self._extract(list(self._pattern.finditer(line)))

    def find_all(self, path: Path) -> list[str]:
        """Return every token found in the file, in file order.

        Duplicates are kept. A file without matches yields an empty list.

        Raises:
            InvalidArgumentError: If path is None or not an existing file.

        """
        if path is None or not Path(path).is_file():
            msg = f"File path is incorrect: {path}"
            raise InvalidArgumentError(msg)

        tokens: list[str] = []
        with Path(path).open(encoding=self._encoding, errors="replace") as f:
            for line in f:
                tokens.extend(self.find_in_line(line))
        logger.debug(f"Found {len(tokens)} token(s) in {path}")
        return tokens


def _first_groups(matches: list[re.Match[str]]) -> list[str]:
    return [match.group(1) for match in matches]
