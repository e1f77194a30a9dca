"""Tests for PatternExtractor."""

from pathlib import Path

import pytest

from reqcat._errors import InvalidArgumentError
from reqcat._extract import REQUIRE_PATTERN, PatternExtractor


@pytest.fixture
def extractor() -> PatternExtractor:
    return PatternExtractor()


class TestFindAll:
    """Tests for PatternExtractor.find_all."""

    def test_none_path_raises(self, extractor: PatternExtractor) -> None:
        with pytest.raises(InvalidArgumentError, match="File path is incorrect"):
            extractor.find_all(None)  # type: ignore[arg-type]

    def test_missing_file_raises(self, extractor: PatternExtractor, tmp_path: Path) -> None:
        with pytest.raises(InvalidArgumentError):
            extractor.find_all(tmp_path / "no_such_file.txt")

    def test_directory_raises(self, extractor: PatternExtractor, tmp_path: Path) -> None:
        with pytest.raises(InvalidArgumentError):
            extractor.find_all(tmp_path)

    def test_empty_file(self, extractor: PatternExtractor, tmp_path: Path) -> None:
        source = tmp_path / "empty.txt"
        source.write_text("")
        assert extractor.find_all(source) == []

    def test_no_match(self, extractor: PatternExtractor, tmp_path: Path) -> None:
        source = tmp_path / "nomatch.txt"
        source.write_text("nothing to see here\nrequire without quotes\n")
        assert extractor.find_all(source) == []

    def test_matches_in_file_order(self, extractor: PatternExtractor, tmp_path: Path) -> None:
        source = tmp_path / "match.txt"
        source.write_text(
            "require '/path1'\n"
            "some text require '/path2' more text\n"
            "require '/path1' require '/path3'\n"
            "\n"
            "require '/path4'require '/path5'\n",
        )
        assert extractor.find_all(source) == ["/path1", "/path2", "/path1", "/path3", "/path4", "/path5"]

    def test_matches_with_spaces(self, extractor: PatternExtractor, tmp_path: Path) -> None:
        source = tmp_path / "matchwithspaces.txt"
        source.write_text("require   '  /path1 '\nrequire' /path2'\n")
        assert extractor.find_all(source) == ["/path1", "/path2"]

    def test_pattern_split_across_lines_is_ignored(self, extractor: PatternExtractor, tmp_path: Path) -> None:
        source = tmp_path / "brokenline.txt"
        source.write_text("require '/path4\n'\nrequire '/path5'\n")
        assert extractor.find_all(source) == ["/path5"]

    def test_undecodable_bytes_are_tolerated(self, extractor: PatternExtractor, tmp_path: Path) -> None:
        source = tmp_path / "binary.txt"
        source.write_bytes(b"\xff\xfe require 'a.txt'\n")
        assert extractor.find_all(source) == ["a.txt"]

    def test_accepts_string_path(self, extractor: PatternExtractor, tmp_path: Path) -> None:
        source = tmp_path / "match.txt"
        source.write_text("require 'x'\n")
        assert extractor.find_all(str(source)) == ["x"]  # type: ignore[arg-type]


class TestConstruction:
    def test_default_pattern(self) -> None:
        assert PatternExtractor().pattern == REQUIRE_PATTERN

    def test_invalid_pattern_raises(self) -> None:
        with pytest.raises(InvalidArgumentError, match="Invalid pattern"):
            PatternExtractor("require '(")

    def test_pattern_without_group_raises(self) -> None:
        with pytest.raises(InvalidArgumentError, match="capturing group"):
            PatternExtractor("require")

    def test_unknown_encoding_raises(self) -> None:
        with pytest.raises(InvalidArgumentError, match="Unknown encoding"):
            PatternExtractor(encoding="no-such-codec")

    def test_custom_pattern(self, tmp_path: Path) -> None:
        source = tmp_path / "imports.txt"
        source.write_text('#include "a.h"\n#include "b.h"\n')
        assert PatternExtractor(r'#include "(.*?)"').find_all(source) == ["a.h", "b.h"]

    def test_custom_extract_function(self) -> None:
        extractor = PatternExtractor(r"(\w+)=(\w+)", lambda matches: [m.group(2) for m in matches])
        assert extractor.find_in_line("a=1 b=2") == ["1", "2"]

    def test_reusable_across_files(self, extractor: PatternExtractor, tmp_path: Path) -> None:
        first = tmp_path / "first.txt"
        second = tmp_path / "second.txt"
        first.write_text("require 'one'\n")
        second.write_text("require 'two'\n")
        assert extractor.find_all(first) == ["one"]
        assert extractor.find_all(second) == ["two"]
