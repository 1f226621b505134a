import re
from pathlib import Path

import pytest

from lsp_tools.errors import ErrorKind
from lsp_tools.tools.positions import (
    FileUnreadableError,
    InvalidPatternError,
    MatchPosition,
    find_regex_positions_in_content,
    find_regex_positions_in_file,
    find_regex_positions_in_file_async,
    read_file_content,
    slice_span,
)


def _offset(content: str, line: int, column: int) -> int:
    lines = content.split("\n")
    return sum(len(text) + 1 for text in lines[:line]) + column


def test_single_line_match_exact_position() -> None:
    result = find_regex_positions_in_content("This is a test with pattern123 in it", "pattern[0-9]+")

    assert len(result) == 1
    assert result[0].to_wire() == {
        "match": "pattern123",
        "line": 0,
        "column": 20,
        "endLine": 0,
        "endColumn": 30,
    }


def test_multiple_matches_on_one_line_in_order() -> None:
    result = find_regex_positions_in_content("pattern123 and pattern456 are both here", "pattern[0-9]+")

    assert [m.match for m in result] == ["pattern123", "pattern456"]
    assert result[1].column == 15
    assert result[1].end_column == 25


def test_match_on_later_line() -> None:
    result = find_regex_positions_in_content("First line\nSecond line with pattern123\nThird line", "pattern[0-9]+")

    assert result == [MatchPosition(match="pattern123", line=1, column=17, end_line=1, end_column=27)]


def test_match_spanning_lines() -> None:
    content = "First line\npattern\n123\nFourth line"
    result = find_regex_positions_in_content(content, "pattern\\n123")

    assert len(result) == 1
    assert result[0].match == "pattern\n123"
    assert (result[0].line, result[0].column) == (1, 0)
    assert (result[0].end_line, result[0].end_column) == (2, 3)


def test_empty_content_yields_nothing() -> None:
    assert find_regex_positions_in_content("", "pattern") == []
    assert find_regex_positions_in_content("", ".*") == []


def test_no_matches() -> None:
    assert find_regex_positions_in_content("This content has no matches", "pattern[0-9]+") == []


def test_invalid_pattern_raises_with_diagnostic() -> None:
    with pytest.raises(InvalidPatternError) as excinfo:
        find_regex_positions_in_content("Test content", "(unclosed")

    assert excinfo.value.kind == ErrorKind.INVALID_PATTERN
    assert isinstance(excinfo.value.__cause__, re.error)
    assert "(unclosed" in str(excinfo.value)


def test_match_consuming_newline_ends_at_next_line_start() -> None:
    content = "abc\ndef"
    result = find_regex_positions_in_content(content, "c\\n")

    assert (result[0].line, result[0].column) == (0, 2)
    assert (result[0].end_line, result[0].end_column) == (1, 0)


def test_match_stopping_before_newline_keeps_line_length_column() -> None:
    result = find_regex_positions_in_content("abc\ndef", "abc")

    assert (result[0].end_line, result[0].end_column) == (0, 3)


def test_trailing_newline_match() -> None:
    result = find_regex_positions_in_content("abc\n", "\\n")

    assert (result[0].line, result[0].column) == (0, 3)
    assert (result[0].end_line, result[0].end_column) == (1, 0)


def test_newline_only_match_on_empty_line() -> None:
    result = find_regex_positions_in_content("a\n\nb", "\\n")

    assert [(m.line, m.column, m.end_line, m.end_column) for m in result] == [(0, 1, 1, 0), (1, 0, 2, 0)]


def test_zero_width_matches_are_not_reported() -> None:
    assert find_regex_positions_in_content("abc", "x*") == []
    assert find_regex_positions_in_content("abc\ndef", "^") == []

    result = find_regex_positions_in_content("baa", "a*")
    assert [(m.match, m.column, m.end_column) for m in result] == [("aa", 1, 3)]


def test_columns_count_characters() -> None:
    result = find_regex_positions_in_content("héllo wörld", "w\\w+")

    assert result[0].column == 6
    assert result[0].end_column == 11


def test_results_ordered_by_line_then_column() -> None:
    content = "a1 b2\nc3\n\nd4 e5"
    result = find_regex_positions_in_content(content, "[a-z][0-9]")

    coords = [(m.line, m.column) for m in result]
    assert coords == [(0, 0), (0, 3), (1, 0), (3, 0), (3, 3)]
    assert coords == sorted(coords)


@pytest.mark.parametrize(
    ("content", "pattern"),
    [
        ("This is a test with pattern123 in it", "pattern[0-9]+"),
        ("First line\npattern\n123\nFourth line", "pattern\\n123"),
        ("one\ntwo\nthree\n", "o\\n?"),
        ("x\n\n\ny", "\\n+"),
        ("tail\n", "l\\n"),
        ("aaa\nbbb\nccc", "[ab]+\\n[bc]+"),
        ("mixed\r\nendings\r\n", "\\r\\n"),
    ],
)
def test_span_round_trips_to_match_text(content: str, pattern: str) -> None:
    result = find_regex_positions_in_content(content, pattern)

    assert result
    for position in result:
        start = _offset(content, position.line, position.column)
        end = _offset(content, position.end_line, position.end_column)
        assert content[start:end] == position.match
        assert slice_span(content, position) == position.match
        assert (position.end_line, position.end_column) >= (position.line, position.column)


def test_wire_format_uses_camel_case() -> None:
    position = MatchPosition(match="x", line=0, column=0, end_line=0, end_column=1)

    assert position.model_dump(by_alias=True) == {
        "match": "x",
        "line": 0,
        "column": 0,
        "endLine": 0,
        "endColumn": 1,
    }
    assert MatchPosition.model_validate({"match": "x", "line": 0, "column": 0, "endLine": 0, "endColumn": 1}) == position


def test_find_in_file(sample_file: Path) -> None:
    result = find_regex_positions_in_file(sample_file, "pattern[0-9]+")

    by_text = {m.match: m for m in result}
    assert set(by_text) == {"pattern123", "pattern456", "pattern789"}
    assert by_text["pattern123"] == MatchPosition(match="pattern123", line=2, column=10, end_line=2, end_column=20)
    assert by_text["pattern456"] == MatchPosition(match="pattern456", line=3, column=12, end_line=3, end_column=22)
    assert by_text["pattern789"] == MatchPosition(match="pattern789", line=6, column=15, end_line=6, end_column=25)


def test_find_multiline_in_file(sample_file: Path) -> None:
    result = find_regex_positions_in_file(sample_file, "multiline pattern\\nthat spans")

    assert len(result) == 1
    assert result[0].match == "multiline pattern\nthat spans"
    assert (result[0].line, result[0].column) == (7, 6)
    assert (result[0].end_line, result[0].end_column) == (8, 10)


def test_missing_file_is_unreadable(tmp_path: Path) -> None:
    with pytest.raises(FileUnreadableError) as excinfo:
        find_regex_positions_in_file(tmp_path / "non-existent-file.txt", "pattern")

    assert excinfo.value.kind == ErrorKind.FILE_UNREADABLE
    assert isinstance(excinfo.value.error, FileNotFoundError)


def test_directory_is_unreadable(tmp_path: Path) -> None:
    with pytest.raises(FileUnreadableError):
        find_regex_positions_in_file(tmp_path, "pattern")


def test_non_utf8_file_is_unreadable(tmp_path: Path) -> None:
    target = tmp_path / "latin1.txt"
    target.write_bytes(b"caf\xe9\n")

    with pytest.raises(FileUnreadableError):
        find_regex_positions_in_file(target, "caf")


def test_invalid_pattern_propagates_from_file(sample_file: Path) -> None:
    with pytest.raises(InvalidPatternError):
        find_regex_positions_in_file(sample_file, "[")


def test_injected_reader_is_used() -> None:
    seen: list[Path] = []

    def fake_read(path: Path) -> str:
        seen.append(path)
        return "needle in\nhaystack needle"

    result = find_regex_positions_in_file("virtual.txt", "needle", read_text=fake_read)

    assert seen == [Path("virtual.txt")]
    assert [(m.line, m.column) for m in result] == [(0, 0), (1, 9)]


@pytest.mark.asyncio
async def test_async_variant_matches_sync(sample_file: Path) -> None:
    result = await find_regex_positions_in_file_async(sample_file, "pattern[0-9]+")

    assert result == find_regex_positions_in_file(sample_file, "pattern[0-9]+")


def test_nul_byte_in_path_is_unreadable(tmp_path: Path) -> None:
    with pytest.raises(FileUnreadableError) as excinfo:
        find_regex_positions_in_file(f"{tmp_path}/a\x00b.txt", "x")

    assert isinstance(excinfo.value.error, ValueError)


def test_read_file_content_wraps_reader_errors() -> None:
    def broken_read(path: Path) -> str:
        raise PermissionError(13, "Permission denied", str(path))

    with pytest.raises(FileUnreadableError, match="cannot read locked.txt"):
        read_file_content("locked.txt", read_text=broken_read)
