"""Tests for the flat-file user codec."""

from __future__ import annotations

import pytest

from friendgraph.domain.errors import RecordFormatError
from friendgraph.domain.records import is_single_line, parse_users, render_users
from friendgraph.domain.user import UserRecord

SAMPLE = """\
3
0
Alice
1990
10001
1 2
1
Bob
1985
94110
0
2
Carol
1970
60601
0
"""


class TestParseUsers:
    def test_parses_sample(self) -> None:
        records = parse_users(SAMPLE)
        assert [r.name for r in records] == ["Alice", "Bob", "Carol"]
        assert records[0].friends == [1, 2]
        assert records[1].year == 1985
        assert records[2].zip == 60601

    def test_fields_are_stripped(self) -> None:
        text = "1\n  0\n   Alice  \n 1990\n\t10001\n  \n"
        (record,) = parse_users(text)
        assert record.name == "Alice"
        assert record.year == 1990
        assert record.friends == []

    def test_duplicate_friend_ids_collapse(self) -> None:
        text = "1\n0\nAlice\n1990\n10001\n3 1 3\n"
        assert parse_users(text)[0].friends == [1, 3]

    def test_zero_users(self) -> None:
        assert parse_users("0\n") == []

    def test_extra_trailing_lines_ignored(self) -> None:
        assert len(parse_users(SAMPLE + "\n\n")) == 3

    def test_empty_text(self) -> None:
        with pytest.raises(RecordFormatError, match="missing user count") as exc_info:
            parse_users("")
        assert exc_info.value.line == 1

    def test_non_integer_count(self) -> None:
        with pytest.raises(RecordFormatError, match="user count"):
            parse_users("three\n")

    def test_negative_count(self) -> None:
        with pytest.raises(RecordFormatError, match="negative"):
            parse_users("-1\n")

    def test_truncated_file(self) -> None:
        text = "2\n0\nAlice\n1990\n10001\n\n1\nBob\n"
        with pytest.raises(RecordFormatError, match="expected 2 users") as exc_info:
            parse_users(text)
        assert exc_info.value.line == 9

    def test_bad_year_reports_line(self) -> None:
        text = "1\n0\nAlice\nnineteen\n10001\n\n"
        with pytest.raises(RecordFormatError, match="year") as exc_info:
            parse_users(text)
        assert exc_info.value.line == 4

    def test_bad_friend_reports_line(self) -> None:
        text = "1\n0\nAlice\n1990\n10001\n1 x\n"
        with pytest.raises(RecordFormatError, match="friend id") as exc_info:
            parse_users(text)
        assert exc_info.value.line == 6

    def test_negative_id_is_format_error(self) -> None:
        text = "1\n-4\nAlice\n1990\n10001\n\n"
        with pytest.raises(RecordFormatError, match="invalid user record"):
            parse_users(text)

    def test_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse_users("x")


class TestRenderUsers:
    def test_empty(self) -> None:
        assert render_users([]) == "0\n"

    def test_friendless_user_has_blank_line(self) -> None:
        text = render_users([UserRecord(id=0, name="Alice", year=1990, zip=10001)])
        assert text == "1\n0\nAlice\n1990\n10001\n\n"

    def test_friends_sorted(self) -> None:
        record = UserRecord(id=0, name="A", year=1, zip=2, friends=[3, 1, 2])
        assert render_users([record]).splitlines()[5] == "1 2 3"

    def test_round_trip(self) -> None:
        assert render_users(parse_users(SAMPLE)) == SAMPLE

    def test_unusual_names_round_trip(self) -> None:
        records = [
            UserRecord(id=0, name="Zoë O'Neil", year=1990, zip=1, friends=[1]),
            UserRecord(id=1, name="Tab\tInside", year=1991, zip=2, friends=[0]),
        ]
        assert parse_users(render_users(records)) == records

    @pytest.mark.parametrize("separator", ["\n", "\r", "\x0b", "\x1d", "\x85", "\u2028"])
    def test_line_break_in_name_rejected(self, separator: str) -> None:
        records = [
            UserRecord(id=0, name="Alice", year=1990, zip=1),
            UserRecord(id=1, name=f"Ann{separator}Lee", year=1991, zip=2),
        ]
        with pytest.raises(RecordFormatError, match="line break") as exc_info:
            render_users(records)
        assert exc_info.value.line == 8


class TestIsSingleLine:
    @pytest.mark.parametrize("text", ["", "Alice", "Ann Lee", "Tab\tInside"])
    def test_single_line(self, text: str) -> None:
        assert is_single_line(text)

    @pytest.mark.parametrize("text", ["Ann\nLee", "Ann\r\nLee", "Ann\u2029Lee", "trailing\r"])
    def test_line_breaks(self, text: str) -> None:
        assert not is_single_line(text)
