"""Flat-file user data — pure parse and render, no file I/O.

Layout (one field per line, fields may be indented)::

    <user count>
    <id>
    <name>
    <year>
    <zip>
    <space separated friend ids>
    ... five lines per user

File reading and writing lives in :mod:`friendgraph.infrastructure.store`.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import ValidationError

from friendgraph.domain.errors import RecordFormatError
from friendgraph.domain.user import UserRecord

LINES_PER_USER = 5


def _parse_int(raw: str, field: str, line: int) -> int:
    try:
        return int(raw)
    except ValueError:
        raise RecordFormatError(f"{field} is not an integer: {raw!r}", line=line) from None


def is_single_line(text: str) -> bool:
    """True when *text* holds no character that ``str.splitlines`` breaks on."""
    lines = text.splitlines()
    return len(lines) <= 1 and "".join(lines) == text


def parse_users(text: str) -> list[UserRecord]:
    """Parse flat-file text into user records, in file order.

    Fields are stripped of surrounding whitespace. An empty friends line
    means no friends; duplicate friend IDs collapse.

    Raises:
        RecordFormatError: On a missing or non-integer field, or when the
            text holds fewer user blocks than the declared count.
    """
    lines = text.splitlines()
    if not lines or not lines[0].strip():
        raise RecordFormatError("missing user count", line=1)
    count = _parse_int(lines[0].strip(), "user count", 1)
    if count < 0:
        raise RecordFormatError(f"user count is negative: {count}", line=1)

    records: list[UserRecord] = []
    for index in range(count):
        start = 1 + index * LINES_PER_USER
        block = lines[start : start + LINES_PER_USER]
        if len(block) < LINES_PER_USER:
            raise RecordFormatError(
                f"expected {count} users, file ends inside user {index}",
                line=len(lines) + 1,
            )
        id_line, name_line, year_line, zip_line, friends_line = (f.strip() for f in block)
        lineno = start + 1
        friends = sorted(
            {_parse_int(tok, "friend id", lineno + 4) for tok in friends_line.split()}
        )
        try:
            record = UserRecord(
                id=_parse_int(id_line, "id", lineno),
                name=name_line,
                year=_parse_int(year_line, "year", lineno + 2),
                zip=_parse_int(zip_line, "zip", lineno + 3),
                friends=friends,
            )
        except ValidationError as exc:
            raise RecordFormatError(f"invalid user record: {exc}", line=lineno) from exc
        records.append(record)
    return records


def render_users(records: Iterable[UserRecord]) -> str:
    """Render records in the flat-file layout, friends ascending.

    Raises:
        RecordFormatError: A name contains a line break, so the output
            could not be parsed back.
    """
    items = list(records)
    lines = [str(len(items))]
    for index, record in enumerate(items):
        if not is_single_line(record.name):
            raise RecordFormatError(
                f"name of user {record.id} contains a line break: {record.name!r}",
                line=index * LINES_PER_USER + 3,
            )
        lines.extend(
            [
                str(record.id),
                record.name,
                str(record.year),
                str(record.zip),
                " ".join(str(f) for f in sorted(record.friends)),
            ]
        )
    return "\n".join(lines) + "\n"
