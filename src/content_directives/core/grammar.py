"""Scanner for inline content directives.

Recognized forms (case-insensitive)::

    @delete in 3 days
    @schedule in 10 minutes
    @schedule on 2024-02-18T00:37:09.123+04:00
    @schedule at 2024-02-18T00:37:09+0000
    @schedule for 2024-02-18T00:37Z

A directive only counts when the ``@`` is at the start of the text or follows
a character that is neither a word character nor a backtick, so quoted
directives like ```@delete``` are left alone.

Every matcher returns one of ``NoMatch`` (token absent), ``Malformed`` (token
present but no occurrence parses) or a match object. Only the first
occurrence that parses is reported.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Union

from content_directives.core.entities import TimeUnit

DELETE_TOKEN = "@delete"
SCHEDULE_TOKEN = "@schedule"

ABSOLUTE_KEYWORDS = ("on", "at", "for")

_UNIT_NAMES = tuple(unit.value for unit in TimeUnit)


@dataclass(frozen=True)
class NoMatch:
    """The directive token does not appear in the text."""


@dataclass(frozen=True)
class Malformed:
    """The token appears but no occurrence is a complete directive."""

    reason: str


@dataclass(frozen=True)
class RelativeMatch:
    """``<token> in <number> <unit>``; ``start``/``end`` delimit the phrase."""

    number: int
    unit: TimeUnit
    start: int
    end: int


@dataclass(frozen=True)
class AbsoluteMatch:
    """``@schedule on <timestamp>`` with the timestamp already parsed."""

    timestamp: str
    instant: datetime
    start: int
    end: int


MatchResult = Union[NoMatch, Malformed, RelativeMatch, AbsoluteMatch]


class _Scanner:
    """Cursor over a string; every ``take_*`` method returns None on failure."""

    def __init__(self, text: str, pos: int = 0) -> None:
        self.text = text
        self.pos = pos

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def take_literal(self, literal: str) -> Optional[str]:
        end = self.pos + len(literal)
        chunk = self.text[self.pos:end]
        if chunk.lower() != literal.lower():
            return None
        self.pos = end
        return chunk

    def take_one_of(self, words: tuple[str, ...]) -> Optional[str]:
        for word in words:
            if self.take_literal(word) is not None:
                return word
        return None

    def take_whitespace(self) -> bool:
        start = self.pos
        while self.peek() and self.peek().isspace():
            self.pos += 1
        return self.pos > start

    def take_digits(self, min_len: int = 1, max_len: Optional[int] = None) -> Optional[str]:
        start = self.pos
        end = start
        while end < len(self.text) and self.text[end].isdigit() and self.text[end].isascii():
            if max_len is not None and end - start == max_len:
                break
            end += 1
        if end - start < min_len:
            return None
        self.pos = end
        return self.text[start:end]

    def take_bounded(self, maximum: int, min_len: int = 1, max_len: int = 2) -> Optional[int]:
        """Take a number of up to ``max_len`` digits, backing off if it exceeds ``maximum``."""
        start = self.pos
        digits = self.take_digits(min_len, max_len)
        while digits is not None:
            if int(digits) <= maximum:
                return int(digits)
            if len(digits) <= min_len:
                break
            digits = digits[:-1]
            self.pos = start + len(digits)
        self.pos = start
        return None


def _is_boundary(text: str, index: int) -> bool:
    if index == 0:
        return True
    previous = text[index - 1]
    if previous == "`":
        return False
    return not (previous.isascii() and (previous.isalnum() or previous == "_"))


def _token_positions(text: str, token: str) -> list[int]:
    positions = []
    index = text.find("@")
    while index != -1:
        if text[index:index + len(token)].lower() == token and _is_boundary(text, index):
            positions.append(index)
        index = text.find("@", index + 1)
    return positions


def _contains_token(text: Optional[str], token: str) -> bool:
    return bool(text) and bool(_token_positions(text, token))


def contains_delete_token(text: Optional[str]) -> bool:
    """Cheap check for a ``@delete`` mention, complete or not."""
    return _contains_token(text, DELETE_TOKEN)


def contains_schedule_token(text: Optional[str]) -> bool:
    """Cheap check for a ``@schedule`` mention, complete or not."""
    return _contains_token(text, SCHEDULE_TOKEN)


def _scan_relative(text: str, start: int, token: str) -> Optional[RelativeMatch]:
    scanner = _Scanner(text, start)
    if scanner.take_literal(token) is None or not scanner.take_whitespace():
        return None
    if scanner.take_literal("in") is None or not scanner.take_whitespace():
        return None
    number = scanner.take_digits()
    if number is None or not scanner.take_whitespace():
        return None
    unit = scanner.take_one_of(_UNIT_NAMES)
    if unit is None:
        return None
    scanner.take_literal("s")
    try:
        value = int(number)
    except ValueError:
        # Longer than the interpreter will convert
        return None
    return RelativeMatch(number=value, unit=TimeUnit(unit), start=start, end=scanner.pos)


def _scan_offset(scanner: _Scanner) -> Optional[timezone]:
    if scanner.take_literal("z") is not None:
        return timezone.utc

    sign = scanner.peek()
    if sign not in ("+", "-"):
        return None
    scanner.pos += 1
    hours = scanner.take_bounded(23)
    if hours is None:
        return None
    scanner.take_literal(":")
    minutes = scanner.take_bounded(59)
    if minutes is None:
        return None
    offset = timedelta(hours=hours, minutes=minutes)
    return timezone(-offset if sign == "-" else offset)


def _scan_timestamp(scanner: _Scanner) -> Optional[datetime]:
    year = scanner.take_digits(4, 4)
    if year is None or scanner.take_literal("-") is None:
        return None
    month = scanner.take_digits(2, 2)
    if month is None or scanner.take_literal("-") is None:
        return None
    day = scanner.take_digits(2, 2)
    if day is None or scanner.take_literal("t") is None:
        return None
    if not (1 <= int(month) <= 12 and 1 <= int(day) <= 31):
        return None

    hour = scanner.take_bounded(23)
    if hour is None or scanner.take_literal(":") is None:
        return None
    minute = scanner.take_bounded(59)
    if minute is None:
        return None

    second = 0
    microsecond = 0
    checkpoint = scanner.pos
    if scanner.take_literal(":") is not None:
        parsed_second = scanner.take_bounded(59)
        if parsed_second is None:
            scanner.pos = checkpoint
        else:
            second = parsed_second
            fraction_start = scanner.pos
            if scanner.take_literal(".") is not None:
                fraction = scanner.take_digits(min_len=0) or ""
                microsecond = int(fraction[:6].ljust(6, "0"))
            else:
                scanner.pos = fraction_start

    tz = _scan_offset(scanner)
    if tz is None:
        return None

    try:
        local = datetime(int(year), int(month), int(day), hour, minute, second, microsecond, tzinfo=tz)
        return local.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        # Impossible calendar date such as 2024-02-31, or one the offset pushes off the calendar
        return None


def _scan_absolute(text: str, start: int) -> Optional[AbsoluteMatch]:
    scanner = _Scanner(text, start)
    if scanner.take_literal(SCHEDULE_TOKEN) is None or not scanner.take_whitespace():
        return None
    if scanner.take_one_of(ABSOLUTE_KEYWORDS) is None or not scanner.take_whitespace():
        return None
    timestamp_start = scanner.pos
    instant = _scan_timestamp(scanner)
    if instant is None:
        return None
    return AbsoluteMatch(
        timestamp=text[timestamp_start:scanner.pos],
        instant=instant,
        start=start,
        end=scanner.pos,
    )


def _first_match(
    text: Optional[str],
    token: str,
    scan: Callable[[str, int], Optional[Union[RelativeMatch, AbsoluteMatch]]],
    expected: str,
) -> MatchResult:
    if not text:
        return NoMatch()
    positions = _token_positions(text, token)
    if not positions:
        return NoMatch()
    for position in positions:
        match = scan(text, position)
        if match is not None:
            return match
    return Malformed(reason=f"{token} is not followed by {expected}")


def match_delete(text: Optional[str]) -> MatchResult:
    """Match ``@delete in <number> <unit>``."""
    return _first_match(
        text,
        DELETE_TOKEN,
        lambda value, pos: _scan_relative(value, pos, DELETE_TOKEN),
        "'in <number> <unit>'",
    )


def match_schedule_relative(text: Optional[str]) -> MatchResult:
    """Match ``@schedule in <number> <unit>``."""
    return _first_match(
        text,
        SCHEDULE_TOKEN,
        lambda value, pos: _scan_relative(value, pos, SCHEDULE_TOKEN),
        "'in <number> <unit>'",
    )


def match_schedule_absolute(text: Optional[str]) -> MatchResult:
    """Match ``@schedule on|at|for <timestamp>``."""
    return _first_match(text, SCHEDULE_TOKEN, _scan_absolute, "'on <timestamp>'")


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse a directive timestamp on its own; returns None if it is not one."""
    scanner = _Scanner(value.strip())
    instant = _scan_timestamp(scanner)
    if instant is None or scanner.pos != len(scanner.text):
        return None
    return instant
