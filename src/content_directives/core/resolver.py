"""Resolve directives found in text to concrete instants."""

from datetime import datetime, timezone
from typing import Optional

from content_directives.core import grammar
from content_directives.core.entities import Directive
from content_directives.core.grammar import AbsoluteMatch, RelativeMatch
from content_directives.core.time_math import add_units, as_utc


def _now(now: Optional[datetime]) -> datetime:
    return as_utc(now) if now is not None else datetime.now(timezone.utc)


def format_instant(instant: datetime) -> str:
    """Render an instant as ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
    return as_utc(instant).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _truncate_to_millis(instant: datetime) -> datetime:
    return instant.replace(microsecond=instant.microsecond // 1000 * 1000)


def _offset(now: datetime, match: RelativeMatch) -> Optional[datetime]:
    """Instant ``match`` points at, or None when it falls outside the calendar."""
    try:
        return add_units(now, match.unit, match.number)
    except (OverflowError, ValueError):
        return None


def has_delete_mention(text: Optional[str]) -> bool:
    """True when ``@delete`` appears, even if the directive is incomplete."""
    return grammar.contains_delete_token(text)


def has_schedule_mention(text: Optional[str]) -> bool:
    """True when ``@schedule`` appears, even if the directive is incomplete."""
    return grammar.contains_schedule_token(text)


def resolve_delete(text: Optional[str], now: Optional[datetime] = None) -> Directive:
    """Find the deletion instant requested by ``@delete in N unit``.

    The text is returned unchanged. Absent or malformed directives resolve
    to no timestamp.
    """
    if not grammar.contains_delete_token(text):
        return Directive(text=text)

    match = grammar.match_delete(text)
    if not isinstance(match, RelativeMatch):
        return Directive(text=text)

    return Directive(text=text, timestamp=_offset(_now(now), match))


def has_delete_command(text: Optional[str], now: Optional[datetime] = None) -> bool:
    """True when ``text`` carries a complete delete directive."""
    return resolve_delete(text, now).found


def resolve_schedule(text: Optional[str], now: Optional[datetime] = None) -> Directive:
    """Find the publication instant requested by a ``@schedule`` directive.

    An absolute ``@schedule on <timestamp>`` wins and leaves the text as is.
    A relative ``@schedule in N unit`` is resolved against ``now`` and its
    phrase is rewritten to the absolute form, so storing the returned text
    pins the instant instead of re-resolving it on every read.
    """
    if not grammar.contains_schedule_token(text):
        return Directive(text=text)

    absolute = grammar.match_schedule_absolute(text)
    if isinstance(absolute, AbsoluteMatch):
        return Directive(text=text, timestamp=absolute.instant)

    relative = grammar.match_schedule_relative(text)
    if not isinstance(relative, RelativeMatch):
        return Directive(text=text)

    timestamp = _offset(_now(now), relative)
    if timestamp is None:
        return Directive(text=text)

    timestamp = _truncate_to_millis(timestamp)
    replaced = (
        text[:relative.start]
        + f"{grammar.SCHEDULE_TOKEN} on {format_instant(timestamp)}"
        + text[relative.end:]
    )
    return Directive(text=replaced, timestamp=timestamp)
