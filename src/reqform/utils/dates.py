"""utils/dates.py

Date pattern formatting using the common ``yyyy-MM-dd'T'HH:mm:ss`` token syntax.

Patterns are made of letter runs (``yyyy``, ``MM``, ``EEEE``...) whose letter
selects a field and whose length selects its width or form. Text between
single quotes is copied verbatim and ``''`` produces a single quote. Any other
ASCII letter is reserved and rejected.
"""

import functools
from datetime import datetime, timedelta
from typing import List, Tuple, Union

from reqform.exceptions import DateFormatError

__all__ = ["format_date", "compile_pattern"]

_MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
_WEEKDAYS = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

Token = Union[str, Tuple[str, int]]


@functools.lru_cache(maxsize=64)
def compile_pattern(pattern: str) -> Tuple[Token, ...]:
    """
    Split a date pattern into literal strings and ``(letter, count)`` tokens.

    Args:
        pattern: Date pattern such as ``yyyy-MM-dd``.

    Returns:
        Tuple of tokens in pattern order.

    Raises:
        DateFormatError: If a quoted literal is not terminated.
    """
    tokens: List[Token] = []
    i = 0
    length = len(pattern)
    while i < length:
        char = pattern[i]
        if char == "'":
            if i + 1 < length and pattern[i + 1] == "'":
                tokens.append("'")
                i += 2
                continue
            literal = []
            i += 1
            while True:
                if i >= length:
                    raise DateFormatError(f"Unterminated quote in pattern {pattern!r}")
                if pattern[i] == "'":
                    if i + 1 < length and pattern[i + 1] == "'":
                        literal.append("'")
                        i += 2
                        continue
                    i += 1
                    break
                literal.append(pattern[i])
                i += 1
            tokens.append("".join(literal))
        elif char.isascii() and char.isalpha():
            start = i
            while i < length and pattern[i] == char:
                i += 1
            tokens.append((char, i - start))
        else:
            tokens.append(char)
            i += 1
    return tuple(tokens)


def _pad(value: int, count: int) -> str:
    return f"{value:0{count}d}"


def _offset(value: datetime, count: int, *, utc_letter: bool, gmt: bool = False) -> str:
    delta = value.utcoffset() or timedelta(0)
    total = int(delta.total_seconds()) // 60
    if total == 0 and utc_letter:
        return "Z"
    sign = "-" if total < 0 else "+"
    hours, minutes = divmod(abs(total), 60)
    if gmt:
        return "GMT" if total == 0 else f"GMT{sign}{hours:02d}:{minutes:02d}"
    if count == 1:
        return f"{sign}{hours:02d}" + (f"{minutes:02d}" if minutes else "")
    if count in (3, 5):
        return f"{sign}{hours:02d}:{minutes:02d}"
    return f"{sign}{hours:02d}{minutes:02d}"


# pylint: disable=too-many-return-statements,too-many-branches
def _render(value: datetime, letter: str, count: int) -> str:
    if letter == "G":
        return {4: "Anno Domini", 5: "A"}.get(count, "AD")
    if letter == "y":
        if count == 2:
            return _pad(value.year % 100, 2)
        return _pad(value.year, count)
    if letter == "Y":
        year = value.isocalendar()[0]
        return _pad(year % 100, 2) if count == 2 else _pad(year, count)
    if letter in ("M", "L"):
        if count <= 2:
            return _pad(value.month, count)
        name = _MONTHS[value.month - 1]
        return {3: name[:3], 4: name}.get(count, name[0])
    if letter == "d":
        return _pad(value.day, count)
    if letter == "D":
        return _pad(value.timetuple().tm_yday, count)
    if letter == "w":
        return _pad(value.isocalendar()[1], count)
    if letter == "E":
        name = _WEEKDAYS[value.weekday()]
        return {4: name, 5: name[0], 6: name[:2]}.get(count, name[:3])
    if letter == "a":
        return "AM" if value.hour < 12 else "PM"
    if letter == "H":
        return _pad(value.hour, count)
    if letter == "k":
        return _pad(value.hour or 24, count)
    if letter == "K":
        return _pad(value.hour % 12, count)
    if letter == "h":
        return _pad(value.hour % 12 or 12, count)
    if letter == "m":
        return _pad(value.minute, count)
    if letter == "s":
        return _pad(value.second, count)
    if letter == "S":
        return f"{value.microsecond:06d}"[:count].ljust(count, "0")
    if letter == "Z":
        if count == 4:
            return _offset(value, count, utc_letter=False, gmt=True)
        if count == 5:
            return _offset(value, count, utc_letter=True)
        return _offset(value, 2, utc_letter=False)
    if letter == "X":
        return _offset(value, count, utc_letter=True)
    if letter == "x":
        return _offset(value, count, utc_letter=False)
    if letter == "z":
        name = value.tzname()
        return name if name else _offset(value, 4, utc_letter=False, gmt=True)
    raise DateFormatError(f"Unsupported pattern letter {letter!r}")


def format_date(value: datetime, pattern: str) -> str:
    """
    Format a datetime with a date pattern.

    The datetime is rendered as-is; convert it to the target timezone first.

    Args:
        value: Datetime to render.
        pattern: Date pattern such as ``yyyy-MM-dd``.

    Returns:
        Formatted string.

    Raises:
        DateFormatError: If the pattern is invalid.
    """
    parts = []
    for token in compile_pattern(pattern):
        if isinstance(token, str):
            parts.append(token)
        else:
            parts.append(_render(value, *token))
    return "".join(parts)
