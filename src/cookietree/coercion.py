"""Value coercion for cookie attributes.

Pure functions that turn loosely-typed configuration input into the
canonical values handed to the host:

- expiry -> absolute UNIX timestamp (``0`` for a session cookie)
- path -> string, ``/`` when empty
- domain -> non-blank string
- secure / http-only -> bool

Each attribute has an ``is_valid_*`` check, used by the injector setters
to fail fast, and a ``coerce_*`` function applied when the value is read.
Free-form date strings are parsed with ``dateutil``.
"""

import re
import time
from datetime import date, datetime
from datetime import time as dt_time
from typing import Any

from dateutil import parser as date_parser
from dateutil.relativedelta import FR, MO, SA, SU, TH, TU, WE, relativedelta

_NUMERIC = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")
_EPOCH = re.compile(r"^\s*@([+-]?\d+)\s*$")

_UNIT = r"(sec|second|min|minute|hour|day|week|fortnight|month|year)"
_KEYWORD = re.compile(r"(now|today|midnight|noon|tomorrow|yesterday)\b\s*")
_WEEKDAY = re.compile(
    r"(?:(next|last|this)\s+)?"
    r"(monday|mon|tuesday|tues|tue|wednesday|wed|thursday|thurs|thu|friday|fri"
    r"|saturday|sat|sunday|sun)\b\s*"
)
_TERM = re.compile(r"([+-]?)\s*(\d+)\s*" + _UNIT + r"s?\b\s*")
_STEP = re.compile(r"(next|last)\s+" + _UNIT + r"\b\s*")

_UNITS: dict[str, str] = {
    "sec": "seconds",
    "second": "seconds",
    "min": "minutes",
    "minute": "minutes",
    "hour": "hours",
    "day": "days",
    "week": "weeks",
    "month": "months",
    "year": "years",
}

_WEEKDAYS = {"mon": MO, "tue": TU, "wed": WE, "thu": TH, "fri": FR, "sat": SA, "sun": SU}

_FALSE_STRINGS = frozenset({"", "0", "false"})


def _now(now: float | None) -> int:
    return int(time.time() if now is None else now)


# -- Shape checks --


def is_empty(value: Any) -> bool:
    """Whether *value* counts as "nothing given".

    ``None``, ``False``, zero, and blank or ``"0"`` strings are empty.
    """
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value.strip() in ("", "0")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    return False


def is_numeric(value: Any) -> bool:
    """Numbers and numeric strings; booleans are not numbers here."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    return isinstance(value, str) and _NUMERIC.match(value) is not None


def is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float, bool))


# -- Date/time parsing --


def to_timestamp(value: date) -> int:
    """Epoch seconds of a ``datetime`` or ``date``.

    Naive values are read as local time; a bare ``date`` means midnight.
    """
    if not isinstance(value, datetime):
        value = datetime.combine(value, dt_time())
    return int(value.timestamp())


def parse_epoch(value: str) -> int | None:
    """``"@1000"`` -> ``1000``; None for anything else."""
    match = _EPOCH.match(value)
    return int(match.group(1)) if match else None


def _unit_delta(unit: str, amount: int) -> relativedelta:
    if unit == "fortnight":
        return relativedelta(weeks=2 * amount)
    return relativedelta(**{_UNITS[unit]: amount})


def _apply_keyword(moment: datetime, keyword: str) -> datetime:
    midnight = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    if keyword == "now":
        return moment
    if keyword == "noon":
        return midnight.replace(hour=12)
    if keyword == "tomorrow":
        return midnight + relativedelta(days=1)
    if keyword == "yesterday":
        return midnight - relativedelta(days=1)
    return midnight


def _apply_weekday(moment: datetime, which: str | None, name: str) -> datetime:
    day = _WEEKDAYS[name[:3]]
    midnight = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    if which == "next":
        return midnight + relativedelta(days=1, weekday=day(+1))
    if which == "last":
        return midnight + relativedelta(days=-1, weekday=day(-1))
    return midnight + relativedelta(weekday=day(+1))


def parse_relative(value: str, *, now: float | None = None) -> int | None:
    """Relative date/time text -> absolute timestamp, or None.

    Understands, in this order and all optional:

    - keywords: ``now``, ``today``, ``midnight``, ``noon``, ``tomorrow``,
      ``yesterday`` (may be chained: ``tomorrow noon``)
    - a weekday: ``monday``, ``next fri``, ``last sunday`` (at midnight)
    - unit terms: ``+1 day 2 hours``, ``-3 weeks``, ``next month``
    - a trailing ``ago`` negating the unit terms: ``1 hour ago``
    """
    text = value.strip().lower()
    sign = 1
    if text.endswith(" ago"):
        text = text[:-4].rstrip()
        sign = -1

    moment = datetime.fromtimestamp(_now(now))
    pos = 0
    matched = False

    while match := _KEYWORD.match(text, pos):
        moment = _apply_keyword(moment, match.group(1))
        pos = match.end()
        matched = True

    if match := _WEEKDAY.match(text, pos):
        moment = _apply_weekday(moment, match.group(1), match.group(2))
        pos = match.end()
        matched = True

    delta = relativedelta()
    while pos < len(text):
        if match := _TERM.match(text, pos):
            amount = int(match.group(2)) * (-1 if match.group(1) == "-" else 1)
            delta += _unit_delta(match.group(3), amount)
        elif match := _STEP.match(text, pos):
            delta += _unit_delta(match.group(2), 1 if match.group(1) == "next" else -1)
        else:
            return None
        pos = match.end()
        matched = True

    if not matched:
        return None
    return to_timestamp(moment + delta * sign)


def parse_datetime(value: str, *, now: float | None = None) -> int | None:
    """Free-form date/time text -> timestamp, or None if unparseable."""
    epoch = parse_epoch(value)
    if epoch is not None:
        return epoch
    relative = parse_relative(value, now=now)
    if relative is not None:
        return relative
    if value.lstrip().startswith("@"):
        return None
    try:
        return to_timestamp(date_parser.parse(value))
    except (ValueError, OverflowError):
        return None


# -- Expiry --


def is_valid_expiry(value: Any) -> bool:
    if is_empty(value) or is_numeric(value) or isinstance(value, date):
        return True
    if isinstance(value, str):
        return parse_datetime(value) is not None
    return False


def coerce_expiry(value: Any, *, now: float | None = None) -> int:
    """Resolve an expiry setting to an absolute timestamp.

    - empty -> ``0`` (session cookie)
    - ``datetime`` / ``date`` -> its timestamp
    - number or numeric string -> now + value seconds
    - ``"@<int>"`` -> exactly that timestamp
    - other strings -> parsed as a date/time expression
    """
    if is_empty(value):
        return 0
    if isinstance(value, date):
        return to_timestamp(value)
    if is_numeric(value):
        return _now(now) + int(float(value))
    if isinstance(value, str):
        parsed = parse_datetime(value, now=now)
        if parsed is not None:
            return parsed
    msg = f"Cannot interpret {value!r} as a cookie expiry"
    raise ValueError(msg)


# -- Path / domain --


def is_valid_path(value: Any) -> bool:
    return isinstance(value, str) or is_empty(value)


def coerce_path(value: Any) -> str:
    if is_empty(value) or (isinstance(value, str) and not value.strip()):
        return "/"
    return str(value)


def is_valid_domain(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def default_domain(server_name: str | None) -> str:
    """The server name when it looks like a real domain, else ``""``.

    Browsers reject a ``Domain`` attribute without a dot
    (``localhost``, bare host names).
    """
    if server_name and "." in server_name:
        return server_name
    return ""


# -- Flags --


def is_valid_flag(value: Any) -> bool:
    return value is None or is_scalar(value)


def coerce_flag(value: Any) -> bool:
    """``"true"`` -> True; ``"false"``/``"0"``/empty -> False; else truthiness."""
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)
