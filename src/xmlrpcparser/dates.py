# xmlrpcparser/dates.py
import re
from datetime import datetime, timedelta, timezone

from xmlrpcparser.errors import DateTimeFormatError

# Basic (19980717T14:08:55) and extended (1998-07-17T14:08:55) forms,
# optional fraction and UTC offset.
_ISO8601 = re.compile(
    r"""^(?P<year>\d{4})-?(?P<month>\d{2})-?(?P<day>\d{2})
        T(?P<hour>\d{2}):?(?P<minute>\d{2}):?(?P<second>\d{2})
        (?:[.,](?P<fraction>\d+))?
        (?P<tz>Z|[+-]\d{2}(?::?\d{2})?)?$""",
    re.VERBOSE | re.ASCII,
)


def _parse_offset(tz: str) -> timezone:
    if tz == "Z":
        return timezone.utc
    sign = -1 if tz[0] == "-" else 1
    digits = tz[1:].replace(":", "")
    hours, minutes = int(digits[:2]), int(digits[2:] or 0)
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def decode_iso8601(text: str) -> datetime:
    """
    Decode the text of a <dateTime.iso8601> element.

    Values without an offset come back naive, as XML-RPC leaves the
    timezone to the two peers.
    """
    match = _ISO8601.match(text.strip())
    if match is None:
        raise DateTimeFormatError(f"invalid dateTime.iso8601 value: {text!r}", data={"text": text})

    parts = match.groupdict()
    fraction = parts["fraction"] or ""
    microsecond = int((fraction + "000000")[:6])
    try:
        tzinfo = _parse_offset(parts["tz"]) if parts["tz"] else None
        return datetime(
            int(parts["year"]),
            int(parts["month"]),
            int(parts["day"]),
            int(parts["hour"]),
            int(parts["minute"]),
            int(parts["second"]),
            microsecond,
            tzinfo=tzinfo,
        )
    except ValueError as e:
        raise DateTimeFormatError(f"invalid dateTime.iso8601 value: {text!r} ({e})", data={"text": text})
