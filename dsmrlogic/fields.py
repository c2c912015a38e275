from __future__ import annotations
from typing import Dict, Optional, Tuple

from . import canon, validate
from .exceptions import FormatError, require
from .types import ContentType, Date, Field, FieldId, Number, Text, Unit, Value

# (major, minor) -> content type, plus the index some ids pin down
_IDS: Dict[Tuple[int, int], ContentType] = {
    (1, 1): ContentType.START,
    (1, 2): ContentType.END,
    (2, 1): ContentType.DATE,
    (3, 1): ContentType.EVENTLOG_SEVERITY,
    (3, 2): ContentType.EVENTLOG_MESSAGE,
    (3, 3): ContentType.EVENTLOG_DATE,
    (4, 1): ContentType.INFORMATION_TYPE,
    (5, 2): ContentType.GAS_TOTAL_DELIVERED,
    (7, 1): ContentType.VOLTAGE,
    (7, 2): ContentType.CURRENT,
    (7, 3): ContentType.POWER,
}
_INDEXED_IDS: Dict[FieldId, ContentType] = {
    FieldId(7, 4, 1): ContentType.TOTAL_CONSUMED,
    FieldId(7, 4, 2): ContentType.TOTAL_PRODUCED,
}
# Ids that must not carry an index
_UNINDEXED = {(2, 1), (4, 1), (5, 2)}

_UNITS: Dict[str, Unit] = {u.value.upper(): u for u in Unit}


def parse_id(raw: str) -> FieldId:
    """Parse 'major.minor[.index]' into a FieldId."""
    parts = raw.split(".")
    if not raw or len(parts) > 3:
        raise FormatError(f"Invalid id format: {raw!r}")
    if len(parts) < 2:
        raise FormatError(f"Id needs at least major and minor: {raw!r}")
    for p in parts:
        require(
            validate.is_digits(p), f"Id part is not an unsigned integer: {p!r}"
        )
    numbers = [int(p) for p in parts]
    return FieldId(numbers[0], numbers[1], numbers[2] if len(numbers) == 3 else None)


def determine_content_type(field_id: FieldId) -> ContentType:
    key = (field_id.major, field_id.minor)
    if field_id in _INDEXED_IDS:
        return _INDEXED_IDS[field_id]
    if key in _IDS and not (key in _UNINDEXED and field_id.index is not None):
        return _IDS[key]
    raise FormatError(f"Unknown id: {field_id}")


def parse_unit(raw: str) -> Unit:
    try:
        return _UNITS[raw.upper()]
    except KeyError:
        raise FormatError(f"Unknown unit: {raw!r}") from None


def _two_digits(raw: str, what: str) -> int:
    require(len(raw) == 2 and validate.is_digits(raw), f"Invalid {what}: {raw!r}")
    return int(raw)


def parse_date(raw: str) -> Date:
    """
    Parse 'YY-Mon-DD hh:mm:ss (X)' into a Date.

    Example: '23-Jul-05 15:26:41 (S)'. X is 'S' (daylight saving) or 'W'.
    Format errors, out-of-range fields and dates without an absolute time
    all raise FormatError.
    """
    parts = raw.split(" ")
    require(len(parts) == 3, f"Invalid date format: {raw!r}")
    day_part, time_part, dst_part = parts

    date_parts = day_part.split("-")
    require(len(date_parts) == 3, f"Invalid date part: {day_part!r}")
    yy, mon, dd = date_parts
    year = canon.YEAR_BASE + _two_digits(yy, "year")
    if mon not in canon.MONTHS:
        raise FormatError(f"Invalid month name: {mon!r}")
    month = canon.MONTHS[mon]
    day = _two_digits(dd, "day")

    time_parts = time_part.split(":")
    require(len(time_parts) == 3, f"Invalid time part: {time_part!r}")
    hour = _two_digits(time_parts[0], "hour")
    minute = _two_digits(time_parts[1], "minute")
    second = _two_digits(time_parts[2], "second")

    require(
        dst_part.startswith("(") and dst_part.endswith(")"),
        f"Invalid DST flag: {dst_part!r}",
    )
    flag = dst_part[1:-1]
    if flag not in canon.DST_FLAGS:
        raise FormatError(f"Invalid DST flag: {flag!r}")

    return Date(year, month, day, hour, minute, second, canon.DST_FLAGS[flag])


def _to_value(content_type: ContentType, raw: str) -> Value:
    if content_type in (ContentType.DATE, ContentType.EVENTLOG_DATE):
        return parse_date(raw)
    if validate.VALUE_VARIANTS[content_type] is Number:
        try:
            return Number(float(raw))
        except ValueError:
            raise FormatError(f"Invalid number: {raw!r}") from None
    return Text(raw)


def parse_field(line: str) -> Field:
    """
    Parse one field line '<major>.<minor>[.<index>]#(<value>[*<unit>])'.

    The raw value is checked against its content type's grammar before
    conversion, and the finished Field is checked again for id, unit and
    value consistency.
    """
    require("(" in line and ")" in line, f"Invalid line format: {line!r}")
    parts = line.split("#")
    require(len(parts) == 2, f"Invalid line format: {line!r}")
    id_part, value_part = parts

    field_id = parse_id(id_part)
    content_type = determine_content_type(field_id)

    require(
        value_part.startswith("(") and value_part.endswith(")"),
        f"Value must be parenthesised: {value_part!r}",
    )
    value_part = value_part[1:-1]

    unit: Optional[Unit] = None
    if "*" in value_part:
        value_parts = value_part.split("*")
        require(len(value_parts) == 2, f"Invalid value*unit format: {value_part!r}")
        value_part, unit = value_parts[0], parse_unit(value_parts[1])

    validate.check_value(content_type, value_part)

    f = Field(content_type, field_id, _to_value(content_type, value_part), unit)
    validate.assert_field(f)
    return f
