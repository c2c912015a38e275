from __future__ import annotations
from typing import Callable, Dict, Optional

from . import canon, exceptions
from .types import ContentType, Date, Field, FieldId, Number, Text, Unit


## Value grammar (raw strings, before conversion)
def is_digits(raw: str) -> bool:
    """True for a non-empty run of ASCII 0-9 only."""
    return raw.isascii() and raw.isdigit()


def _split_decimal(raw: str) -> tuple[str, Optional[str]]:
    """Split '123.45' into ('123', '45'); no point gives ('123', None)."""
    if raw.count(".") > 1:
        raise exceptions.FormatError(f"More than one decimal point in {raw!r}")
    if "." not in raw:
        return raw, None
    whole, frac = raw.split(".")
    return whole, frac


def _require_digits(raw: str, whole: str, frac: Optional[str]) -> None:
    exceptions.require(
        is_digits(whole) or (whole == "" and bool(frac)),
        f"Not a decimal number: {raw!r}",
    )
    exceptions.require(
        frac is None or frac == "" or is_digits(frac),
        f"Not a decimal number: {raw!r}",
    )


def check_voltage(raw: str) -> None:
    whole, frac = _split_decimal(raw)
    exceptions.require(frac is not None, f"Voltage needs a decimal point: {raw!r}")
    _require_digits(raw, whole, frac)
    exceptions.require(
        frac is not None and 1 <= len(frac) <= 2,
        f"Voltage needs 1 or 2 decimals: {raw!r}",
    )
    exceptions.require(len(raw) == 6, f"Voltage must be 6 characters: {raw!r}")


def check_current(raw: str) -> None:
    whole, frac = _split_decimal(raw)
    _require_digits(raw, whole, frac)
    if frac is None:
        exceptions.require(len(raw) == 2, f"Current must be 2 digits: {raw!r}")
        return
    exceptions.require(len(frac) <= 1, f"Current allows 1 decimal: {raw!r}")
    exceptions.require(len(raw) == 3, f"Current must be 3 characters: {raw!r}")


def check_power(raw: str) -> None:
    signed = raw[:1] in ("+", "-")
    body = raw[1:] if signed else raw
    whole, frac = _split_decimal(body)
    _require_digits(raw, whole, frac)
    exceptions.require(
        frac is None or len(frac) <= 3, f"Power allows 3 decimals: {raw!r}"
    )
    expected = 6 + (1 if signed else 0)
    exceptions.require(
        len(raw) == expected, f"Power must be {expected} characters: {raw!r}"
    )


def check_total(raw: str) -> None:
    whole, frac = _split_decimal(raw)
    _require_digits(raw, whole, frac)
    if frac is None:
        exceptions.require(len(raw) == 10, f"Total must be 10 digits: {raw!r}")
        return
    exceptions.require(len(frac) <= 10, f"Total allows 10 decimals: {raw!r}")
    exceptions.require(len(raw) == 11, f"Total must be 11 characters: {raw!r}")


def check_gas(raw: str) -> None:
    whole, frac = _split_decimal(raw)
    exceptions.require(frac is not None, f"Gas needs a decimal point: {raw!r}")
    _require_digits(raw, whole, frac)
    exceptions.require(
        frac is not None and len(frac) == 3, f"Gas needs 3 decimals: {raw!r}"
    )
    exceptions.require(len(raw) == 9, f"Gas must be 9 characters: {raw!r}")


def check_start(raw: str) -> None:
    exceptions.require(raw == canon.START_VALUE, f"Invalid start marker: {raw!r}")


def check_end(raw: str) -> None:
    exceptions.require(raw == canon.END_VALUE, f"Invalid end marker: {raw!r}")


def check_severity(raw: str) -> None:
    exceptions.require(raw in canon.SEVERITIES, f"Invalid severity: {raw!r}")


def check_message(raw: str) -> None:
    exceptions.require(
        len(raw) <= canon.MAX_MESSAGE_LEN,
        f"Event log message longer than {canon.MAX_MESSAGE_LEN} characters",
    )


def check_information_type(raw: str) -> None:
    exceptions.require(
        raw in canon.INFORMATION_TYPES, f"Invalid information type: {raw!r}"
    )


# Date grammar is checked while parsing (see fields.parse_date)
VALUE_GRAMMAR: Dict[ContentType, Optional[Callable[[str], None]]] = {
    ContentType.START: check_start,
    ContentType.DATE: None,
    ContentType.EVENTLOG_SEVERITY: check_severity,
    ContentType.EVENTLOG_MESSAGE: check_message,
    ContentType.EVENTLOG_DATE: None,
    ContentType.INFORMATION_TYPE: check_information_type,
    ContentType.VOLTAGE: check_voltage,
    ContentType.CURRENT: check_current,
    ContentType.POWER: check_power,
    ContentType.TOTAL_CONSUMED: check_total,
    ContentType.TOTAL_PRODUCED: check_total,
    ContentType.GAS_TOTAL_DELIVERED: check_gas,
    ContentType.END: check_end,
}


def check_value(content_type: ContentType, raw: str) -> None:
    """Validate the raw value string of a field against its type's grammar."""
    check = VALUE_GRAMMAR[content_type]
    if check is not None:
        check(raw)


## Field consistency
_ANY = "any"

# content type -> (major, minor, index rule); rule is _ANY, None or an exact index
_ID_RULES: Dict[ContentType, tuple[int, int, object]] = {
    ContentType.START: (1, 1, _ANY),
    ContentType.END: (1, 2, _ANY),
    ContentType.DATE: (2, 1, None),
    ContentType.EVENTLOG_SEVERITY: (3, 1, _ANY),
    ContentType.EVENTLOG_MESSAGE: (3, 2, _ANY),
    ContentType.EVENTLOG_DATE: (3, 3, _ANY),
    ContentType.INFORMATION_TYPE: (4, 1, None),
    ContentType.GAS_TOTAL_DELIVERED: (5, 2, None),
    ContentType.VOLTAGE: (7, 1, _ANY),
    ContentType.CURRENT: (7, 2, _ANY),
    ContentType.POWER: (7, 3, _ANY),
    ContentType.TOTAL_CONSUMED: (7, 4, 1),
    ContentType.TOTAL_PRODUCED: (7, 4, 2),
}

UNITS: Dict[ContentType, Optional[Unit]] = {
    ContentType.START: None,
    ContentType.DATE: None,
    ContentType.EVENTLOG_SEVERITY: None,
    ContentType.EVENTLOG_MESSAGE: None,
    ContentType.EVENTLOG_DATE: None,
    ContentType.INFORMATION_TYPE: None,
    ContentType.VOLTAGE: Unit.VOLT,
    ContentType.CURRENT: Unit.AMPERE,
    ContentType.POWER: Unit.KILOWATT,
    ContentType.TOTAL_CONSUMED: Unit.KILOWATT_HOUR,
    ContentType.TOTAL_PRODUCED: Unit.KILOWATT_HOUR,
    ContentType.GAS_TOTAL_DELIVERED: Unit.CUBIC_METER,
    ContentType.END: None,
}

VALUE_VARIANTS: Dict[ContentType, type] = {
    ContentType.START: Text,
    ContentType.DATE: Date,
    ContentType.EVENTLOG_SEVERITY: Text,
    ContentType.EVENTLOG_MESSAGE: Text,
    ContentType.EVENTLOG_DATE: Date,
    ContentType.INFORMATION_TYPE: Text,
    ContentType.VOLTAGE: Number,
    ContentType.CURRENT: Number,
    ContentType.POWER: Number,
    ContentType.TOTAL_CONSUMED: Number,
    ContentType.TOTAL_PRODUCED: Number,
    ContentType.GAS_TOTAL_DELIVERED: Number,
    ContentType.END: Text,
}


def is_id_consistent(content_type: ContentType, field_id: FieldId) -> bool:
    major, minor, rule = _ID_RULES[content_type]
    if (field_id.major, field_id.minor) != (major, minor):
        return False
    if rule is _ANY:
        return True
    return field_id.index == rule


def is_unit_consistent(content_type: ContentType, unit: Optional[Unit]) -> bool:
    return UNITS[content_type] == unit


def is_value_variant_consistent(content_type: ContentType, value: object) -> bool:
    return isinstance(value, VALUE_VARIANTS[content_type])


def assert_field(f: Field) -> None:
    """Raise FormatError unless id, unit and value variant all match the type."""
    if not is_id_consistent(f.content_type, f.id):
        raise exceptions.FormatError(
            f"Id {f.id} is not valid for {f.content_type.value}"
        )
    if not is_unit_consistent(f.content_type, f.unit):
        unit = f.unit.value if f.unit is not None else "no unit"
        raise exceptions.FormatError(
            f"Unit {unit} is not valid for {f.content_type.value}"
        )
    if not is_value_variant_consistent(f.content_type, f.value):
        raise exceptions.FormatError(
            f"Value {f.value!r} is not valid for {f.content_type.value}"
        )
