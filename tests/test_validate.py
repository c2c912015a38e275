"""Field consistency checks and raw value grammar."""

import pytest

from dsmrlogic import validate
from dsmrlogic.exceptions import FormatError
from dsmrlogic.types import ContentType, Date, Field, FieldId, Number, Text, Unit


def test_id_consistency():
    assert validate.is_id_consistent(ContentType.TOTAL_CONSUMED, FieldId(7, 4, 1))
    assert not validate.is_id_consistent(ContentType.TOTAL_CONSUMED, FieldId(7, 4, 2))
    assert validate.is_id_consistent(ContentType.DATE, FieldId(2, 1))
    assert not validate.is_id_consistent(ContentType.DATE, FieldId(2, 1, 0))
    assert not validate.is_id_consistent(ContentType.VOLTAGE, FieldId(7, 2, 1))


def test_unit_consistency():
    assert validate.is_unit_consistent(ContentType.VOLTAGE, Unit.VOLT)
    assert not validate.is_unit_consistent(ContentType.VOLTAGE, None)
    assert validate.is_unit_consistent(ContentType.START, None)
    assert not validate.is_unit_consistent(ContentType.END, Unit.VOLT)


def test_value_variant_consistency():
    date = Date(2023, 7, 5, 15, 26, 41, True)
    assert validate.is_value_variant_consistent(ContentType.EVENTLOG_DATE, date)
    assert not validate.is_value_variant_consistent(ContentType.DATE, Text("x"))
    assert validate.is_value_variant_consistent(ContentType.POWER, Number(1.0))
    assert not validate.is_value_variant_consistent(ContentType.POWER, None)


def test_assert_field_rejects_each_inconsistency():
    good = Field(ContentType.CURRENT, FieldId(7, 2, 1), Number(1.0), Unit.AMPERE)
    validate.assert_field(good)

    with pytest.raises(FormatError, match="Id"):
        validate.assert_field(
            Field(ContentType.CURRENT, FieldId(7, 3, 1), Number(1.0), Unit.AMPERE)
        )
    with pytest.raises(FormatError, match="Unit"):
        validate.assert_field(
            Field(ContentType.CURRENT, FieldId(7, 2, 1), Number(1.0), Unit.VOLT)
        )
    with pytest.raises(FormatError, match="Value"):
        validate.assert_field(
            Field(ContentType.CURRENT, FieldId(7, 2, 1), Text("1.0"), Unit.AMPERE)
        )


@pytest.mark.parametrize(
    "content_type, raw",
    [
        (ContentType.VOLTAGE, "230.00"),
        (ContentType.VOLTAGE, "2300.0"),
        (ContentType.CURRENT, "99"),
        (ContentType.CURRENT, "9.9"),
        (ContentType.POWER, "000001"),
        (ContentType.POWER, "-0001.5"),
        (ContentType.TOTAL_PRODUCED, "0000000000"),
        (ContentType.TOTAL_PRODUCED, ".0000000000"),
        (ContentType.GAS_TOTAL_DELIVERED, "00000.001"),
        (ContentType.INFORMATION_TYPE, "G"),
        (ContentType.EVENTLOG_MESSAGE, ""),
    ],
)
def test_check_value_accepts(content_type, raw):
    validate.check_value(content_type, raw)


@pytest.mark.parametrize(
    "content_type, raw",
    [
        (ContentType.VOLTAGE, "12.345"),
        (ContentType.VOLTAGE, "1.2.30"),
        (ContentType.CURRENT, "100"),
        (ContentType.POWER, "++0001.5"),
        (ContentType.TOTAL_CONSUMED, "000000000"),
        (ContentType.GAS_TOTAL_DELIVERED, "0000.0010"),
        (ContentType.START, "start"),
        (ContentType.CURRENT, "\u0661\u0660"),
        (ContentType.GAS_TOTAL_DELIVERED, "12345.\u00b923"),
    ],
)
def test_check_value_rejects(content_type, raw):
    with pytest.raises(FormatError):
        validate.check_value(content_type, raw)
