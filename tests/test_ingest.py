"""Document parsing: header, frame stack and telegram assembly."""

import io

import pytest

from dsmrlogic import ingest
from dsmrlogic.assemble import TelegramAssembler, build_telegram
from dsmrlogic.exceptions import (
    FormatError,
    IncompleteTelegramError,
    IoFailure,
    UnsupportedExtensionError,
)
from dsmrlogic.fields import parse_field
from dsmrlogic.types import Electricity, Gas, ParserConfig


def test_parse_single_electricity_telegram(document, electricity_lines):
    telegrams = ingest.parse(document("/v10\\", electricity_lines()))
    assert len(telegrams) == 1
    t = telegrams[0]
    assert isinstance(t.data, Electricity)
    assert [f.number for f in t.data.voltages] == [241.7, 240.6, 241.92]
    assert t.data.total_consumed.number == 11454892.0
    assert t.base.information_type.text == "E"
    assert list(t.base.eventlog_messages) == [1]
    assert t.timestamp == 1688563560


def test_parse_two_packets(two_packets):
    config, telegrams = ingest.parse_with_config(two_packets)
    assert config.gas_enabled and not config.recursive_enabled
    # reversed completion order: the gas telegram closed last
    assert isinstance(telegrams[0].data, Gas)
    assert isinstance(telegrams[1].data, Electricity)
    assert telegrams[0].data.total_gas_delivered.number == 12345.123


def test_parse_empty_input():
    with pytest.raises(FormatError, match="empty input"):
        ingest.parse("")


@pytest.mark.parametrize("separator", ["\x0b", "\x0c", "\x1c", "\x85", "\u2028"])
def test_parse_only_splits_on_newline(document, electricity_lines, separator):
    lines = electricity_lines()
    lines[0] += separator
    with pytest.raises(FormatError, match="Line 2"):
        ingest.parse(document("/v10\\", lines))


def test_parse_invalid_header(electricity_lines):
    text = "\n".join(["/v13\\", *electricity_lines()])
    with pytest.raises(FormatError):
        ingest.parse(text)


def test_parse_header_only_yields_no_telegrams():
    assert ingest.parse("/v12\\\n\n") == []


def test_malformed_line_aborts_whole_parse(document, electricity_lines):
    good = electricity_lines(minute=1)
    bad = electricity_lines(minute=2)
    bad[6] = "7.1.1#(12.345*V)"
    with pytest.raises(FormatError, match="Line"):
        ingest.parse(document("/v10\\", good, bad))


def test_only_two_voltages_is_incomplete(document, electricity_lines):
    lines = [l for l in electricity_lines() if not l.startswith("7.1.3")]
    with pytest.raises(IncompleteTelegramError):
        ingest.parse(document("/v10\\", lines))


def test_missing_date_is_incomplete(document, electricity_lines):
    lines = [l for l in electricity_lines() if not l.startswith("2.1")]
    with pytest.raises(IncompleteTelegramError):
        ingest.parse(document("/v10\\", lines))


def test_unclosed_telegram_is_incomplete(electricity_lines):
    text = "\n".join(["/v10\\", *electricity_lines()[:-1]])
    with pytest.raises(IncompleteTelegramError):
        ingest.parse(text)


def test_field_outside_telegram(electricity_lines):
    text = "\n".join(["/v10\\", "4.1#(E)", *electricity_lines()])
    with pytest.raises(FormatError):
        ingest.parse(text)


def test_end_without_start():
    with pytest.raises(FormatError):
        ingest.parse("/v10\\\n1.2.0#(END)")


def test_gas_needs_gas_extension(document, gas_lines):
    with pytest.raises(UnsupportedExtensionError):
        ingest.parse(document("/v12\\", gas_lines()))


def test_gas_information_type_needs_gas_extension(document, electricity_lines):
    lines = [l.replace("4.1#(E)", "4.1#(G)") for l in electricity_lines()]
    with pytest.raises(UnsupportedExtensionError):
        ingest.parse(document("/v12\\+r", lines))


def test_nesting_needs_recursive_extension(document, electricity_lines, gas_lines):
    outer = electricity_lines()
    inner = gas_lines(start="1.1.1", end="1.2.1")
    nested = outer[:1] + inner + outer[1:]
    with pytest.raises(UnsupportedExtensionError):
        ingest.parse(document("/v12\\+g", nested))


def test_nested_telegrams_with_recursive_extension(
    document, electricity_lines, gas_lines
):
    outer = electricity_lines(minute=10)
    inner = gas_lines(minute=11, start="1.1.1", end="1.2.1")
    nested = outer[:2] + inner + outer[2:]
    telegrams = ingest.parse(document("/v12\\+gr", nested))
    # inner completes first, then the outer; result is reversed
    assert [type(t.data) for t in telegrams] == [Electricity, Gas]


def test_both_gas_and_electricity_is_rejected(document, electricity_lines):
    lines = electricity_lines()
    lines.insert(-1, "5.2#(12345.123*m3)")
    with pytest.raises(IncompleteTelegramError):
        ingest.parse(document("/v12\\+g", lines))


def test_duplicate_event_id_is_rejected(document, electricity_lines):
    lines = electricity_lines()
    lines.insert(2, "3.1.1#(L)")
    with pytest.raises(FormatError):
        ingest.parse(document("/v10\\", lines))


def test_eventlog_without_index_is_rejected(document, electricity_lines):
    lines = electricity_lines(events=())
    lines.insert(2, "3.1#(H)")
    with pytest.raises(FormatError):
        ingest.parse(document("/v10\\", lines))


def test_blank_and_crlf_lines_are_skipped(electricity_lines):
    text = "\r\n".join(["/v10\\", "", *electricity_lines(), "   ", ""])
    assert len(ingest.parse(text)) == 1


def test_build_telegram_keeps_first_three_phases(electricity_lines):
    lines = electricity_lines()
    lines.insert(-1, "7.1.4#(999.00*V)")
    t = build_telegram([parse_field(l) for l in lines])
    assert [f.id.index for f in t.data.voltages] == [1, 2, 3]


def test_assembler_tracks_depth(gas_lines):
    asm = TelegramAssembler(
        ParserConfig(version=(1, 2), gas_enabled=True, recursive_enabled=True)
    )
    asm.feed(parse_field("1.1.0#(START)"))
    asm.feed(parse_field("1.1.1#(START)"))
    assert asm.depth == 2
    with pytest.raises(IncompleteTelegramError):
        asm.finish()


def test_from_stream_decodes_lossily():
    text = ingest.from_stream(io.BytesIO(b"/v10\\\n\xff"))
    assert text.startswith("/v10\\")
    assert "\ufffd" in text


def test_from_file_missing(tmp_path):
    with pytest.raises(IoFailure):
        ingest.from_file(tmp_path / "missing.dsmr")


def test_from_file_roundtrip(tmp_path, two_packets):
    path = tmp_path / "two_packets.dsmr"
    path.write_text(two_packets, encoding="utf-8")
    assert len(ingest.parse(ingest.read_input(path))) == 2
