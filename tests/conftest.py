import pytest

HEADER_GAS = "/v12\\+g"


def _date(minute: int, hour: int = 15, second: int = 0) -> str:
    return f"23-Jul-05 {hour:02d}:{minute:02d}:{second:02d} (S)"


@pytest.fixture
def electricity_lines():
    """Factory for the field lines of one electricity telegram."""

    def make(
        minute=26,
        voltages=(241.7, 240.6, 241.92),
        currents=(1.0, 9.5, 0.5),
        consumed=11454892.0,
        produced=1245.0,
        events=(("H", "506f776572204661696c757265"),),
        start="1.1.0",
        end="1.2.0",
    ):
        lines = [f"{start}#(START)", f"2.1#({_date(minute)})"]
        for i, (severity, message) in enumerate(events, start=1):
            lines += [
                f"3.1.{i}#({severity})",
                f"3.2.{i}#({message})",
                f"3.3.{i}#(23-Jul-02 13:12:00 (S))",
            ]
        lines.append("4.1#(E)")
        lines += [f"7.1.{i}#({v:06.2f}*V)" for i, v in enumerate(voltages, start=1)]
        lines += [f"7.2.{i}#({c:03.1f}*A)" for i, c in enumerate(currents, start=1)]
        lines += ["7.3.1#(01.000*kW)", "7.3.2#(-05.010*kW)", "7.3.3#(02.500*kW)"]
        lines += [f"7.4.1#({consumed:011.1f}*kWh)", f"7.4.2#({produced:011.1f}*kWh)"]
        lines.append(f"{end}#(END)")
        return lines

    return make


@pytest.fixture
def gas_lines():
    """Factory for the field lines of one gas telegram."""

    def make(minute=26, gas=12345.123, start="1.1.0", end="1.2.0"):
        return [
            f"{start}#(START)",
            f"2.1#({_date(minute)})",
            "4.1#(G)",
            f"5.2#({gas:09.3f}*m3)",
            f"{end}#(END)",
        ]

    return make


@pytest.fixture
def document():
    """Join a header and telegram line blocks into one document."""

    def make(header, *blocks):
        lines = [header]
        for block in blocks:
            lines += list(block)
            lines.append("")
        return "\n".join(lines)

    return make


@pytest.fixture
def two_packets(document, electricity_lines, gas_lines):
    return document(HEADER_GAS, electricity_lines(minute=26), gas_lines(minute=27))
