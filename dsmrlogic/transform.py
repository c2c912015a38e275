from __future__ import annotations
import logging
from dataclasses import asdict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from . import canon
from .config import AggregationConfig, default_config
from .exceptions import EncodingError, FormatError, MissingCorrelationError
from .types import (
    CurrentPoint,
    Electricity,
    EnergyPoint,
    EventLogs,
    Field,
    Gas,
    GasPoint,
    Telegram,
    VoltagePoint,
)

logger = logging.getLogger(__name__)

Phases = Tuple[float, float, float]


def sort_telegrams(telegrams: Iterable[Telegram]) -> List[Telegram]:
    """Stable chronological sort by each telegram's date."""
    return sorted(telegrams, key=lambda t: t.timestamp)


def _phases(fields: Sequence[Field]) -> Phases:
    return (fields[0].number, fields[1].number, fields[2].number)


def _max_merge(telegrams: Sequence[Telegram], attr: str) -> List[Tuple[int, Phases]]:
    """
    Per-phase readings for every electricity telegram.

    A repeated timestamp is merged with the per-phase maximum of everything
    seen so far at that timestamp and emitted again, so the last point for
    a timestamp is the authoritative one.
    """
    seen: Dict[int, Phases] = {}
    out: List[Tuple[int, Phases]] = []
    for t in telegrams:
        if not isinstance(t.data, Electricity):
            continue
        ts = t.timestamp
        phases = _phases(getattr(t.data, attr))
        if ts in seen:
            old = seen[ts]
            phases = (
                max(old[0], phases[0]),
                max(old[1], phases[1]),
                max(old[2], phases[2]),
            )
        seen[ts] = phases
        out.append((ts, phases))
    return out


def process_voltages(telegrams: Sequence[Telegram]) -> List[VoltagePoint]:
    return [VoltagePoint(ts, *p) for ts, p in _max_merge(telegrams, "voltages")]


def process_currents(telegrams: Sequence[Telegram]) -> List[CurrentPoint]:
    return [CurrentPoint(ts, *p) for ts, p in _max_merge(telegrams, "currents")]


def process_gas(telegrams: Sequence[Telegram]) -> List[GasPoint]:
    """
    Gas delivered between consecutive gas readings.

    Every gas telegram contributes one cumulative reading. When a timestamp
    repeats, the reading recorded for it is the larger of the stored and the
    new value, and that reading is what moves forward. The first reading
    has nothing to subtract from and yields no point.
    """
    stored: Dict[int, float] = {}
    readings: List[Tuple[int, float]] = []
    for t in telegrams:
        if not isinstance(t.data, Gas):
            continue
        ts = t.timestamp
        gas = t.data.total_gas_delivered.number
        # repeated timestamp: keep the larger reading
        if ts in stored and stored[ts] > gas:
            gas = stored[ts]
        stored[ts] = gas
        readings.append((ts, gas))

    return [
        GasPoint(ts, gas - prev)
        for (_, prev), (ts, gas) in zip(readings, readings[1:])
    ]


def process_energy(
    telegrams: Sequence[Telegram], config: Optional[AggregationConfig] = None
) -> List[EnergyPoint]:
    """
    Consumed/produced energy between consecutive distinct timestamps.

    Readings sharing a timestamp are summed, deltas are taken between
    neighbouring timestamps in ascending order and only the most recent
    `config.energy_window` deltas are kept, oldest first.
    """
    cfg = config or default_config()
    rows = [
        (t.timestamp, t.data.total_consumed.number, t.data.total_produced.number)
        for t in telegrams
        if isinstance(t.data, Electricity)
    ]
    if not rows:
        return []

    totals = (
        pd.DataFrame(rows, columns=["timestamp", *canon.ENERGY_COLS])
        .groupby("timestamp", sort=True)[canon.ENERGY_COLS]
        .sum()
    )
    deltas = totals.diff().iloc[1:]
    deltas = deltas.tail(max(cfg.energy_window, 0))
    return [
        EnergyPoint(int(ts), float(row["consumed"]), float(row["produced"]))
        for ts, row in deltas.iterrows()
    ]


def decode_message(message: str) -> str:
    """Decode a string of hex digit pairs, one ASCII character per pair."""
    if len(message) % 2:
        raise EncodingError(f"Unaligned block found in message {message!r}")
    out = []
    for i in range(0, len(message), 2):
        pair = message[i : i + 2]
        if not all(c in "0123456789abcdefABCDEF" for c in pair):
            raise EncodingError(f"Invalid character in message: {pair!r}")
        out.append(chr(int(pair, 16)))
    return "".join(out)


def process_event_logs(telegrams: Sequence[Telegram]) -> EventLogs:
    """
    Decode every event log entry and route it by severity.

    Severity, message and date fields are joined on their event id; an id
    missing from any of the three is an error.
    """
    logs = EventLogs()
    for t in telegrams:
        base = t.base
        severities = base.eventlog_severities
        messages = base.eventlog_messages
        dates = base.eventlog_dates
        event_ids = list(dict.fromkeys([*severities, *messages, *dates]))
        for event_id in event_ids:
            missing = [
                name
                for name, coll in (
                    ("severity", severities),
                    ("message", messages),
                    ("date", dates),
                )
                if event_id not in coll
            ]
            if missing:
                raise MissingCorrelationError(
                    f"Event {event_id} is missing its {', '.join(missing)}"
                )
            severity = severities[event_id].text
            text = decode_message(messages[event_id].text)
            if severity == canon.HIGH_SEVERITY:
                logs.high.append(text)
            elif severity == canon.LOW_SEVERITY:
                logs.low.append(text)
            else:
                raise FormatError(f"Unknown severity value: {severity!r}")
    logger.debug("Decoded %d high and %d low event(s)", len(logs.high), len(logs.low))
    return logs


## Frames
def to_frame(points: Sequence[object], tz: str = canon.DEFAULT_TZ) -> pd.DataFrame:
    """
    Tidy frame of series points, indexed by tz-aware 't_start'.

    Works for any of the point dataclasses; the remaining attributes become
    columns in declaration order.
    """
    records = [asdict(p) for p in points]  # type: ignore[call-overload]
    if not records:
        idx = pd.DatetimeIndex([], tz=tz, name=canon.INDEX_NAME)
        return pd.DataFrame(index=idx)
    df = pd.DataFrame.from_records(records)
    df[canon.INDEX_NAME] = pd.to_datetime(df.pop("timestamp"), unit="s", utc=True)
    df[canon.INDEX_NAME] = df[canon.INDEX_NAME].dt.tz_convert(tz)
    return df.set_index(canon.INDEX_NAME)
