from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Sequence

import pandas as pd

from . import canon, transform
from .types import (
    CurrentPoint,
    EnergyPoint,
    EventLogs,
    GasPoint,
    ParserConfig,
    SummaryPayload,
    VoltagePoint,
)

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    """
    Output collaborator fed by the pipeline.

    Each call either returns or raises; the pipeline does not interpret the
    failure, it re-raises it as RenderingFailure.
    """

    def start(self, config: ParserConfig, telegrams: int) -> None: ...

    def add_voltages(self, points: Sequence[VoltagePoint]) -> None: ...

    def add_currents(self, points: Sequence[CurrentPoint]) -> None: ...

    def add_gas(self, points: Sequence[GasPoint]) -> None: ...

    def add_energy(self, points: Sequence[EnergyPoint]) -> None: ...

    def add_event_logs(self, logs: EventLogs) -> None: ...

    def finish(self) -> None: ...


class FrameRenderer:
    """
    Write every series as a CSV frame plus a JSON summary into `out_dir`.

    Files: voltage.csv, current.csv, gas.csv, energy.csv, summary.json.
    """

    def __init__(self, out_dir: str | Path, tz: str = canon.DEFAULT_TZ):
        self.out_dir = Path(out_dir)
        self.tz = tz
        self.frames: Dict[str, pd.DataFrame] = {}
        self.logs = EventLogs()
        self._config: Optional[ParserConfig] = None
        self._telegrams = 0

    def start(self, config: ParserConfig, telegrams: int) -> None:
        self.out_dir.mkdir(parents=True, exist_ok=True)
        self._config = config
        self._telegrams = telegrams

    def _add(self, name: str, points: Sequence[object]) -> None:
        df = transform.to_frame(points, tz=self.tz)
        self.frames[name] = df
        df.to_csv(self.out_dir / f"{name}.csv")
        logger.debug("Wrote %d %s point(s)", len(df), name)

    def add_voltages(self, points: Sequence[VoltagePoint]) -> None:
        self._add("voltage", points)

    def add_currents(self, points: Sequence[CurrentPoint]) -> None:
        self._add("current", points)

    def add_gas(self, points: Sequence[GasPoint]) -> None:
        self._add("gas", points)

    def add_energy(self, points: Sequence[EnergyPoint]) -> None:
        self._add("energy", points)

    def add_event_logs(self, logs: EventLogs) -> None:
        self.logs = logs

    def summary(self) -> SummaryPayload:
        stamps: List[pd.Timestamp] = [
            ts for df in self.frames.values() for ts in (df.index.min(), df.index.max())
            if pd.notna(ts)
        ]
        version = ""
        if self._config is not None:
            version = "{}.{}".format(*self._config.version)
        return {
            "meta": {
                "version": version,
                "telegrams": self._telegrams,
                "start": min(stamps).isoformat() if stamps else None,
                "end": max(stamps).isoformat() if stamps else None,
            },
            "points": {name: len(df) for name, df in self.frames.items()},
            "event_logs": {"high": list(self.logs.high), "low": list(self.logs.low)},
        }

    def finish(self) -> None:
        path = self.out_dir / "summary.json"
        path.write_text(json.dumps(self.summary(), indent=2), encoding="utf-8")
        logger.info("Wrote output to %s", self.out_dir)
