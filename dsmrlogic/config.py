from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from . import canon


@dataclass
class AggregationConfig:
    # Number of most recent energy deltas kept in the energy series
    energy_window: int = canon.DEFAULT_ENERGY_WINDOW
    # Timezone used when series are turned into frames
    tz: str = canon.DEFAULT_TZ


@dataclass
class RunConfig:
    input_path: Optional[Path] = None  # None reads stdin
    out_dir: Path = Path("output")
    log_level: str = "WARNING"
    aggregation: AggregationConfig = field(default_factory=AggregationConfig)


def default_config() -> AggregationConfig:
    return AggregationConfig()
