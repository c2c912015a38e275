"""
Render series from a DSMR telegram document.

Reads the document from --input (or stdin), writes CSV/JSON series into --out.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from . import ingest, pipeline
from .config import AggregationConfig, RunConfig
from .exceptions import INPUT_ERRORS, DSMRError
from .render import FrameRenderer

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_MALFORMED_INPUT = 42


def _parse_args(argv: Optional[Sequence[str]]) -> RunConfig:
    parser = argparse.ArgumentParser(
        prog="dsmrlogic", description="Parse DSMR telegrams and render their series."
    )
    parser.add_argument(
        "--input",
        dest="input_path",
        default=None,
        help="Telegram document to read; stdin when omitted or '-'.",
    )
    parser.add_argument(
        "--out",
        dest="out_dir",
        default="output",
        help="Directory for the rendered series.",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    parser.add_argument(
        "--energy-window",
        dest="energy_window",
        type=int,
        default=AggregationConfig.energy_window,
        help="Number of most recent energy deltas to keep.",
    )
    args = parser.parse_args(argv)
    return RunConfig(
        input_path=Path(args.input_path) if args.input_path else None,
        out_dir=Path(args.out_dir),
        log_level=args.log_level,
        aggregation=AggregationConfig(energy_window=args.energy_window),
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    cfg = _parse_args(argv)
    logging.basicConfig(
        level=cfg.log_level, format="%(levelname)s %(name)s: %(message)s"
    )

    logger.debug("Reading input from %s", cfg.input_path or "stdin")
    try:
        text = ingest.read_input(cfg.input_path)
        renderer = FrameRenderer(cfg.out_dir, tz=cfg.aggregation.tz)
        pipeline.run(text, renderer, cfg.aggregation)
    except INPUT_ERRORS as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_MALFORMED_INPUT
    except DSMRError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
