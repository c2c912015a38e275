from __future__ import annotations
import logging
from typing import Optional, Sequence

from . import ingest, transform
from .config import AggregationConfig, default_config
from .exceptions import RenderingFailure
from .render import Renderer
from .types import SeriesBundle, Telegram

logger = logging.getLogger(__name__)


def aggregate(
    telegrams: Sequence[Telegram], config: Optional[AggregationConfig] = None
) -> SeriesBundle:
    """Compute every series from telegrams already sorted by date."""
    cfg = config or default_config()
    return SeriesBundle(
        voltages=transform.process_voltages(telegrams),
        currents=transform.process_currents(telegrams),
        gas=transform.process_gas(telegrams),
        energy=transform.process_energy(telegrams, cfg),
        event_logs=transform.process_event_logs(telegrams),
    )


def run(
    text: str,
    renderer: Renderer,
    config: Optional[AggregationConfig] = None,
) -> SeriesBundle:
    """
    Parse a document, sort its telegrams by date, compute the series and
    hand them to `renderer`.

    Parse and aggregation errors propagate unchanged; anything raised by the
    renderer is re-raised as RenderingFailure.
    """
    parser_config, telegrams = ingest.parse_with_config(text)
    telegrams = transform.sort_telegrams(telegrams)
    bundle = aggregate(telegrams, config)
    logger.info(
        "Series: %d voltage, %d current, %d gas, %d energy point(s)",
        len(bundle.voltages),
        len(bundle.currents),
        len(bundle.gas),
        len(bundle.energy),
    )

    try:
        renderer.start(parser_config, len(telegrams))
        renderer.add_event_logs(bundle.event_logs)
        renderer.add_voltages(bundle.voltages)
        renderer.add_currents(bundle.currents)
        renderer.add_gas(bundle.gas)
        renderer.add_energy(bundle.energy)
        renderer.finish()
    except Exception as e:
        raise RenderingFailure(f"Renderer failed: {e}") from e
    return bundle
