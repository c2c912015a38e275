from __future__ import annotations
import logging
from typing import Dict, List, Optional

from . import canon
from .exceptions import (
    FormatError,
    IncompleteTelegramError,
    UnsupportedExtensionError,
)
from .types import (
    ContentType,
    Electricity,
    Field,
    Gas,
    ParserConfig,
    Telegram,
    TelegramBase,
    TelegramData,
)

logger = logging.getLogger(__name__)

_SINGLE = (
    ContentType.START,
    ContentType.DATE,
    ContentType.INFORMATION_TYPE,
    ContentType.END,
    ContentType.TOTAL_CONSUMED,
    ContentType.TOTAL_PRODUCED,
    ContentType.GAS_TOTAL_DELIVERED,
)
_PHASED = (ContentType.VOLTAGE, ContentType.CURRENT, ContentType.POWER)
_EVENTLOG = (
    ContentType.EVENTLOG_SEVERITY,
    ContentType.EVENTLOG_MESSAGE,
    ContentType.EVENTLOG_DATE,
)


def _require_single(singles: Dict[ContentType, Field], ct: ContentType) -> Field:
    if ct not in singles:
        raise IncompleteTelegramError(f"Telegram is missing its {ct.value} field")
    return singles[ct]


def _select_data(
    singles: Dict[ContentType, Field], phased: Dict[ContentType, List[Field]]
) -> TelegramData:
    gas = singles.get(ContentType.GAS_TOTAL_DELIVERED)
    electricity_complete = (
        all(len(phased[ct]) >= canon.PHASES for ct in _PHASED)
        and ContentType.TOTAL_CONSUMED in singles
        and ContentType.TOTAL_PRODUCED in singles
    )

    if gas is not None and electricity_complete:
        raise IncompleteTelegramError(
            "Telegram carries both gas and electricity data"
        )
    if gas is not None:
        return Gas(total_gas_delivered=gas)
    if electricity_complete:
        v, c, p = (phased[ct] for ct in _PHASED)
        return Electricity(
            voltages=(v[0], v[1], v[2]),
            currents=(c[0], c[1], c[2]),
            powers=(p[0], p[1], p[2]),
            total_consumed=singles[ContentType.TOTAL_CONSUMED],
            total_produced=singles[ContentType.TOTAL_PRODUCED],
        )
    counts = ", ".join(f"{len(phased[ct])} {ct.value}" for ct in _PHASED)
    raise IncompleteTelegramError(
        f"Insufficient data for telegram: no gas reading and incomplete "
        f"electricity set ({counts})"
    )


def build_telegram(fields: List[Field]) -> Telegram:
    """
    Assemble one Telegram from the fields collected between Start and End.

    Exactly one of the Gas or Electricity layouts must be present. Event-log
    fields are keyed by the index of their id.
    """
    singles: Dict[ContentType, Field] = {}
    phased: Dict[ContentType, List[Field]] = {ct: [] for ct in _PHASED}
    eventlog: Dict[ContentType, Dict[int, Field]] = {ct: {} for ct in _EVENTLOG}

    for f in fields:
        ct = f.content_type
        if ct in _PHASED:
            phased[ct].append(f)
        elif ct in _EVENTLOG:
            event_id = f.id.index
            if event_id is None:
                raise FormatError(f"Event log field {f.id} has no event id")
            if event_id in eventlog[ct]:
                raise FormatError(f"Duplicate {ct.value} for event {event_id}")
            eventlog[ct][event_id] = f
        else:
            if ct in singles:
                raise FormatError(f"Duplicate {ct.value} field in telegram")
            singles[ct] = f

    base = TelegramBase(
        start=_require_single(singles, ContentType.START),
        date=_require_single(singles, ContentType.DATE),
        information_type=_require_single(singles, ContentType.INFORMATION_TYPE),
        end=_require_single(singles, ContentType.END),
        eventlog_severities=eventlog[ContentType.EVENTLOG_SEVERITY],
        eventlog_messages=eventlog[ContentType.EVENTLOG_MESSAGE],
        eventlog_dates=eventlog[ContentType.EVENTLOG_DATE],
    )
    return Telegram(base=base, data=_select_data(singles, phased))


class TelegramAssembler:
    """
    Frame stack over the parsed fields of one document.

    Start pushes a frame, End pops it and assembles a Telegram, anything
    else goes into the innermost open frame. Nesting needs the recursive
    extension; gas content needs the gas extension.
    """

    def __init__(self, config: ParserConfig):
        self.config = config
        self.frames: List[List[Field]] = []
        self.completed: List[Telegram] = []

    @property
    def depth(self) -> int:
        return len(self.frames)

    def _check_extension(self, f: Field) -> None:
        if self.config.gas_enabled:
            return
        if f.content_type == ContentType.GAS_TOTAL_DELIVERED:
            raise UnsupportedExtensionError(
                "Gas reading found but the gas extension is not enabled"
            )
        if (
            f.content_type == ContentType.INFORMATION_TYPE
            and f.text == canon.GAS_INFORMATION_TYPE
        ):
            raise UnsupportedExtensionError(
                "Gas telegram found but the gas extension is not enabled"
            )

    def feed(self, f: Field) -> Optional[Telegram]:
        """Consume one field; return the Telegram it completes, if any."""
        ct = f.content_type
        if ct == ContentType.START:
            if self.frames and not self.config.recursive_enabled:
                raise UnsupportedExtensionError(
                    "Nested telegram found but the recursive extension is not enabled"
                )
            self.frames.append([f])
            return None

        if not self.frames:
            raise FormatError(f"Field {f.id} found outside of a telegram")

        if ct == ContentType.END:
            frame = self.frames.pop()
            frame.append(f)
            telegram = build_telegram(frame)
            self.completed.append(telegram)
            logger.debug(
                "Assembled %s telegram at depth %d",
                type(telegram.data).__name__.lower(),
                self.depth,
            )
            return telegram

        self._check_extension(f)
        self.frames[-1].append(f)
        return None

    def finish(self) -> List[Telegram]:
        """Close the document; completed telegrams come back in reverse completion order."""
        if self.frames:
            raise IncompleteTelegramError(
                f"{len(self.frames)} telegram(s) still open at end of input"
            )
        return list(reversed(self.completed))
