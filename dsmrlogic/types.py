from __future__ import annotations
from typing import Dict, List, Mapping, NamedTuple, Optional, Tuple, TypedDict, Union
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum

from pydantic import BaseModel, model_validator

from . import canon
from .exceptions import FormatError, require


class ContentType(str, Enum):
    START = "start"
    DATE = "date"
    EVENTLOG_SEVERITY = "eventlog_severity"
    EVENTLOG_MESSAGE = "eventlog_message"
    EVENTLOG_DATE = "eventlog_date"
    INFORMATION_TYPE = "information_type"
    # Electricity
    VOLTAGE = "voltage"
    CURRENT = "current"
    POWER = "power"
    TOTAL_CONSUMED = "total_consumed"
    TOTAL_PRODUCED = "total_produced"
    # Gas extension
    GAS_TOTAL_DELIVERED = "gas_total_delivered"
    END = "end"


class Unit(str, Enum):
    VOLT = "V"
    AMPERE = "A"
    KILOWATT = "kW"
    KILOWATT_HOUR = "kWh"
    CUBIC_METER = "m3"


class FieldId(NamedTuple):
    major: int
    minor: int
    index: Optional[int] = None

    def __str__(self) -> str:
        parts = [self.major, self.minor] + ([] if self.index is None else [self.index])
        return ".".join(str(p) for p in parts)


## Values
@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class Number:
    value: float


@dataclass(frozen=True)
class Date:
    """
    Calendar date as written in a telegram, plus its absolute time.

    `timestamp` (unix seconds) is derived once from the calendar fields and
    the daylight-saving flag: 'S' telegrams are CEST (UTC+2), 'W' are CET (UTC+1).
    """

    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int
    is_daylight_saving: bool
    timestamp: int = field(init=False)

    def __post_init__(self):
        require(1 <= self.month <= 12, f"Month out of range: {self.month}")
        require(1 <= self.day <= 31, f"Day out of range: {self.day}")
        require(0 <= self.hour < 24, f"Hour out of range: {self.hour}")
        require(0 <= self.minute < 60, f"Minute out of range: {self.minute}")
        require(0 <= self.second < 60, f"Second out of range: {self.second}")
        offset = timezone(
            timedelta(hours=canon.UTC_OFFSET_HOURS[self.is_daylight_saving])
        )
        try:
            dt = datetime(
                self.year,
                self.month,
                self.day,
                self.hour,
                self.minute,
                self.second,
                tzinfo=offset,
            )
        except ValueError as e:
            raise FormatError(f"Date does not exist: {e}") from e
        object.__setattr__(self, "timestamp", int(dt.timestamp()))

    def to_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)


Value = Union[Text, Date, Number]


@dataclass(frozen=True)
class Field:
    content_type: ContentType
    id: FieldId
    value: Optional[Value]
    unit: Optional[Unit] = None

    @property
    def text(self) -> str:
        if not isinstance(self.value, Text):
            raise FormatError(f"Field {self.id} does not carry text")
        return self.value.value

    @property
    def number(self) -> float:
        if not isinstance(self.value, Number):
            raise FormatError(f"Field {self.id} does not carry a number")
        return self.value.value

    @property
    def date(self) -> Date:
        if not isinstance(self.value, Date):
            raise FormatError(f"Field {self.id} does not carry a date")
        return self.value


## Telegrams
@dataclass(frozen=True)
class TelegramBase:
    start: Field
    date: Field
    information_type: Field
    end: Field
    # event id -> field, in arrival order
    eventlog_severities: Mapping[int, Field] = field(default_factory=dict)
    eventlog_messages: Mapping[int, Field] = field(default_factory=dict)
    eventlog_dates: Mapping[int, Field] = field(default_factory=dict)


@dataclass(frozen=True)
class Electricity:
    voltages: Tuple[Field, Field, Field]
    currents: Tuple[Field, Field, Field]
    powers: Tuple[Field, Field, Field]
    total_consumed: Field
    total_produced: Field


@dataclass(frozen=True)
class Gas:
    total_gas_delivered: Field


TelegramData = Union[Electricity, Gas]


@dataclass(frozen=True)
class Telegram:
    base: TelegramBase
    data: TelegramData

    @property
    def timestamp(self) -> int:
        return self.base.date.date.timestamp


## Protocol configuration
class ParserConfig(BaseModel):
    """Protocol settings read from the header line."""

    version: Tuple[int, int]
    gas_enabled: bool = False
    recursive_enabled: bool = False
    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _extensions_supported(self) -> "ParserConfig":
        if self.version == canon.BASE_VERSION and (
            self.gas_enabled or self.recursive_enabled
        ):
            major, minor = self.version
            raise FormatError(
                f"Protocol version {major}.{minor} does not support extensions"
            )
        return self


## Series
@dataclass
class VoltagePoint:
    timestamp: int
    phase_1: float
    phase_2: float
    phase_3: float


@dataclass
class CurrentPoint:
    timestamp: int
    phase_1: float
    phase_2: float
    phase_3: float


@dataclass
class GasPoint:
    timestamp: int
    gas_delta: float


@dataclass
class EnergyPoint:
    timestamp: int
    consumed: float
    produced: float


@dataclass
class EventLogs:
    high: List[str] = field(default_factory=list)
    low: List[str] = field(default_factory=list)


@dataclass
class SeriesBundle:
    voltages: List[VoltagePoint]
    currents: List[CurrentPoint]
    gas: List[GasPoint]
    energy: List[EnergyPoint]
    event_logs: EventLogs


# JSON payload written next to rendered series
class SummaryMeta(TypedDict):
    version: str
    telegrams: int
    start: Optional[str]
    end: Optional[str]


class SummaryPayload(TypedDict):
    meta: SummaryMeta
    points: Dict[str, int]
    event_logs: Dict[str, List[str]]
