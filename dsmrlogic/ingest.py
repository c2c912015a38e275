from __future__ import annotations
import logging
import sys
from pathlib import Path
from typing import IO, List, Optional

from . import fields, header
from .assemble import TelegramAssembler
from .exceptions import FormatError, IoFailure
from .types import ParserConfig, Telegram

logger = logging.getLogger(__name__)


def decode_bytes(raw: bytes) -> str:
    """Decode input as UTF-8, replacing undecodable bytes."""
    return raw.decode("utf-8", errors="replace")


def from_stream(stream: IO[bytes]) -> str:
    """Read a whole binary stream (e.g. stdin) into text."""
    try:
        raw = stream.read()
    except OSError as e:
        raise IoFailure(f"Failed reading input: {e}") from e
    return decode_bytes(raw)


def from_file(path: str | Path) -> str:
    try:
        raw = Path(path).read_bytes()
    except OSError as e:
        raise IoFailure(f"Failed reading {path}: {e}") from e
    return decode_bytes(raw)


def read_input(path: Optional[str | Path] = None) -> str:
    """Read the document from `path`, or from stdin when no path is given."""
    if path is None or str(path) == "-":
        return from_stream(sys.stdin.buffer)
    return from_file(path)


def parse_with_config(text: str) -> tuple[ParserConfig, List[Telegram]]:
    """
    Parse a whole document: header line, then field lines.

    Blank lines are skipped. Any malformed line, disabled extension or
    incomplete telegram aborts the parse. Telegrams are returned in reverse
    order of completion; callers sort by date themselves.
    """
    # '\n'-delimited only; a trailing '\r' belongs to the line ending
    lines = [line.removesuffix("\r") for line in text.split("\n")]
    if lines[-1] == "":
        lines.pop()
    if not lines:
        raise FormatError("empty input")

    config = header.parse_header(lines[0])
    logger.debug(
        "Header: version %d.%d, gas=%s, recursive=%s",
        *config.version,
        config.gas_enabled,
        config.recursive_enabled,
    )

    assembler = TelegramAssembler(config)
    for number, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        try:
            assembler.feed(fields.parse_field(line))
        except FormatError as e:
            raise FormatError(f"Line {number}: {e}") from e

    telegrams = assembler.finish()
    logger.info("Parsed %d telegram(s)", len(telegrams))
    return config, telegrams


def parse(text: str) -> List[Telegram]:
    return parse_with_config(text)[1]
