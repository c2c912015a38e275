from __future__ import annotations
import re

from . import canon
from .exceptions import FormatError, require
from .types import ParserConfig


def parse_header(line: str) -> ParserConfig:
    """
    Parse the header line into a ParserConfig.

    Accepted forms: '/v10\\', '/v12\\' and '/v12\\+<ext>' where <ext> is one
    of 'g', 'r', 'gr' or 'rg'.
    """
    require(" " not in line, "Invalid header format: contains spaces")
    require(line.startswith("/"), "Invalid header format: missing leading '/'")

    parts = re.split(r"[/\\]", line)
    require(len(parts) == 3, f"Invalid header format: {line!r}")
    require(
        parts[2] == "" or parts[2].startswith("+"),
        f"Unexpected text after header: {parts[2]!r}",
    )

    token = parts[1]
    if token not in canon.VERSIONS:
        raise FormatError(f"Unsupported protocol version: {token!r}")
    version = canon.VERSIONS[token]
    if version == canon.BASE_VERSION and "+" in line:
        raise FormatError("Protocol version 1.0 has no extension syntax")

    ext = line.split("+")
    if len(ext) == 1:
        return ParserConfig(version=version)
    require(len(ext) == 2, f"Invalid header format: {line!r}")
    if ext[1] not in canon.EXTENSIONS:
        raise FormatError(f"Unknown extension suffix: {ext[1]!r}")

    gas, recursive = canon.EXTENSIONS[ext[1]]
    return ParserConfig(version=version, gas_enabled=gas, recursive_enabled=recursive)
