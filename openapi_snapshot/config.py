# openapi_snapshot/config.py
from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from dotenv import load_dotenv

from .errors import ReduceError, UsageError

load_dotenv()

VERSION = "0.3.0"

DEFAULT_URL = "http://localhost:3000/api-docs/openapi.json"
DEFAULT_OUT = Path("openapi/backend_openapi.json")
DEFAULT_OUTLINE_OUT = Path("openapi/backend_openapi.outline.json")
DEFAULT_REDUCE = "paths,components"
DEFAULT_INTERVAL_MS = 2_000
DEFAULT_TIMEOUT_MS = 10_000

USER_AGENT = os.getenv("OPENAPI_SNAPSHOT_UA", f"openapi-snapshot/{VERSION}")

# RFC 7230 token
_HEADER_NAME_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


class OutputProfile(str, Enum):
    FULL = "full"
    OUTLINE = "outline"


class ReduceKey(str, Enum):
    PATHS = "paths"
    COMPONENTS = "components"


@dataclass(frozen=True)
class Mode:
    watch: bool = False
    interval_ms: int = DEFAULT_INTERVAL_MS


SNAPSHOT = Mode()


@dataclass(frozen=True)
class Config:
    url: str = DEFAULT_URL
    url_from_default: bool = True
    out: Optional[Path] = DEFAULT_OUT
    outline_out: Optional[Path] = None
    reduce: Tuple[ReduceKey, ...] = ()
    profile: OutputProfile = OutputProfile.FULL
    minify: bool = False
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    headers: Tuple[str, ...] = field(default_factory=tuple)
    stdout: bool = False

    @classmethod
    def from_options(
        cls,
        *,
        mode: Mode = SNAPSHOT,
        url: Optional[str] = None,
        out: Optional[Path] = None,
        outline_out: Optional[Path] = None,
        reduce: Optional[str] = None,
        profile: OutputProfile = OutputProfile.FULL,
        minify: bool = False,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        headers: Optional[Sequence[str]] = None,
        stdout: bool = False,
        no_outline: bool = False,
    ) -> "Config":
        """
        Apply mode-specific defaults to raw CLI options.
        Watch mode with the full profile reduces to paths,components and writes
        an outline next to the snapshot unless told otherwise.
        """
        watch_full = mode.watch and profile == OutputProfile.FULL

        reduce_value = reduce
        if reduce_value is None and watch_full:
            reduce_value = DEFAULT_REDUCE
        keys = parse_reduce_list(reduce_value) if reduce_value is not None else ()

        if outline_out is None and watch_full and not no_outline and not stdout:
            outline_out = DEFAULT_OUTLINE_OUT
        if no_outline:
            outline_out = None

        if not stdout and out is None:
            out = DEFAULT_OUT

        return cls(
            url=url if url is not None else DEFAULT_URL,
            url_from_default=url is None,
            out=out,
            outline_out=outline_out,
            reduce=tuple(keys),
            profile=profile,
            minify=minify,
            timeout_ms=timeout_ms,
            headers=tuple(headers or ()),
            stdout=stdout,
        )


def validate_config(config: Config) -> None:
    if not config.stdout and config.out is None:
        raise UsageError("--out is required unless --stdout is set.")
    if config.profile == OutputProfile.OUTLINE and config.reduce:
        raise UsageError("--reduce is not supported with --profile outline.")
    if config.profile == OutputProfile.OUTLINE and config.outline_out is not None:
        raise UsageError("--outline-out is not supported with --profile outline.")
    if config.timeout_ms <= 0:
        raise UsageError("--timeout-ms must be greater than zero.")
    for raw in config.headers:
        parse_header(raw)


def parse_reduce_list(value: str) -> List[ReduceKey]:
    """Parse "paths,components" into ordered, de-duplicated ReduceKeys."""
    if not value:
        raise ReduceError("reduce list cannot be empty")
    known = {k.value: k for k in ReduceKey}
    out: List[ReduceKey] = []
    for raw in value.split(","):
        trimmed = raw.strip()
        if not trimmed:
            continue
        if trimmed.lower() != trimmed:
            raise ReduceError(f"reduce values must be lowercase: {trimmed}")
        key = known.get(trimmed)
        if key is None:
            raise ReduceError(f"unsupported reduce value: {trimmed}")
        if key not in out:
            out.append(key)
    if not out:
        raise ReduceError("reduce list cannot be empty")
    return out


def parse_header(raw: str) -> Tuple[str, str]:
    """Split a raw "Name: value" header string."""
    if ":" not in raw:
        raise UsageError(f"invalid header format: {raw}")
    name, value = raw.split(":", 1)
    name = name.strip()
    value = value.strip()
    if not name:
        raise UsageError(f"invalid header format: {raw}")
    if not _HEADER_NAME_RE.match(name):
        raise UsageError(f"invalid header name: {name}")
    if "\r" in value or "\n" in value:
        raise UsageError(f"invalid header value for: {name}")
    try:
        # http.client sends header values as latin-1
        value.encode("latin-1")
    except UnicodeEncodeError as e:
        raise UsageError(f"invalid header value for: {name}") from e
    return name, value
