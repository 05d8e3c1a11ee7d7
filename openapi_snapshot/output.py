# openapi_snapshot/output.py
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

import typer

from .atomic_write import write_atomic
from .config import Config, OutputProfile
from .errors import UsageError
from .fetchers.http_fetcher import fetch_openapi
from .parsers.json_parser import parse_json
from .transforms.outline import outline_openapi
from .transforms.reduce import reduce_openapi


@dataclass(frozen=True)
class OutputPayloads:
    primary: str
    outline: Optional[str] = None


def serialize_json(value: Any, minify: bool) -> str:
    if minify:
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return json.dumps(value, ensure_ascii=False, indent=2)


def build_outputs(config: Config) -> OutputPayloads:
    """
    One fetch, one parse, then the profile's transforms. Both payloads come
    from the same parsed document.
    """
    body = fetch_openapi(config.url, config.headers, config.timeout_ms)
    document = parse_json(body)

    if config.profile == OutputProfile.OUTLINE:
        return OutputPayloads(primary=serialize_json(outline_openapi(document), config.minify))

    full = reduce_openapi(document, config.reduce) if config.reduce else document
    primary = serialize_json(full, config.minify)
    outline = None
    if config.outline_out is not None:
        outline = serialize_json(outline_openapi(document), config.minify)
    return OutputPayloads(primary=primary, outline=outline)


def build_output(config: Config) -> str:
    return build_outputs(config).primary


def write_output(config: Config, payload: str) -> None:
    write_outputs(config, OutputPayloads(primary=payload))


def write_outputs(config: Config, outputs: OutputPayloads) -> None:
    if config.stdout:
        typer.echo(outputs.primary)
        return
    if config.out is None:
        raise UsageError("--out is required unless --stdout is set.")
    write_atomic(config.out, outputs.primary)
    if outputs.outline is not None and config.outline_out is not None:
        write_atomic(config.outline_out, outputs.outline)
