# openapi_snapshot/watch.py
from __future__ import annotations

import re
import signal
import sys
import threading
import time
from dataclasses import dataclass, replace
from typing import Optional

import typer

from .config import Config
from .errors import SnapshotError
from .log import err, info, warn
from .output import build_outputs, write_outputs

MIN_INTERVAL_MS = 250
BACKOFF_MAX_MS = 10_000
SLEEP_SLICE_MS = 50

_HOST_PORT_RE = re.compile(r"^[A-Za-z0-9.\-]+:\d{1,5}$")


@dataclass
class WatchState:
    consecutive_failures: int = 0
    prompted: bool = False


def base_interval(interval_ms: int) -> int:
    return max(interval_ms, MIN_INTERVAL_MS)


def backoff_delay(base_ms: int, failures: int) -> int:
    """Delay before the next cycle: base when healthy, doubling per failure, capped."""
    base_ms = base_interval(base_ms)
    if failures <= 0:
        return base_ms
    cap = max(BACKOFF_MAX_MS, base_ms)
    # stop doubling once past the cap so large failure counts stay cheap
    delay = base_ms
    for _ in range(failures):
        delay *= 2
        if delay >= cap:
            return cap
    return delay


def wait_with_shutdown(shutdown: threading.Event, sleep_ms: int) -> bool:
    """Sleep in small slices; True as soon as shutdown is requested."""
    deadline = time.monotonic() + sleep_ms / 1000.0
    while not shutdown.is_set():
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            break
        time.sleep(min(remaining, SLEEP_SLICE_MS / 1000.0))
    return shutdown.is_set()


def normalize_user_url(text: str) -> Optional[str]:
    trimmed = text.strip()
    if not trimmed:
        return None
    if trimmed.isdigit():
        return f"http://localhost:{trimmed}/api-docs/openapi.json"
    if trimmed.startswith(("http://", "https://")):
        return trimmed
    if _HOST_PORT_RE.match(trimmed):
        return f"http://{trimmed}/api-docs/openapi.json"
    return None


def prompt_for_url(default_url: str) -> Optional[str]:
    """Ask for a replacement URL on an interactive terminal; None when declined."""
    if not sys.stdin.isatty():
        return None
    while True:
        try:
            answer = typer.prompt(
                f"OpenAPI URL (default: {default_url}) - enter port or URL",
                default="",
                show_default=False,
                err=True,
            )
        except typer.Abort:
            return None
        if not answer.strip():
            return None
        url = normalize_user_url(answer)
        if url is not None:
            return url
        typer.echo("Invalid input. Enter a port (e.g., 3000) or full URL.", err=True)


def _install_signal_handlers(shutdown: threading.Event) -> dict:
    if threading.current_thread() is not threading.main_thread():
        return {}

    def _handler(signum, frame):
        shutdown.set()

    previous = {}
    for sig in (signal.SIGINT, signal.SIGTERM):
        previous[sig] = signal.signal(sig, _handler)
    return previous


def _restore_signal_handlers(previous: dict) -> None:
    for sig, handler in previous.items():
        signal.signal(sig, handler if handler is not None else signal.SIG_DFL)


def run_cycle(config: Config, state: WatchState) -> Optional[Config]:
    """
    One build/write pass. Returns a replacement Config when the operator
    supplied a new URL at the recovery prompt, else None.
    """
    try:
        outputs = build_outputs(config)
        write_outputs(config, outputs)
    except SnapshotError as e:
        err(f"[{e.kind}] {e}")
        first_failure = not state.prompted
        state.prompted = True
        if first_failure and config.url_from_default and e.is_url_related:
            new_url = prompt_for_url(config.url)
            if new_url:
                warn(f"Switching watch URL from default to '{new_url}' after prompt.")
                return replace(config, url=new_url, url_from_default=False)
        state.consecutive_failures += 1
        return None

    if state.consecutive_failures:
        info(f"Recovered after {state.consecutive_failures} failed cycle(s).")
    state.consecutive_failures = 0
    return None


def run_watch(config: Config, interval_ms: int, shutdown: Optional[threading.Event] = None) -> None:
    """
    Poll, transform and persist until interrupted. Cycle errors are reported
    and never end the loop.
    """
    shutdown = shutdown or threading.Event()
    previous = _install_signal_handlers(shutdown)
    base_ms = base_interval(interval_ms)
    state = WatchState()
    target = config.out if not config.stdout else "stdout"
    info(f"Watching {config.url} every {base_ms} ms -> {target}")
    try:
        while not shutdown.is_set():
            switched = run_cycle(config, state)
            if switched is not None:
                config = switched
                continue
            if wait_with_shutdown(shutdown, backoff_delay(base_ms, state.consecutive_failures)):
                break
    finally:
        _restore_signal_handlers(previous)
    info("Stopped watch.")
