# openapi_snapshot/observability.py
from __future__ import annotations

import logging
import os

# Enable verbose logging if OPENAPI_SNAPSHOT_VERBOSE is truthy (not "", "0", "false")
_VERB = os.getenv("OPENAPI_SNAPSHOT_VERBOSE", "").strip().lower()
VERBOSE = _VERB not in ("", "0", "false", "no")


def setup_logging(verbose: bool | None = None) -> bool:
    """
    Route package diagnostics (fetch attempts, retry decisions, backoff) to stderr.
    Returns whether verbose logging ended up enabled.
    """
    enabled = VERBOSE if verbose is None else verbose
    if not enabled:
        return False
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)sZ [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    logging.getLogger("openapi_snapshot").setLevel(logging.DEBUG)
    # Tame common libraries a bit (but still show info)
    for name in ("urllib3", "requests"):
        logging.getLogger(name).setLevel(logging.INFO)
    return True
