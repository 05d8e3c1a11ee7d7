# openapi_snapshot/transforms/reduce.py
from __future__ import annotations

from typing import Any, Dict, Iterable, List

from ..config import ReduceKey
from ..errors import ReduceError


def reduce_openapi(document: Any, keys: Iterable[ReduceKey]) -> Dict[str, Any]:
    """
    Keep only the requested top-level sections, in the order they were requested.
    Values are carried over as-is; the input document is not modified.
    """
    names: List[str] = []
    for key in keys:
        name = ReduceKey(key).value
        if name not in names:
            names.append(name)
    if not names:
        raise ReduceError("reduce list cannot be empty")
    if not isinstance(document, dict):
        raise ReduceError("OpenAPI document must be a JSON object")

    missing = [n for n in names if n not in document]
    if missing:
        raise ReduceError(f"missing top-level key(s): {', '.join(missing)}")
    return {n: document[n] for n in names}
