import json

from ..errors import ParseError

# keeps the recursive transforms and the indenting encoder well inside
# the interpreter stack
MAX_DEPTH = 128


def _nesting_depth(value) -> int:
    deepest = 0
    stack = [(value, 1)]
    while stack:
        node, depth = stack.pop()
        if isinstance(node, dict):
            children = node.values()
        elif isinstance(node, list):
            children = node
        else:
            continue
        deepest = max(deepest, depth)
        if deepest > MAX_DEPTH:
            return deepest
        stack.extend((child, depth + 1) for child in children)
    return deepest


def parse_json(data: bytes):
    """
    Decode a fetched body into a plain JSON tree (dict/list/str/...).
    No OpenAPI validation happens here; the transforms do their own checks.
    """
    try:
        document = json.loads(data)
    except RecursionError as e:
        raise ParseError("invalid JSON: nesting too deep") from e
    except (UnicodeDecodeError, ValueError) as e:
        raise ParseError(f"invalid JSON: {e}") from e
    if _nesting_depth(document) > MAX_DEPTH:
        raise ParseError(f"invalid JSON: nesting deeper than {MAX_DEPTH} levels")
    return document
