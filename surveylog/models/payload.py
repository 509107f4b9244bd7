"""Validation for free-form survey event payloads.

A payload is a JSON value tree: objects with string keys, arrays, strings,
finite numbers, booleans and null. Anything else cannot be stored without
loss, so it is rejected instead of being coerced. Strings must encode as
UTF-8 and nesting is capped at MAX_PAYLOAD_DEPTH so that whatever is stored
can also be served back.
"""

import math
from typing import Any

from surveylog.models.constants import MAX_PAYLOAD_DEPTH


def check_utf8(value: str, path: str) -> None:
    """Raise ValueError if ``value`` holds lone surrogates."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise ValueError(f"{path}: string is not valid UTF-8") from None


def validate_payload(value: Any) -> Any:
    """Return ``value`` unchanged if it is a well-formed JSON value tree.

    The tree is walked with an explicit stack, depth-first in document
    order, so arbitrarily deep input fails with ValueError, never RecursionError.

    Raises:
        ValueError: naming the first offending location (e.g. ``payload.answers[2]``)
    """
    # (node, path, depth of the container holding it)
    stack = [(value, "payload", 0)]
    while stack:
        node, path, depth = stack.pop()
        if node is None or isinstance(node, (bool, int)):
            continue
        if isinstance(node, str):
            check_utf8(node, path)
            continue
        if isinstance(node, float):
            if not math.isfinite(node):
                raise ValueError(f"{path}: non-finite number is not allowed")
            continue
        if isinstance(node, (list, dict)) and depth >= MAX_PAYLOAD_DEPTH:
            raise ValueError(f"{path}: nesting deeper than {MAX_PAYLOAD_DEPTH}")
        if isinstance(node, list):
            children = [(item, f"{path}[{index}]", depth + 1) for index, item in enumerate(node)]
        elif isinstance(node, dict):
            children = []
            for key, item in node.items():
                if not isinstance(key, str):
                    raise ValueError(f"{path}: object keys must be strings, got {type(key).__name__}")
                check_utf8(key, f"{path} key")
                children.append((item, f"{path}.{key}", depth + 1))
        else:
            raise ValueError(f"{path}: unsupported payload value of type {type(node).__name__}")
        stack.extend(reversed(children))
    return value
