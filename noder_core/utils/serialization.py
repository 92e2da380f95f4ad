"""
Helpers for turning run results into JSON
"""
from typing import Any


def make_serializable(value: Any, max_depth: int = 8) -> Any:
    """
    Convert a value to be JSON-serializable.
    Replaces objects JSON cannot carry with a short placeholder.

    Args:
        value: Any Python value
        max_depth: Maximum recursion depth

    Returns:
        JSON-serializable version of the value
    """
    if max_depth <= 0:
        return "<max depth reached>"

    if value is None or isinstance(value, (bool, int, float, str)):
        return value

    if isinstance(value, (list, tuple, set, frozenset)):
        return [make_serializable(item, max_depth - 1) for item in value]

    if isinstance(value, dict):
        return {
            str(k): make_serializable(v, max_depth - 1)
            for k, v in value.items()
        }

    if isinstance(value, BaseException):
        return str(value)

    type_name = type(value).__name__
    module = type(value).__module__

    # Short, readable reprs are worth keeping
    str_repr = str(value)
    if len(str_repr) < 200 and not str_repr.startswith('<'):
        return f"<{type_name}: {str_repr}>"

    return f"<{module}.{type_name}>"
