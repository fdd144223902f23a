# checkin/forwarding/reshaper.py
from typing import Any, List, Optional


def _nest(value: Any, segments: List[str]) -> Any:
    for segment in reversed(segments):
        value = {segment: value}
    return value


def reshape(result: Any, path: Optional[str]) -> Any:
    """
    Re-nests an upstream result under the path the internal resolvers expect.

    The first path segment is the forwarded field itself, so only the
    remaining segments add nesting: under "check_in.user" the upstream user
    `{"name": "A"}` becomes `{"user": {"name": "A"}}`. Lists are reshaped per
    element. Without a path the value passes through untouched.
    """
    if not path or result is None:
        return result
    segments = path.split(".")[1:]
    if isinstance(result, list):
        return [_nest(item, segments) for item in result]
    return _nest(result, segments)
