from collections.abc import Mapping


def extract(value: object, path: str) -> str | None:
    """Resolve a dot-notation path against decoded JSON.

    An empty path addresses the root value. Every step must land on a mapping;
    there is no list indexing. Returns None unless the final value is a
    non-empty string.
    """
    current = value
    if path:
        for key in path.split("."):
            if not isinstance(current, Mapping):
                return None
            current = current.get(key)
    if isinstance(current, str) and current:
        return current
    return None
