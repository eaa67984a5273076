from collections.abc import Mapping
from typing import Any


class PathNotFound(KeyError):
    def __init__(self, path: str, segment: str):
        self.path = path
        self.segment = segment
        super().__init__(f"{path} (no '{segment}')")


def resolve(document: Any, path: str) -> Any:
    """Walk a dotted path like ``booking.bookingdates.checkin``.

    Integer segments index into lists. An empty path returns the document.
    """
    current = document
    if not path:
        return current
    for segment in path.split("."):
        if isinstance(current, Mapping):
            if segment not in current:
                raise PathNotFound(path, segment)
            current = current[segment]
        elif isinstance(current, list) and segment.lstrip("-").isdigit():
            try:
                current = current[int(segment)]
            except IndexError:
                raise PathNotFound(path, segment) from None
        else:
            raise PathNotFound(path, segment)
    return current


def flatten(mapping: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    """Expand a nested mapping into dotted-path -> leaf value pairs."""
    flat: dict[str, Any] = {}
    for key, value in mapping.items():
        path = f"{prefix}.{key}" if prefix else key
        if isinstance(value, Mapping) and value:
            flat.update(flatten(value, path))
        else:
            flat[path] = value
    return flat
