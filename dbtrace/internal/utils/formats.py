from typing import Any  # noqa:F401
from typing import Optional  # noqa:F401
from typing import Union  # noqa:F401


def asbool(value):
    # type: (Union[str, bool, None]) -> bool
    """Convert the given String to a boolean object.

    Accepted values are `True` and `1`.
    """
    if value is None:
        return False

    if isinstance(value, bool):
        return value

    return value.lower() in ("true", "1")


def coerce_port(value):
    # type: (Any) -> Any
    """Return ``value`` as an ``int`` when it looks like a port number, unchanged otherwise."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return value


def stringify(value):
    # type: (Any) -> Optional[str]
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)
