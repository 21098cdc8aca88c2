from types import MappingProxyType

import attr


def _freeze_tags(tags):
    return MappingProxyType(dict(tags or {}))


@attr.s(frozen=True, slots=True)
class DatabaseConfiguration(object):
    """Tracing settings that apply to the connections of one logical database.

    ``None`` values fall back to the integration defaults when a connection
    is pinned: the integration service, the global service, then the
    database vendor for ``service_name``; the global tracer for ``tracer``.
    """

    service_name = attr.ib(default=None)
    tracer = attr.ib(default=None)
    tags = attr.ib(factory=dict, converter=_freeze_tags, hash=False)
