import typing as t

from envier import Env


class DBTraceConfig(Env):
    """Process wide settings read from ``DBTRACE_*`` environment variables."""

    __prefix__ = "dbtrace"

    SERVICE = Env.v(t.Optional[str], "service", default=None, help="Service name used when no other applies")
    TRACE_ENABLED = Env.v(bool, "trace.enabled", default=True, help="Create spans for traced queries")
    TRACE_DEBUG = Env.v(bool, "trace.debug", default=False, help="Enable debug logging of the dbtrace logger")
