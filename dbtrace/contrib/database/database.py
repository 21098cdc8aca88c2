from collections.abc import Mapping
from typing import Any  # noqa:F401
from typing import Optional  # noqa:F401

import wrapt

from ...internal.logger import get_logger
from ...pin import Pin
from ...settings import IntegrationConfig  # noqa:F401
from ...settings import config
from ..trace_utils import query_span
from .descriptor import normalize


log = get_logger(__name__)

config._add("database", dict())


def attach_pin(obj, describes, cfg, adapter=None):
    # type: (Any, Any, IntegrationConfig, Optional[str]) -> Optional[Pin]
    """Resolve the configuration of a connection and pin it onto ``obj``.

    The pin is a snapshot: later changes to the registered configurations do
    not affect it. Errors are logged and swallowed, the connection is then
    simply not traced.
    """
    try:
        descriptor = normalize(describes, adapter=adapter)
        configuration = cfg.resolver.resolve(descriptor)
        vendor = descriptor.vendor
        pin = Pin(
            service=configuration.service_name or cfg.service or cfg.global_config.service or vendor,
            app=vendor,
            tags=dict(configuration.tags) or None,
            tracer=configuration.tracer,
            _config={
                "integration": cfg.integration_name,
                "configuration": configuration,
                "descriptor": descriptor,
            },
        )
        pin.onto(obj)
        return pin
    except Exception:
        log.debug("failed to pin %r, its queries will not be traced", obj, exc_info=True)
        return None


class TracedDatabase(wrapt.ObjectProxy):
    """Wraps a database handle exposing ``raw_execute(sql, options=None)`` and
    traces every call to it::

        db = TracedDatabase(driver.connect(url), describes=url)
        db.raw_execute('SELECT * FROM gadgets')

    When ``describes`` is not given the handle is asked for its ``url``, then
    its ``opts`` or ``options`` mapping.
    """

    def __init__(self, database, describes=None, cfg=None):
        super(TracedDatabase, self).__init__(database)
        cfg = cfg if cfg is not None else config.database
        self._self_config = cfg
        if describes is None:
            describes = _get_description(database)
        attach_pin(self, describes, cfg, adapter=_get_adapter(database))

    def raw_execute(self, sql, options=None):
        return execute_traced(self, sql, options)


def execute_traced(connection, sql, options=None):
    """Run ``sql`` through the ``raw_execute`` primitive of the connection inside a query span."""
    database = getattr(connection, "__wrapped__", connection)
    cfg = getattr(connection, "_self_config", None)
    if cfg is None:
        cfg = config.database

    with query_span(Pin.get_from(connection), cfg.span_name, sql):
        if options is None:
            return database.raw_execute(sql)
        return database.raw_execute(sql, options)


def trace_database(database, describes=None, cfg=None):
    """Return ``database`` wrapped so that its queries are traced."""
    if isinstance(database, TracedDatabase):
        return database
    return TracedDatabase(database, describes=describes, cfg=cfg)


def _get_description(database):
    # type: (Any) -> Any
    """Return the URL or the options mapping the handle was opened with."""
    try:
        url = getattr(database, "url", None)
        if isinstance(url, str) and url:
            return url
        for name in ("opts", "options"):
            opts = getattr(database, name, None)
            if isinstance(opts, Mapping) and opts:
                return opts
    except Exception:
        log.debug("couldn't get the description of %r", database, exc_info=True)
    return None


def _get_adapter(database):
    # type: (Any) -> Optional[str]
    """Return the driver family of ``database``, e.g. mysql2 or sqlite3."""
    try:
        for name in ("adapter_scheme", "adapter"):
            adapter = getattr(database, name, None)
            if isinstance(adapter, str) and adapter:
                return adapter
        return database.__class__.__module__.split(".")[0]
    except Exception:
        log.debug("couldn't get the adapter of %r", database, exc_info=True)
        return None
