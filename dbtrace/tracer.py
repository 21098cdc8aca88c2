from typing import Optional  # noqa:F401

from .internal.logger import get_logger
from .settings import config
from .span import Span
from .writer import BaseWriter  # noqa:F401
from .writer import NoopWriter


log = get_logger(__name__)


class Tracer(object):
    """
    Tracer is used to create and finish spans. Finished spans are handed to the
    tracer's writer::

        from dbtrace import tracer

        with tracer.trace("db.query", service="users-db", resource="SELECT 1") as span:
            span.set_tag("db.system", "sqlite")
    """

    def __init__(self, writer=None, enabled=None):
        # type: (Optional[BaseWriter], Optional[bool]) -> None
        self.writer = writer or NoopWriter()
        self.enabled = config._trace_enabled if enabled is None else enabled

    def configure(self, enabled=None, writer=None):
        # type: (Optional[bool], Optional[BaseWriter]) -> None
        if enabled is not None:
            self.enabled = enabled
        if writer is not None:
            self.writer = writer

    def trace(self, name, service=None, resource=None, span_type=None):
        # type: (str, Optional[str], Optional[str], Optional[str]) -> Span
        """Return a new span, started now. It must be finished, either with
        ``span.finish()`` or by using it as a context manager.
        """
        return Span(
            name,
            service=service or config.service,
            resource=resource,
            span_type=span_type,
            on_finish=self._on_span_finish,
        )

    def _on_span_finish(self, span):
        # type: (Span) -> None
        if not self.enabled:
            return
        self.writer.write([span])

    def __repr__(self):
        return "%s(enabled=%s, writer=%r)" % (self.__class__.__name__, self.enabled, self.writer)
