from typing import List  # noqa:F401

from .internal.logger import get_logger
from .span import Span  # noqa:F401


log = get_logger(__name__)


class BaseWriter(object):
    """Receives finished spans from a :class:`dbtrace.tracer.Tracer`.

    Shipping spans to a collector is left to concrete writers.
    """

    def write(self, spans):
        # type: (List[Span]) -> None
        raise NotImplementedError()


class NoopWriter(BaseWriter):
    def write(self, spans):
        # type: (List[Span]) -> None
        pass


class LogWriter(BaseWriter):
    """Log every finished span at debug level."""

    def write(self, spans):
        # type: (List[Span]) -> None
        for span in spans:
            log.debug(
                "finished span name=%s service=%s resource=%s error=%s duration=%s meta=%r",
                span.name,
                span.service,
                span.resource,
                span.error,
                span.duration,
                span.meta,
            )
