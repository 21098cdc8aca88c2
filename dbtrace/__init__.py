"""
dbtrace traces the queries of database clients and attributes each database
to its own service::

    import dbtrace
    from dbtrace import config
    from dbtrace.contrib import sqlite3

    config.use('sqlite3', service_name='default-db')
    config.use('sqlite3', describes={'adapter': 'sqlite3', 'database': ':memory:'}, service_name='widget-db')

    conn = sqlite3.connect(':memory:')
    conn.execute('SELECT 1')  # traced as a `db.query` span of the `widget-db` service
"""
from ._logger import configure_dbtrace_logger


# configure the logger before importing modules that log
configure_dbtrace_logger()

from .pin import Pin  # noqa: E402
from .settings import config  # noqa: E402
from .span import Span  # noqa: E402
from .tracer import Tracer  # noqa: E402


__version__ = "0.1.0"

# a global tracer instance
tracer = Tracer()

__all__ = [
    "Pin",
    "Span",
    "Tracer",
    "config",
    "tracer",
]
