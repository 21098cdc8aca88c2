"""
The sqlite3 integration traces the queries of connections opened with
:func:`dbtrace.contrib.sqlite3.connect`, a drop-in replacement of
``sqlite3.connect``.


Global Configuration
~~~~~~~~~~~~~~~~~~~~

.. py:data:: dbtrace.config.sqlite3["service"]

   The service name reported by default for sqlite spans.

   This option can also be set with the ``DBTRACE_SQLITE3_SERVICE`` environment
   variable.

   Default: ``"sqlite"``

.. py:data:: dbtrace.config.sqlite3["trace_fetch_methods"]

   Whether to trace ``fetchone``, ``fetchmany`` and ``fetchall``.

   This option can also be set with the ``DBTRACE_SQLITE3_TRACE_FETCH_METHODS``
   environment variable.

   Default: ``False``


Database Configuration
~~~~~~~~~~~~~~~~~~~~~~

A connection is described by ``{'adapter': 'sqlite3', 'database': <database>}``
unless ``describes`` is given to :func:`connect`::

    from dbtrace import config
    from dbtrace.contrib import sqlite3

    config.use('sqlite3', describes={'database': ':memory:'}, service_name='widget-db')
    config.use('sqlite3', describes='users', service_name='users-db')

    widgets = sqlite3.connect(':memory:')
    users = sqlite3.connect('/tmp/users.db', describes='users')


Instance Configuration
~~~~~~~~~~~~~~~~~~~~~~

To configure the integration on an per-connection basis use the
``Pin`` API::

    from dbtrace import Pin

    db = sqlite3.connect(':memory:')
    Pin.override(db, service='sqlite-users')
"""
from .connection import TracedSQLite
from .connection import TracedSQLiteCursor
from .connection import connect


__all__ = ["TracedSQLite", "TracedSQLiteCursor", "connect"]
