"""
Standard database tags.
"""

# tags
SYSTEM = "db.system"  # the normalized vendor, e.g. sqlite, postgres, mysql
NAME = "db.name"  # the name of the database
ROWCOUNT = "db.rowcount"  # number of rows affected or returned by a query
FETCH_SIZE = "db.fetch.size"
