# tags
EXECUTEMANY = "sql.executemany"


def normalize_vendor(vendor):
    # type: (str) -> str
    """Return a canonical name for a type of database."""
    if not vendor:
        return "db"  # should this ever happen?
    vendor = vendor.lower()
    if "sqlite" in vendor:
        return "sqlite"
    elif "postgres" in vendor or vendor in ("psycopg", "psycopg2", "pg", "asyncpg"):
        return "postgres"
    elif "mysql" in vendor or vendor in ("pymysql", "mariadb"):
        return "mysql"
    else:
        return vendor
