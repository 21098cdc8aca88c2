import pytest

from dbtrace import config


@pytest.fixture(autouse=True)
def reset_database_configurations():
    """Registered database configurations are process wide, start every test from scratch."""
    for integration in ("database", "dbapi2", "sqlite3"):
        config.reset_configuration(integration)
    yield
    for integration in ("database", "dbapi2", "sqlite3"):
        config.reset_configuration(integration)
