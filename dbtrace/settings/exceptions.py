class ConfigException(ValueError):
    """Raised at setup time when an integration is configured with invalid
    settings, e.g. a malformed ``describes`` connection description.
    """

    pass
