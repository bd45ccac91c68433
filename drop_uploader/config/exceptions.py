class ConfigError(Exception):
    """Raised when an upload configuration change is rejected."""
