"""
Error types raised by the tail/follow engine and its configuration
"""


class LogknifeError(Exception):
    """base error"""


class ConfigurationError(LogknifeError, ValueError):
    """invalid tail/since arguments, pattern or config file"""


class OpenError(LogknifeError, OSError):
    """target file cannot be opened for reading"""


class TransientReadError(LogknifeError):
    """no data or a momentary stat failure, retried on the next poll"""


class FatalReadError(LogknifeError):
    """file handle is permanently unusable"""
