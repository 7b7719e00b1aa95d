"""
Exceptions raised by the advisory pipeline.
"""


class AdvisoryError(Exception):
    """Base exception for advisory update operations."""

    pass


class ConfigurationError(AdvisoryError):
    """Policy file missing, unreadable or malformed."""

    pass


class RemoteFetchError(AdvisoryError):
    """A branch's commit list could not be retrieved from the remote host."""

    def __init__(self, message: str, branch: str | None = None):
        super().__init__(message)
        self.branch = branch


class CachePreconditionError(AdvisoryError):
    """Lookback requested before today's cache entry was written."""

    pass


class InvalidArgumentError(AdvisoryError, ValueError):
    """An argument is outside its valid domain, e.g. a negative day count."""

    pass


class PersistenceError(AdvisoryError):
    """Cache or advisory document could not be read, parsed or written."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path
