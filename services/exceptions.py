class ChangeLogError(Exception):
    """Base class for errors raised while building the change report."""
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class UpstreamError(ChangeLogError):
    """Raised when the report API returns a non-success status or cannot be reached."""
    def __init__(self, message, status=None, body=""):
        super().__init__(message)
        self.status = status
        self.body = body or ""

    @property
    def http_status(self) -> int:
        """Status to mirror back to our own caller; 500 when upstream gave us nothing usable."""
        if self.status and self.status >= 400:
            return self.status
        return 500


class MalformedRecordError(ChangeLogError):
    """Raised when a report row is missing or has an unreadable field."""
    def __init__(self, message, field=None):
        super().__init__(message)
        self.field = field


class ConfigurationError(ChangeLogError):
    """Raised when the environment holds a value we cannot use."""
