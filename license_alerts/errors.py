class ConfigError(RuntimeError):
    """A required setting is missing or malformed."""


class RemoteCallError(RuntimeError):
    """The hosted database rejected a query or procedure call."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
