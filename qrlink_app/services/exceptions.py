class ShortenerError(Exception):
    """Base class for errors reported by the shortening service."""


class ValidationError(ShortenerError):
    """Caller input failed a precondition (bad URL, missing content field)."""


class ConflictError(ShortenerError):
    """The requested alias is already in use."""

    def __init__(self, alias: str):
        super().__init__(f"alias already in use: {alias}")
        self.alias = alias


class RetriesExhaustedError(ShortenerError):
    """Every generated code collided with an existing one."""

    def __init__(self, attempts: int, last_error: Exception = None):
        super().__init__(f"failed to generate a unique short code after {attempts} attempts")
        self.attempts = attempts
        self.last_error = last_error
