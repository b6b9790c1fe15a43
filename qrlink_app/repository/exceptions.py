class RepositoryError(Exception):
    """Persistence fault (connection loss, constraint other than uniqueness, ...)"""


class DuplicateShortCodeError(RepositoryError):
    """Raised when a record with the same short code already exists."""

    def __init__(self, short_code: str):
        super().__init__(f"short code already in use: {short_code}")
        self.short_code = short_code
