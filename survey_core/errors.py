"""Project-wide custom exception types."""


class ParseError(ValueError):
    """Raised when an uploaded workbook cannot be turned into survey records."""

    def __init__(self, message: str) -> None:  # noqa: D401 – simple constructor
        super().__init__(message)
        self.message = message
