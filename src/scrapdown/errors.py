"""Exception types raised by scrapdown."""


class ScrapdownError(Exception):
    """Base class for all scrapdown errors."""


class ParseError(ScrapdownError):
    """No syntax rule matched where a node was required."""

    def __init__(self, message: str, position: int = 0):
        super().__init__(message)
        self.position = position


class ConfigError(ScrapdownError):
    """A configuration value is missing or out of range."""


class InputNotFoundError(ScrapdownError):
    """The input document could not be located."""
