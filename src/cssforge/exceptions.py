"""Exceptions raised by cssforge."""


class CSSForgeError(Exception):
    """Base class for cssforge errors."""


class StyleSyntaxError(CSSForgeError):
    """Raised when a style body cannot be split into rules."""

    def __init__(self, message: str, selector: str = "", position: int = 0):
        self.message = message
        self.selector = selector
        self.position = position
        super().__init__(message)

    def __str__(self) -> str:
        if self.selector:
            return f"{self.selector}:{self.position}: {self.message}"
        return f"{self.message} (at offset {self.position})"


class SheetError(CSSForgeError):
    """Raised when the style sheet is used outside its inject/flush lifecycle."""


class ConfigError(CSSForgeError):
    """Raised when engine options fail validation."""

    def __init__(self, message: str, errors: dict[str, str] | None = None):
        self.errors = errors or {}
        super().__init__(message)
