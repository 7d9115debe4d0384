"""Exception types raised across the compile pipeline."""


class SassInlineError(Exception):
    """Base class for all sassinline errors."""


class CompileError(SassInlineError):
    """Raised when the stylesheet compiler rejects its input.

    ``diagnostic`` holds the compiler's raw error text, unparsed.
    """

    def __init__(self, diagnostic: str):
        self.diagnostic = diagnostic
        super().__init__(diagnostic)


class MapParseError(SassInlineError):
    """Raised when the compiler's source map text cannot be decoded."""


class CssParseError(SassInlineError):
    """Raised when compiled CSS cannot be read into a declaration tree."""

    def __init__(
        self, message: str, line: int | None = None, column: int | None = None
    ):
        self.line = line
        self.column = column
        super().__init__(message)
