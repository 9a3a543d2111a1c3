"""potgen custom exceptions."""


class PotgenError(Exception):
    """Base exception for potgen errors."""


class ConfigurationError(PotgenError):
    """Invalid run configuration (unknown file extension, bad config file).

    Aborts the whole batch before anything is written.
    """


class ParseError(PotgenError):
    """A source file could not be parsed.

    Attributes:
        message: Parser message without location.
        line: 1-based line of the offending token, if known.
        column: 1-based column of the offending token, if known.
    """

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column


class CallValidationError(PotgenError):
    """A marker call has the wrong arity or a non-literal argument.

    Only the offending call is skipped; the rest of the file is still extracted.
    """

    def __init__(self, message: str, line: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.line = line


class ExtractionAborted(PotgenError):
    """Strict mode refused to write a catalog that produced diagnostics."""

    def __init__(self, dest: str, diagnostics: list) -> None:
        super().__init__(
            f"{len(diagnostics)} problem(s) while extracting {dest}, nothing written"
        )
        self.dest = dest
        self.diagnostics = diagnostics
