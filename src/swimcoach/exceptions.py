"""Exceptions raised by the import pipeline."""


class SwimcoachError(Exception):
    """Base class for all swimcoach errors."""


class ImportParseError(SwimcoachError, ValueError):
    """A field of an imported row could not be parsed.

    Attributes:
        value: The offending raw text
        row_number: Source row (1-based, header is row 1) when known
    """

    def __init__(self, message: str, value: str, row_number: int | None = None):
        self.value = value
        self.row_number = row_number
        if row_number is not None:
            message = f"{message} (row {row_number})"
        super().__init__(message)


class DateFormatError(ImportParseError):
    """Date text did not match the Mon-DD-YY format."""

    def __init__(self, value: str, row_number: int | None = None):
        super().__init__(f"Invalid date: '{value}'. Expected Mon-DD-YY", value, row_number)


class TimeFormatError(ImportParseError):
    """Clock text could not be converted to milliseconds."""

    def __init__(self, value: str, row_number: int | None = None):
        super().__init__(f"Invalid time: '{value}'. Expected MM:SS.CC", value, row_number)


class EventFormatError(ImportParseError):
    """Event descriptor could not be split into distance and stroke."""


class RowFormatError(ImportParseError):
    """Row does not have the shape the column contract expects."""


class SwimmerNotFoundError(SwimcoachError, LookupError):
    """No swimmer matches a name lookup."""

    def __init__(self, name: str, message: str | None = None):
        self.name = name
        super().__init__(message or f"Swimmer not found: '{name}'")


class AmbiguousSwimmerError(SwimmerNotFoundError):
    """More than one swimmer shares the looked-up name."""

    def __init__(self, name: str, matches: int):
        self.matches = matches
        super().__init__(name, f"Swimmer name '{name}' matches {matches} swimmers")


class StorageError(SwimcoachError):
    """A read or write against the store failed.

    Attributes:
        retryable: True when the failed call may be repeated safely
    """

    def __init__(self, message: str, retryable: bool = False):
        self.retryable = retryable
        super().__init__(message)


class FileDecodeError(SwimcoachError, ValueError):
    """An uploaded or on-disk file is not text in the expected encoding."""

    def __init__(self, file_name: str | None, encoding: str):
        self.file_name = file_name
        self.encoding = encoding
        super().__init__(f"{file_name or 'File'} is not {encoding} text")
