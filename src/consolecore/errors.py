"""Error kinds and exceptions shared by every subsystem."""

from enum import Enum


class ErrorKind(Enum):
    """Failure categories reported by the core."""

    OUT_OF_MEMORY = "out_of_memory"
    TRUNCATED_ESCAPE = "truncated_escape"
    LINE_TOO_LONG = "line_too_long"
    INCOMPLETE_READ = "incomplete_read"
    OPERATION_CANCELLED = "operation_cancelled"
    OPERATION_TIMED_OUT = "operation_timed_out"
    BAD_OPERATOR = "bad_operator"
    BAD_ATTRIBUTE = "bad_attribute"
    BAD_VALUE = "bad_value"
    COLLECTOR_FAILED = "collector_failed"
    ENUMERATION_FAILED = "enumeration_failed"
    UNSUPPORTED_PLATFORM = "unsupported_platform"
    CONVERSION_FAILED = "conversion_failed"


class ConsoleCoreError(Exception):
    """Base class for consolecore errors."""

    kind: ErrorKind = ErrorKind.OUT_OF_MEMORY

    def __init__(self, message: str, kind: ErrorKind | None = None):
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class TruncatedEscapeError(ConsoleCoreError):
    """An escape sequence ended before its final character."""

    kind = ErrorKind.TRUNCATED_ESCAPE


class LineTooLongError(ConsoleCoreError):
    kind = ErrorKind.LINE_TOO_LONG


class OperationCancelledError(ConsoleCoreError):
    kind = ErrorKind.OPERATION_CANCELLED


class OperationTimedOutError(ConsoleCoreError):
    kind = ErrorKind.OPERATION_TIMED_OUT


class ConversionError(ConsoleCoreError):
    """Converted text does not fit the supplied capacity."""

    kind = ErrorKind.CONVERSION_FAILED


class CollectorFailedError(ConsoleCoreError):
    kind = ErrorKind.COLLECTOR_FAILED


class EnumerationFailedError(ConsoleCoreError):
    kind = ErrorKind.ENUMERATION_FAILED


class UnsupportedPlatformError(ConsoleCoreError):
    """A required OS capability is not available on this host."""

    kind = ErrorKind.UNSUPPORTED_PLATFORM

    def __init__(self, capability: str):
        super().__init__(f"capability not available: {capability}")
        self.capability = capability


class FilterCompileError(ConsoleCoreError):
    """A filter or colour expression failed to compile.

    Attributes:
        span: (start, end) offsets of the offending text in the expression
        substring: the offending text itself
    """

    def __init__(self, message: str, kind: ErrorKind, expression: str, span: tuple[int, int]):
        super().__init__(message, kind)
        self.expression = expression
        self.span = span
        self.substring = expression[span[0]:span[1]]
