"""Package-specific exception types."""

from __future__ import annotations


class AutoformatError(Exception):
    """Base class for errors raised while autoformatting a document."""


class InvariantViolationError(AutoformatError):
    """Raised when the document is not in the shape the engine expects.

    Distinct from a pattern that simply does not match: this signals a
    malformed document, not plain text.

    Args:
        expectation: Description of the violated expectation.
    """

    def __init__(self, expectation: str):
        self.expectation = expectation
        super().__init__(f"Invariant violated: {expectation}")


class ConvergenceError(AutoformatError):
    """Raised when a sweep keeps changing the block count past the restart cap.

    Args:
        max_restarts: Maximum number of restarts that were allowed.
    """

    def __init__(self, max_restarts: int):
        self.max_restarts = max_restarts
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return (
            f"Autoformatting did not converge after {self.max_restarts} restarts; "
            "a rewrite keeps changing the number of blocks"
        )


class InputError(ValueError):
    """Base class for errors in text handed to the command line tool."""


class LineTooLongError(InputError):
    """Raised when a line exceeds the configured maximum length.

    Args:
        line_number: One-based index of the offending line.
        max_line_length: Maximum allowed line length in characters.
    """

    def __init__(self, line_number: int, max_line_length: int):
        self.line_number = line_number
        self.max_line_length = max_line_length
        super().__init__(
            f"Line {self.line_number} exceeds maximum allowed length "
            f"of {self.max_line_length} characters"
        )
