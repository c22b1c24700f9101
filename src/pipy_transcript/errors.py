"""Errors raised by the truncation engine.

Every error is terminal for the current run and names the stage that
failed. Nothing is persisted once one of these has been raised before
the persistence stage.
"""

from typing import Any


class TruncationError(Exception):
    """Base class for truncation failures."""

    default_operation = "truncate"

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.operation = operation or self.default_operation
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.operation}] {self.message}"


class ParameterError(TruncationError):
    """Request parameters are out of range or not an allowed value."""

    default_operation = "validate-params"


class StructuralError(TruncationError):
    """The stored transcript breaks alternation or pairing on its own."""

    default_operation = "validate-messages"


class GenerationError(TruncationError):
    """The summarizer failed, or its output is missing required sections."""

    default_operation = "generate-summary"

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
        missing_sections: list[str] | None = None,
    ):
        super().__init__(message, operation, details)
        self.missing_sections = missing_sections or []


class AssemblyError(TruncationError):
    """Splicing the summary in produced a transcript that does not alternate."""

    default_operation = "assemble-messages"


class PersistenceError(TruncationError):
    """The store failed while backing up or saving."""

    default_operation = "persist-transcript"
