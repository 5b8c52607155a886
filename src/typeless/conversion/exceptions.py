"""Exceptions for the type conversion system.

This module defines exceptions raised while registering, resolving and
executing conversions. Using specific exception types allows callers to
tell "there is no way to convert this" apart from "a conversion ran and
reported failure", and provides better error messages.
"""

from typing import Any


class ConversionError(Exception):
    """Base exception for type conversion failures.

    Attributes:
        message: Human-readable description of the failure.
        source: The argument values being converted, if known.
        target_type: The tag of the type we attempted to convert to.
    """

    def __init__(
        self,
        message: str,
        *,
        source: Any = None,
        target_type: str | None = None,
    ) -> None:
        self.message = message
        self.source = source
        self.target_type = target_type
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class InvalidArgumentsError(ConversionError):
    """Raised when a conversion is requested with a malformed argument list."""


class NotSupportedError(ConversionError):
    """Raised when no registered or synthesizable conversion exists.

    This is raised for a target/argument-type combination that has no exact
    match and for which composition search found no chain.
    """

    def __init__(
        self,
        target_type: str,
        arg_types: list[str],
        source: Any = None,
        message: str | None = None,
    ) -> None:
        if message is None:
            message = (
                f"Conversion not supported: cannot convert ({', '.join(arg_types)}) "
                f"to {target_type}"
            )
        self.arg_types = arg_types
        super().__init__(message, source=source, target_type=target_type)


class ConversionFailedError(ConversionError):
    """Raised when a resolved conversion runs but does not succeed.

    This covers callables that signal failure through a trailing ``False`` or
    error output, as well as callables that raise. The original exception,
    where there is one, is available as ``__cause__``.
    """


class InvalidShapeError(ConversionFailedError):
    """Raised when a callable is invoked with, or returns, the wrong arity."""


class DuplicateRegistrationError(ConversionError, ValueError):
    """Raised at registration time when a conversion shape is already taken.

    Attributes:
        key: The canonical signature that clashed.
    """

    def __init__(self, key: str, fn: Any = None) -> None:
        self.key = key
        self.fn = fn
        super().__init__(f"Conversion already registered for signature: {key}")
