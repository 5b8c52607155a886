from typing import Any

from typeless._version import __version__
from typeless.caller import Caller, CallFailedError, NotEnoughArgumentsError
from typeless.conversion import ConverterRegistry, default_registry
from typeless.conversion.exceptions import (
    ConversionError,
    ConversionFailedError,
    DuplicateRegistrationError,
    InvalidArgumentsError,
    InvalidShapeError,
    NotSupportedError,
)
from typeless.conversion.registry import RegistryEntry
from typeless.numeric import Int8, Int16, Int32, Int64, UInt, UInt8, UInt16, UInt32, UInt64
from typeless.settings import CompositionSettings
from typeless.types.signature import signature_of, signature_of_callable


def register(*entries: RegistryEntry) -> list[str]:
    """Register conversions on the process-wide default registry."""
    return default_registry.register(*entries)


def convert(target: Any, *args: Any) -> Any:
    """Convert ``args`` to the type of ``target`` using the default registry."""
    return default_registry.convert(target, *args)


__all__ = [
    "CallFailedError",
    "Caller",
    "CompositionSettings",
    "ConversionError",
    "ConversionFailedError",
    "ConverterRegistry",
    "DuplicateRegistrationError",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "InvalidArgumentsError",
    "InvalidShapeError",
    "NotEnoughArgumentsError",
    "NotSupportedError",
    "UInt",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "convert",
    "default_registry",
    "register",
    "signature_of",
    "signature_of_callable",
    "__version__",
]
