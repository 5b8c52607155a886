"""Built-in primitive conversions.

These cover the fixed-width integers in :mod:`typeless.numeric`, Python's
``int`` and ``float``, and their string forms. Narrowing and sign-changing
conversions report whether the value survived through a trailing ``bool``,
so out-of-range values fail instead of wrapping silently.

Longer conversions, such as ``str`` to ``Int8``, are not listed here: the
registry composes them from these steps on demand.
"""

from collections.abc import Callable
from typing import Any, TypeVar

from typeless.conversion.registry import ConverterRegistry
from typeless.numeric import (
    FixedWidthInt,
    Int8,
    Int16,
    Int32,
    Int64,
    UInt,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)

_TRUE_STRINGS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_STRINGS = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_T = TypeVar("_T", bound=FixedWidthInt)


def _checked(cls: type[_T], value: int) -> tuple[_T, bool]:
    return cls(value), cls.fits(value)


def _parse_fixed(cls: type[_T], s: str) -> _T:
    value = int(s, 10)
    if not cls.fits(value):
        raise ValueError(f"value out of range for {cls.tag}: {s!r}")
    return cls(value)


# sign changes


def int8_to_uint8(i: Int8) -> tuple[UInt8, bool]:
    return _checked(UInt8, i)


def uint8_to_int8(i: UInt8) -> tuple[Int8, bool]:
    return _checked(Int8, i)


def int64_to_uint64(i: Int64) -> tuple[UInt64, bool]:
    return _checked(UInt64, i)


def uint64_to_int64(i: UInt64) -> tuple[Int64, bool]:
    return _checked(Int64, i)


# signed widening


def int8_to_int16(i: Int8) -> Int16:
    return Int16(i)


def int16_to_int32(i: Int16) -> Int32:
    return Int32(i)


def int32_to_int64(i: Int32) -> Int64:
    return Int64(i)


def int_to_int64(i: int) -> tuple[Int64, bool]:
    return _checked(Int64, i)


# signed narrowing


def int64_to_int32(i: Int64) -> tuple[Int32, bool]:
    return _checked(Int32, i)


def int64_to_int(i: Int64) -> int:
    return int(i)


def int32_to_int16(i: Int32) -> tuple[Int16, bool]:
    return _checked(Int16, i)


def int16_to_int8(i: Int16) -> tuple[Int8, bool]:
    return _checked(Int8, i)


# unsigned widening


def uint8_to_uint16(i: UInt8) -> UInt16:
    return UInt16(i)


def uint16_to_uint32(i: UInt16) -> UInt32:
    return UInt32(i)


def uint32_to_uint64(i: UInt32) -> UInt64:
    return UInt64(i)


# unsigned narrowing


def uint64_to_uint32(i: UInt64) -> tuple[UInt32, bool]:
    return _checked(UInt32, i)


def uint64_to_uint(i: UInt64) -> tuple[UInt, bool]:
    return _checked(UInt, i)


def uint32_to_uint16(i: UInt32) -> tuple[UInt16, bool]:
    return _checked(UInt16, i)


def uint16_to_uint8(i: UInt16) -> tuple[UInt8, bool]:
    return _checked(UInt8, i)


# strings


def int64_to_str(i: Int64) -> str:
    return str(int(i))


def uint64_to_str(i: UInt64) -> str:
    return str(int(i))


def str_to_int(s: str) -> int:
    return int(s, 10)


def str_to_int64(s: str) -> Int64:
    return _parse_fixed(Int64, s)


def str_to_uint64(s: str) -> UInt64:
    return _parse_fixed(UInt64, s)


def str_to_float(s: str) -> float:
    return float(s)


def str_to_bool(s: str) -> tuple[bool, ValueError | None]:
    if s in _TRUE_STRINGS:
        return True, None
    if s in _FALSE_STRINGS:
        return False, None
    return False, ValueError(f"invalid boolean literal: {s!r}")


def builtin_conversions() -> list[Callable[..., Any]]:
    """Return the built-in conversion callables, in registration order."""
    return [
        int8_to_uint8,
        uint8_to_int8,
        int64_to_uint64,
        uint64_to_int64,
        int8_to_int16,
        int16_to_int32,
        int32_to_int64,
        int_to_int64,
        int64_to_int32,
        int64_to_int,
        int32_to_int16,
        int16_to_int8,
        uint8_to_uint16,
        uint16_to_uint32,
        uint32_to_uint64,
        uint64_to_uint32,
        uint64_to_uint,
        uint32_to_uint16,
        uint16_to_uint8,
        int64_to_str,
        uint64_to_str,
        str_to_int,
        str_to_int64,
        str_to_uint64,
        str_to_float,
        str_to_bool,
    ]


def register_builtins(registry: ConverterRegistry) -> list[str]:
    """Register the built-in conversions on ``registry`` in a single batch."""
    return registry.register(*builtin_conversions())
