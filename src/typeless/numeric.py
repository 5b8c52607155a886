"""Fixed-width integer value types.

Python has a single unbounded ``int``, which leaves nothing to tell an 8-bit
value from a 64-bit one at runtime. These ``int`` subclasses carry that
distinction so the conversion registry can key conversions on it.

Construction behaves like a two's-complement cast: out-of-range values wrap
modulo ``2 ** bits``. Use :meth:`FixedWidthInt.fits` to check a value first.

Example:
    >>> UInt8(300)
    UInt8(44)
    >>> Int8(200)
    Int8(-56)
    >>> UInt8.fits(300)
    False
"""

from typing import Any, ClassVar, SupportsInt

from typeless.types.tags import default_tags


class FixedWidthInt(int):
    """Base class for fixed-width integers.

    Attributes:
        bits: Width of the type in bits.
        signed: Whether the type is signed.
        tag: The type tag the class is registered under.
    """

    bits: ClassVar[int]
    signed: ClassVar[bool]
    tag: ClassVar[str]

    def __new__(cls, value: SupportsInt | str = 0) -> Any:
        raw = int(value)
        wrapped = raw & ((1 << cls.bits) - 1)
        if cls.signed and wrapped >= 1 << (cls.bits - 1):
            wrapped -= 1 << cls.bits
        return super().__new__(cls, wrapped)

    def __init_subclass__(cls, *, bits: int, signed: bool, tag: str, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.bits = bits
        cls.signed = signed
        cls.tag = tag
        default_tags.assign(cls, tag)

    @classmethod
    def min_value(cls) -> int:
        return -(1 << (cls.bits - 1)) if cls.signed else 0

    @classmethod
    def max_value(cls) -> int:
        return (1 << (cls.bits - 1)) - 1 if cls.signed else (1 << cls.bits) - 1

    @classmethod
    def fits(cls, value: int) -> bool:
        """Check whether ``value`` is representable without wrapping."""
        return cls.min_value() <= int(value) <= cls.max_value()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({int(self)})"

    def __str__(self) -> str:
        return int.__repr__(self)


class Int8(FixedWidthInt, bits=8, signed=True, tag="int8"):
    pass


class Int16(FixedWidthInt, bits=16, signed=True, tag="int16"):
    pass


class Int32(FixedWidthInt, bits=32, signed=True, tag="int32"):
    pass


class Int64(FixedWidthInt, bits=64, signed=True, tag="int64"):
    pass


class UInt8(FixedWidthInt, bits=8, signed=False, tag="uint8"):
    pass


class UInt16(FixedWidthInt, bits=16, signed=False, tag="uint16"):
    pass


class UInt32(FixedWidthInt, bits=32, signed=False, tag="uint32"):
    pass


class UInt64(FixedWidthInt, bits=64, signed=False, tag="uint64"):
    pass


class UInt(FixedWidthInt, bits=64, signed=False, tag="uint"):
    pass
