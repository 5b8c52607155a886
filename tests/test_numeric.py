import pytest

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


@pytest.mark.parametrize(
    ("cls", "min_value", "max_value"),
    [
        (Int8, -128, 127),
        (Int16, -(2**15), 2**15 - 1),
        (Int32, -(2**31), 2**31 - 1),
        (Int64, -(2**63), 2**63 - 1),
        (UInt8, 0, 255),
        (UInt16, 0, 2**16 - 1),
        (UInt32, 0, 2**32 - 1),
        (UInt64, 0, 2**64 - 1),
        (UInt, 0, 2**64 - 1),
    ],
)
def test_bounds(cls: type[FixedWidthInt], min_value: int, max_value: int) -> None:
    assert cls.min_value() == min_value
    assert cls.max_value() == max_value
    assert cls.fits(min_value)
    assert cls.fits(max_value)
    assert not cls.fits(min_value - 1)
    assert not cls.fits(max_value + 1)


@pytest.mark.parametrize(
    ("cls", "value", "expected"),
    [
        pytest.param(Int8, 127, 127, id="int8_max"),
        pytest.param(Int8, 128, -128, id="int8_wraps_up"),
        pytest.param(Int8, -129, 127, id="int8_wraps_down"),
        pytest.param(Int8, 200, -56, id="int8_200"),
        pytest.param(UInt8, 300, 44, id="uint8_300"),
        pytest.param(UInt8, -1, 255, id="uint8_negative"),
        pytest.param(UInt64, -1, 2**64 - 1, id="uint64_negative"),
        pytest.param(Int64, 2**63, -(2**63), id="int64_overflow"),
    ],
)
def test_construction_wraps(cls: type[FixedWidthInt], value: int, expected: int) -> None:
    assert cls(value) == expected


def test_construction_from_string() -> None:
    assert Int16("-12") == -12


def test_values_behave_like_int() -> None:
    value = Int8(5)

    assert isinstance(value, int)
    assert value + 1 == 6
    assert hash(value) == hash(5)


def test_repr_and_str() -> None:
    assert repr(Int8(-3)) == "Int8(-3)"
    assert str(UInt16(7)) == "7"
    assert f"{Int32(9)}" == "9"


@pytest.mark.parametrize(
    ("cls", "tag", "bits", "signed"),
    [
        (Int8, "int8", 8, True),
        (UInt32, "uint32", 32, False),
        (UInt, "uint", 64, False),
    ],
)
def test_class_attributes(cls: type[FixedWidthInt], tag: str, bits: int, signed: bool) -> None:
    assert cls.tag == tag
    assert cls.bits == bits
    assert cls.signed is signed


def test_distinct_widths_are_distinct_types() -> None:
    assert type(Int8(1)) is not type(Int16(1))
    assert Int8(1) == Int16(1)
