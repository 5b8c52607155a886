import pytest

from typeless.caller import CallFailedError, Caller, NotEnoughArgumentsError


def parse(s: str) -> int:
    return int(s)


def add(a: int, b: int) -> int:
    return a + b


def checked_half(i: int) -> tuple[int, bool]:
    return i // 2, i % 2 == 0


def parse_bool(s: str) -> tuple[bool, ValueError | None]:
    if s in ("true", "false"):
        return s == "true", None
    return False, ValueError(f"not a boolean: {s!r}")


def nothing() -> None:
    pass


def total(*values: int) -> int:
    return sum(values)


def test_call_takes_following_arguments() -> None:
    c = Caller().call(1, 2, parse, "3")

    assert c.ok
    assert c.error is None
    assert c.args == [1, 2]
    assert c.out() == [(3,)]


def test_push_takes_spare_arguments_and_queues_result() -> None:
    c = Caller().push(1, "3", parse)

    assert c.args == [1, 3]


def test_push_threads_results_into_next_call() -> None:
    c = Caller().push("40", parse, add, 2)

    assert c.args == [42]
    assert c.out(0) == [(40,), (42,)]


def test_spare_arguments_come_before_following_arguments() -> None:
    def pair(a: int, b: str) -> str:
        return f"{a}{b}"

    assert Caller().push(1, pair, "x").args == ["1x"]


def test_true_status_is_not_queued() -> None:
    c = Caller().push(8, checked_half)

    assert c.ok
    assert c.args == [4]
    assert c.out() == [(4, True)]


def test_false_status_stops_the_chain() -> None:
    c = Caller().push(7, checked_half, parse, "1")

    assert not c.ok
    assert isinstance(c.error, CallFailedError)
    assert c.out(0) == [(3, False)]


def test_error_status_is_recorded() -> None:
    c = Caller().call("maybe", parse_bool)

    assert not c.ok
    assert isinstance(c.error, ValueError)
    assert "maybe" in str(c.error)


def test_none_error_status_is_success() -> None:
    c = Caller().push("true", parse_bool)

    assert c.ok
    assert c.args == [True]


def test_raised_exception_is_recorded() -> None:
    c = Caller().call("x", parse)

    assert not c.ok
    assert isinstance(c.error, ValueError)
    assert c.out() == []


def test_not_enough_arguments() -> None:
    c = Caller().call(add, 1)

    assert not c.ok
    assert isinstance(c.error, NotEnoughArgumentsError)
    assert c.error.required == 2
    assert c.error.available == 1


def test_failed_caller_ignores_further_calls() -> None:
    c = Caller().call(add, 1)

    c.push(5, parse, "1")

    assert c.out() == []
    assert c.args == [1]
    assert isinstance(c.error, NotEnoughArgumentsError)


def test_variadic_callable_takes_all_following_arguments() -> None:
    c = Caller().push(1, total, 2, 3, 4)

    assert c.args == [1, 9]


def test_variadic_callable_stops_at_next_callable() -> None:
    c = Caller().push(total, 1, 2, parse, "5")

    assert c.args == [3, 5]


def test_callable_without_outputs_records_empty_result() -> None:
    c = Caller().push(nothing)

    assert c.ok
    assert c.out() == [()]
    assert c.args == []


def test_runtime_status_for_unannotated_callables() -> None:
    failed = Caller().call(1, lambda x: (x, False))
    errored = Caller().call(1, lambda x: (x, KeyError("missing")))
    succeeded = Caller().push(1, lambda x: (x + 1, True))

    assert isinstance(failed.error, CallFailedError)
    assert isinstance(errored.error, KeyError)
    assert succeeded.args == [2]


def test_declared_outputs_take_precedence_over_runtime_values() -> None:
    def describe(i: int) -> tuple[str, object]:
        return str(i), False

    c = Caller().push(1, describe)

    assert c.ok
    assert c.args == ["1", False]


@pytest.mark.parametrize(
    ("bounds", "expected"),
    [
        pytest.param((), [(3,)], id="last"),
        pytest.param((0,), [(1,), (2,), (3,)], id="from_start"),
        pytest.param((1,), [(2,), (3,)], id="from_index"),
        pytest.param((0, 1), [(1,)], id="slice"),
        pytest.param((-2,), [(2,), (3,)], id="negative_start"),
        pytest.param((0, -1), [(1,), (2,)], id="negative_end"),
        pytest.param((2, 0), [(1,), (2,)], id="reversed"),
        pytest.param((1, 1), [(1,), (2,), (3,)], id="equal_bounds"),
    ],
)
def test_out(bounds: tuple[int, ...], expected) -> None:
    c = Caller().call(parse, "1", parse, "2", parse, "3")

    assert c.out(*bounds) == expected


def test_out_with_single_result() -> None:
    assert Caller().call(parse, "1").out() == [(1,)]
