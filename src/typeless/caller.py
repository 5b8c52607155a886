"""Chained invocation of callables over a shared argument queue.

A :class:`Caller` is fed a flat sequence of items. Non-callables are queued
as spare arguments; each callable is invoked with the non-callables that
follow it, topped up from the end of the spare queue when there are too few.

Example::

    def parse(s: str) -> int:
        return int(s)


    c = Caller().call(1, 2, parse, "3")
    # invokes parse("3"); the spare queue is now [1, 2]

    c = Caller().push(1, "3", parse)
    # nothing follows parse, so "3" is taken from the spare queue and the
    # result is queued in its place: [1, 3]

A callable reports failure through a trailing status output, the same way
conversion callables do: a ``bool`` that must be ``True``, or an exception
that must be ``None``. A callable raising is also a failure. The first
failure stops the chain and every later call is ignored.
"""

import inspect
from collections.abc import Callable, Sequence
from logging import getLogger
from typing import Any, Self

from typeless.conversion.descriptor import CallableDescriptor, SuccessKind

logger = getLogger(__name__)


class CallFailedError(Exception):
    """Reported by :attr:`Caller.error` after a callable returns a ``False`` status."""

    def __init__(self, message: str = "call failed") -> None:
        super().__init__(message)


class NotEnoughArgumentsError(Exception):
    """Recorded when a callable needs more arguments than are available."""

    def __init__(self, fn: Callable[..., Any], required: int, available: int) -> None:
        self.fn = fn
        self.required = required
        self.available = available
        super().__init__(
            f"not enough arguments for {fn!r}: requires {required}, have {available}"
        )


def _arity(fn: Callable[..., Any]) -> tuple[int, bool]:
    """Number of required positional parameters, and whether ``fn`` takes ``*args``."""
    params = inspect.signature(fn).parameters.values()
    positional = sum(
        1
        for p in params
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD) and p.default is p.empty
    )
    variadic = any(p.kind is p.VAR_POSITIONAL for p in params)
    return positional, variadic


def _declared_status(fn: Callable[..., Any]) -> SuccessKind | None:
    try:
        return CallableDescriptor.from_callable(fn).success_kind
    except TypeError:
        return None


def _runtime_status(outputs: Sequence[Any]) -> SuccessKind:
    if len(outputs) < 2:
        return SuccessKind.NONE
    last = outputs[-1]
    if isinstance(last, bool):
        return SuccessKind.BOOLEAN
    if isinstance(last, BaseException):
        return SuccessKind.ERRORLIKE
    return SuccessKind.NONE


def _as_outputs(result: Any) -> tuple[Any, ...]:
    if result is None:
        return ()
    if isinstance(result, tuple):
        return result
    return (result,)


class Caller:
    """Invoke callables in sequence, threading arguments and results.

    Every invocation appends its full output tuple to the result history,
    status included, even when the callable returns nothing.
    """

    def __init__(self) -> None:
        self._args: list[Any] = []
        self._outs: list[tuple[Any, ...]] = []
        self._failed = False
        self._error: BaseException | None = None

    @property
    def args(self) -> list[Any]:
        """A copy of the spare argument queue."""
        return list(self._args)

    @property
    def ok(self) -> bool:
        """True until a callable raises, returns a false status or lacks arguments."""
        return self._error is None and not self._failed

    @property
    def error(self) -> BaseException | None:
        if self._error is not None:
            return self._error
        if self._failed:
            return CallFailedError()
        return None

    def call(self, *items: Any) -> Self:
        """Queue non-callables and invoke callables; results are only recorded."""
        return self._run(items, push=False)

    def push(self, *items: Any) -> Self:
        """Like :meth:`call`, but queue each result's primary outputs as spare arguments."""
        return self._run(items, push=True)

    def out(self, start: int | None = None, end: int | None = None) -> list[tuple[Any, ...]]:
        """Return recorded results.

        With no arguments, returns a list holding only the most recent result.
        ``start`` alone returns everything from ``start`` onwards. Negative
        bounds count from the end, reversed bounds are swapped, and equal
        bounds return every result.
        """
        n = len(self._outs)
        s, e = (n - 1 if n > 1 else 0), n
        if start is not None:
            s = start
        if end is not None:
            e = end
        if s < 0:
            s += n
        if e < 0:
            e += n
        if s > e:
            s, e = e, s
        if s == e:
            return list(self._outs)
        return self._outs[s:e]

    def _run(self, items: Sequence[Any], *, push: bool) -> Self:
        if not self.ok:
            return self

        i = 0
        while i < len(items):
            item = items[i]
            i += 1
            if not callable(item):
                self._args.append(item)
                continue

            try:
                arity, variadic = _arity(item)
            except (TypeError, ValueError) as e:
                self._error = e
                return self

            taken = 0
            while i < len(items) and not callable(items[i]) and (variadic or taken < arity):
                self._args.append(items[i])
                taken += 1
                i += 1

            n_args = max(taken, arity) if variadic else arity
            if len(self._args) < n_args:
                self._error = NotEnoughArgumentsError(item, n_args, len(self._args))
                logger.debug("Call chain stopped: %s", self._error)
                return self

            call_args = self._args[len(self._args) - n_args :]
            del self._args[len(self._args) - n_args :]

            try:
                outputs = _as_outputs(item(*call_args))
            except Exception as e:
                logger.debug("Call chain stopped: %r raised %r", item, e)
                self._error = e
                return self

            self._outs.append(outputs)
            if not outputs:
                continue

            kind = _declared_status(item)
            if kind is None:
                kind = _runtime_status(outputs)

            match kind:
                case SuccessKind.BOOLEAN:
                    if outputs[-1] is not True:
                        logger.debug("Call chain stopped: %r reported failure", item)
                        self._failed = True
                        return self
                    outputs = outputs[:-1]
                case SuccessKind.ERRORLIKE:
                    if outputs[-1] is not None:
                        logger.debug("Call chain stopped: %r returned %r", item, outputs[-1])
                        self._error = outputs[-1]
                        return self
                    outputs = outputs[:-1]

            if push:
                self._args.extend(outputs)

        return self
