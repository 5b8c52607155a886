"""Invocation of resolved conversions.

A resolved descriptor is either a single callable, invoked with the caller's
arguments as-is, or a synthetic chain. Chain members are invoked in order;
each takes its arguments first from the outputs of earlier members (oldest
first) and then from the caller's remaining arguments.

After every invocation a trailing status output is checked: a ``bool`` must
be ``True`` and an error must be ``None``. Anything else aborts the whole
conversion with :class:`ConversionFailedError`.
"""

from collections import deque
from collections.abc import Callable, Sequence
from logging import getLogger
from typing import Any

from typeless.conversion.descriptor import CallableDescriptor, SuccessKind
from typeless.conversion.exceptions import (
    ConversionError,
    ConversionFailedError,
    InvalidShapeError,
)

logger = getLogger(__name__)

#: Looks up a chain member by its registry key.
DescriptorLookup = Callable[[str], CallableDescriptor | None]


def _split_outputs(descriptor: CallableDescriptor, result: Any) -> list[Any]:
    n_outs = len(descriptor.out_types)
    if n_outs == 0:
        return []
    if n_outs == 1:
        return [result]
    if not isinstance(result, tuple) or len(result) != n_outs:
        raise InvalidShapeError(
            f"Expected {n_outs} outputs from {descriptor.key}, got {result!r}",
            source=result,
        )
    return list(result)


def _check_status(descriptor: CallableDescriptor, outputs: list[Any]) -> list[Any]:
    """Validate the trailing status output and return the primary outputs."""
    match descriptor.success_kind:
        case SuccessKind.BOOLEAN:
            if outputs[-1] is not True:
                raise ConversionFailedError(f"Conversion failed: {descriptor.key} reported failure")
        case SuccessKind.ERRORLIKE:
            error = outputs[-1]
            if error is not None:
                message = f"Conversion failed: {descriptor.key}: {error}"
                if isinstance(error, BaseException):
                    raise ConversionFailedError(message) from error
                raise ConversionFailedError(message)
    return outputs[: descriptor.primary_out_count]


def _invoke(
    descriptor: CallableDescriptor,
    args: Sequence[Any],
    lookup: DescriptorLookup,
) -> list[Any]:
    if len(args) != len(descriptor.arg_types):
        raise InvalidShapeError(
            f"{descriptor.key} takes {len(descriptor.arg_types)} arguments, got {len(args)}",
            source=args,
        )
    if descriptor.is_synthetic:
        return [_run_chain(descriptor, args, lookup)]
    if descriptor.invoker is None:
        raise InvalidShapeError(f"{descriptor.key} has nothing to invoke")

    result = descriptor.invoker(*args)
    return _check_status(descriptor, _split_outputs(descriptor, result))


def _run_chain(
    descriptor: CallableDescriptor,
    args: Sequence[Any],
    lookup: DescriptorLookup,
) -> Any:
    pending: deque[Any] = deque()
    position = 0
    outputs: list[Any] = []

    for key in descriptor.chain:
        member = lookup(key)
        if member is None:
            raise InvalidShapeError(f"Chain member {key} is not registered")

        required = len(member.arg_types)
        from_pending = min(len(pending), required)
        from_args = required - from_pending
        call_args = [pending.popleft() for _ in range(from_pending)]
        call_args.extend(args[position : position + from_args])
        position += from_args

        outputs = _invoke(member, call_args, lookup)
        pending.extend(outputs)

    if not outputs:
        raise InvalidShapeError(f"Chain for {descriptor.key} produced no output")
    return outputs[0]


def execute(
    descriptor: CallableDescriptor,
    args: Sequence[Any],
    lookup: DescriptorLookup,
) -> Any:
    """Run a resolved conversion against concrete argument values.

    Args:
        descriptor: The resolved descriptor, direct or synthetic.
        args: The caller's argument values.
        lookup: Resolves chain member keys to descriptors.

    Returns:
        The first primary output of the callable, or of the last chain member.

    Raises:
        ConversionFailedError: If any invoked callable reports failure or
            raises. Shape mismatches raise the InvalidShapeError subclass.
    """
    try:
        outputs = _invoke(descriptor, args, lookup)
    except ConversionError as e:
        logger.debug("Conversion %s failed: %s", descriptor.key, e)
        raise
    except Exception as e:
        logger.debug("Conversion %s raised %r", descriptor.key, e)
        raise ConversionFailedError(
            f"Conversion failed: {descriptor.key}: {e}", source=args
        ) from e

    if not outputs:
        raise InvalidShapeError(f"{descriptor.key} has no result output", source=args)
    return outputs[0]
