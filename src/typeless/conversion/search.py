"""Composition search: discovering chains of conversions.

When no registered conversion maps the caller's argument types straight to
the target type, the registry asks a :class:`ChainSearch` for an ordered
chain of conversions that does.

Chains thread values through a FIFO queue. Each step takes its arguments
first from the outputs queued by earlier steps (oldest first), then from the
caller's original arguments, in order. Original arguments are never
reordered or skipped, and a chain is only complete once every original
argument has been consumed.

Example:
    With ``join: (str, str) -> str`` registered next to the built-ins,
    converting ``("10", "1")`` to ``int`` finds the chain ``join, str_to_int``:
    ``join`` consumes both strings and ``str_to_int`` consumes its output.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from typeless.conversion.descriptor import CallableDescriptor
from typeless.settings import CompositionSettings

if TYPE_CHECKING:
    from typeless.conversion.registry import ConverterRegistry

logger = getLogger(__name__)


@runtime_checkable
class ChainSearch(Protocol):
    def find_chain(
        self,
        registry: ConverterRegistry,
        target_tp: str,
        arg_types: Sequence[str],
    ) -> list[str] | None:
        """Find a chain of registered conversions producing ``target_tp``.

        Args:
            registry: The registry to search. This is a private fork, so the
                search may read it freely without observing concurrent writes.
            target_tp: Tag of the requested result type.
            arg_types: Tags of the caller's arguments, in order.

        Returns:
            The registry keys of the chain members in call order, or None if
            no chain was found.
        """
        ...


def args_compare(prefix: Sequence[str], args: Sequence[str], required: Sequence[str]) -> bool:
    """Check whether ``required`` argument types can be satisfied.

    Positions covered by ``prefix`` (values produced earlier in a chain) are
    matched against it; the remaining positions are matched against ``args``
    in order.

    Example:
        >>> args_compare(["int"], ["str"], ["int", "str"])
        True
        >>> args_compare(["int"], ["str"], ["str", "int"])
        False
    """
    if len(prefix) + len(args) < len(required):
        return False
    n_prefix = len(prefix)
    return all(
        tp == (prefix[i] if i < n_prefix else args[i - n_prefix]) for i, tp in enumerate(required)
    )


def consume(
    prefix: Sequence[str], args: Sequence[str], required: Sequence[str]
) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Split off what a step consumes.

    Returns:
        The prefix entries left unconsumed and the original arguments left
        unconsumed, in that order.
    """
    taken = min(len(prefix), len(required))
    return tuple(prefix[taken:]), tuple(args[len(required) - taken :])


@dataclass
class _SearchState:
    target_tp: str
    candidates: list[CallableDescriptor]
    bound: int
    depths: list[int] = field(default_factory=list)
    path: list[int] | None = None


class DepthBoundedSearch(ChainSearch):
    """Depth-first search for a short conversion chain.

    Every descriptor with a primary output is a candidate step. Seeds are
    candidates that can be called on the original arguments alone and that
    don't already produce the target (those would have been an exact match).

    The search keeps a bound on chain depth, initially half the number of
    candidates capped at ``settings.max_depth``. A chain ending below the
    bound is accepted immediately and becomes the new bound, so later seeds
    can only replace it with something strictly shorter. The result is a
    short chain but not necessarily the globally shortest one.

    Each candidate remembers the depth it was last visited at; revisiting it
    deeper than that is pruned, which keeps cycles from being explored.
    """

    def __init__(self, settings: CompositionSettings | None = None) -> None:
        self._settings = settings or CompositionSettings()

    def find_chain(
        self,
        registry: ConverterRegistry,
        target_tp: str,
        arg_types: Sequence[str],
    ) -> list[str] | None:
        items = registry.items()
        keys = [key for key, _ in items]
        state = _SearchState(
            target_tp=target_tp,
            candidates=[descriptor for _, descriptor in items],
            bound=min(len(items) // 2, self._settings.max_depth),
            depths=[0] * len(items),
        )
        args = tuple(arg_types)

        for idx, seed in enumerate(state.candidates):
            if seed.primary_out_count == 0 or seed.primary_out_types[0] == target_tp:
                continue
            if not args_compare((), args, seed.arg_types):
                continue
            _, remaining = consume((), args, seed.arg_types)
            self._walk(state, seed.primary_out_types, remaining, 0, [idx])

        if state.path is None:
            return None
        chain = [keys[it] for it in state.path]
        logger.debug("Found chain of length %d for %s: %s", len(chain), target_tp, chain)
        return chain

    def _walk(
        self,
        state: _SearchState,
        prefix: tuple[str, ...],
        args: tuple[str, ...],
        depth: int,
        order: list[int],
    ) -> bool:
        if depth >= state.bound:
            return False
        seed, last = order[0], order[-1]
        depth += 1
        found = False

        for i, node in enumerate(state.candidates):
            if i == seed or i == last:
                continue
            if state.depths[i] and state.depths[i] < depth:
                continue
            if node.primary_out_count == 0:
                continue
            if not args_compare(prefix, args, node.arg_types):
                continue

            rest, remaining = consume(prefix, args, node.arg_types)

            if node.primary_out_types[0] == state.target_tp:
                # a chain that leaves caller arguments unused is not a solution
                if remaining:
                    continue
                state.depths[i] = depth
                if depth < state.bound:
                    state.bound = depth
                    state.path = [*order, i]
                    return True
                continue

            state.depths[i] = depth
            if self._walk(state, rest + node.primary_out_types, remaining, depth, [*order, i]):
                found = True

        return found
