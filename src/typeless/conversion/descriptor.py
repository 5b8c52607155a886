"""Descriptors for registered and synthesized conversions."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Self

from typeless.types.signature import format_signature, signature_of_callable
from typeless.types.tags import BOOL_TAG, ERROR_TAG, TypeTags, default_tags


class SuccessKind(Enum):
    """How a descriptor's last declared output should be interpreted."""

    NONE = "none"
    """The last output is an ordinary result."""

    BOOLEAN = "bool"
    """The last output is a flag that must be ``True``."""

    ERRORLIKE = "error"
    """The last output is an error that must be ``None``."""


_SUCCESS_KINDS = {BOOL_TAG: SuccessKind.BOOLEAN, ERROR_TAG: SuccessKind.ERRORLIKE}


@dataclass(slots=True)
class CallableDescriptor:
    """One registered or synthesized conversion unit.

    A descriptor is either *direct*, wrapping a callable in ``invoker``, or
    *synthetic*, naming an ordered ``chain`` of other registry keys which
    are invoked in turn.

    Attributes:
        name: Optional identifier, empty for anonymous registrations.
        arg_types: Argument tags in call order.
        out_types: All declared output tags, including any status indicator.
        success_kind: Whether the last output is a status indicator.
        primary_out_count: Number of outputs excluding the status indicator.
        chain: Registry keys of the chain members; empty for direct descriptors.
        used: Whether the descriptor has joined a synthesized chain.
        invoker: The underlying callable, or None for synthetic descriptors.
    """

    name: str
    arg_types: tuple[str, ...]
    out_types: tuple[str, ...]
    success_kind: SuccessKind = SuccessKind.NONE
    primary_out_count: int = 0
    chain: tuple[str, ...] = ()
    used: bool = False
    invoker: Callable[..., Any] | None = None

    @classmethod
    def from_callable(
        cls,
        fn: Callable[..., Any],
        name: str = "",
        tags: TypeTags = default_tags,
    ) -> Self:
        """Describe ``fn`` for registration.

        A trailing ``bool`` or error-typed output is taken as a success
        indicator rather than a result, even when it is the only output.

        Raises:
            TypeError: If the callable's signature can't be described.
        """
        arg_types, out_types = signature_of_callable(fn, tags)
        success_kind = SuccessKind.NONE
        primary_out_count = len(out_types)
        if out_types and (kind := _SUCCESS_KINDS.get(out_types[-1])) is not None:
            success_kind = kind
            primary_out_count -= 1
        return cls(
            name=name,
            arg_types=tuple(arg_types),
            out_types=tuple(out_types),
            success_kind=success_kind,
            primary_out_count=primary_out_count,
            invoker=fn,
        )

    @classmethod
    def synthetic(cls, arg_types: Sequence[str], target_tp: str, chain: Sequence[str]) -> Self:
        """Describe a discovered chain producing ``target_tp`` from ``arg_types``."""
        return cls(
            name="",
            arg_types=tuple(arg_types),
            out_types=(target_tp,),
            primary_out_count=1,
            chain=tuple(chain),
        )

    @property
    def primary_out_types(self) -> tuple[str, ...]:
        return self.out_types[: self.primary_out_count]

    @property
    def is_synthetic(self) -> bool:
        return bool(self.chain)

    @property
    def key(self) -> str:
        """The canonical key this descriptor is registered under."""
        return format_signature(self.name, self.arg_types, self.primary_out_types)

    @property
    def shape_key(self) -> str:
        """The canonical key ignoring the name, used to detect duplicate shapes."""
        return format_signature("", self.arg_types, self.primary_out_types)
