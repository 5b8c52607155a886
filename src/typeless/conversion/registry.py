"""Conversion registry.

This module defines :class:`ConverterRegistry`, which owns every registered
conversion and answers "give me a value of type T from these arguments".

Key concepts:
    - CallableDescriptor: one conversion, direct or a synthesized chain
    - Canonical key: the signature string a descriptor is stored under
    - Unsolvable cache: keys for which composition search already failed

Resolution first looks for an exact key match. Failing that, it searches a
private fork of the registry for a chain of conversions, and stores any
chain it finds under the requested key so the next request is an exact
match.

Two independent reader/writer locks protect the registry: one for the
descriptors and their sorted key index, one for the unsolvable cache.
Registration is the only operation that holds both, always acquiring the
cache lock first.
"""

from __future__ import annotations

from bisect import insort
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import replace
from logging import getLogger
from typing import Any

from typeless.conversion.descriptor import CallableDescriptor
from typeless.conversion.exceptions import (
    DuplicateRegistrationError,
    InvalidArgumentsError,
    NotSupportedError,
)
from typeless.conversion.executor import execute
from typeless.conversion.search import ChainSearch, DepthBoundedSearch
from typeless.conversion.unsolvable import UnsolvableCache
from typeless.settings import CompositionSettings
from typeless.types.signature import format_signature, signature_of_target, signatures_of
from typeless.types.tags import TypeTags, default_tags
from typeless.utils.locks import ReadWriteLock

logger = getLogger(__name__)

#: A registration entry: a bare callable, or a mapping of names to callables
RegistryEntry = Callable[..., Any] | Mapping[str, Callable[..., Any]]


class ConverterRegistry:
    """Registry of conversions with automatic chain composition.

    Example::

        def join(a: str, b: str) -> str:
            return a + b


        registry = ConverterRegistry()
        register_builtins(registry)
        registry.register({"join": join})
        registry.convert(int, "10")  # 10, exact match on str_to_int
        registry.convert(int, "10", "1")  # 101, via join then str_to_int

    Attributes:
        _descriptors: Mapping of canonical key to descriptor.
        _keys: All keys of ``_descriptors``, kept sorted.
        _shapes: Unnamed keys of all descriptors, for duplicate detection.
        _unsolvable: Keys known to have no conversion.
    """

    def __init__(
        self,
        *,
        settings: CompositionSettings | None = None,
        search: ChainSearch | None = None,
        tags: TypeTags = default_tags,
    ) -> None:
        self._settings = settings or CompositionSettings()
        self._search = search or DepthBoundedSearch(self._settings)
        self._tags = tags
        self._descriptors: dict[str, CallableDescriptor] = {}
        self._keys: list[str] = []
        self._shapes: set[str] = set()
        self._lock = ReadWriteLock()
        self._unsolvable = UnsolvableCache()

    @property
    def settings(self) -> CompositionSettings:
        return self._settings

    @property
    def unsolvable(self) -> UnsolvableCache:
        return self._unsolvable

    # --- Registration ---

    def register(self, *entries: RegistryEntry) -> list[str]:
        """Register conversion callables.

        Every callable must be fully annotated with positional parameters
        only. A trailing ``bool`` or error-typed output is treated as a
        success indicator. The whole batch is validated before any of it is
        inserted, and the key index is re-sorted once per batch.

        Args:
            *entries: Callables, or mappings of names to callables.

        Returns:
            The canonical keys of the new descriptors, in registration order.

        Raises:
            DuplicateRegistrationError: If a callable has the same argument
                and primary output types as an existing conversion or another
                callable in the batch, whatever their names.
            TypeError: If a callable can't be described.
        """
        batch = [
            CallableDescriptor.from_callable(fn, name, self._tags)
            for name, fn in self._flatten(entries)
        ]

        with self._unsolvable.lock.read(), self._lock.write():
            seen: set[str] = set()
            for descriptor in batch:
                shape = descriptor.shape_key
                if shape in self._shapes or shape in seen or descriptor.key in self._descriptors:
                    raise DuplicateRegistrationError(descriptor.key, descriptor.invoker)
                seen.add(shape)

            for descriptor in batch:
                self._descriptors[descriptor.key] = descriptor
                self._shapes.add(descriptor.shape_key)
                self._keys.append(descriptor.key)
            self._keys.sort()

        keys = [it.key for it in batch]
        logger.debug("Registered %d conversions: %s", len(keys), keys)
        return keys

    @staticmethod
    def _flatten(entries: Sequence[RegistryEntry]) -> Iterator[tuple[str, Callable[..., Any]]]:
        for entry in entries:
            if isinstance(entry, Mapping):
                yield from entry.items()
            else:
                yield "", entry

    # --- Read access ---

    def get(self, key: str) -> CallableDescriptor | None:
        with self._lock.read():
            return self._descriptors.get(key)

    def keys(self) -> list[str]:
        """All registered keys, sorted."""
        with self._lock.read():
            return list(self._keys)

    def items(self) -> list[tuple[str, CallableDescriptor]]:
        """All (key, descriptor) pairs, in sorted key order."""
        with self._lock.read():
            return [(key, self._descriptors[key]) for key in self._keys]

    def descriptors(self) -> list[CallableDescriptor]:
        return [descriptor for _, descriptor in self.items()]

    def __contains__(self, key: object) -> bool:
        with self._lock.read():
            return key in self._descriptors

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._descriptors)

    # --- Snapshots ---

    def fork(self, *exclude_keys: str) -> ConverterRegistry:
        """Create an independent copy of this registry.

        Descriptors are copied by value. A descriptor is left out only if
        its key is excluded *and* it has never been used in a synthesized
        chain. Excluding conversions may open up chains that were previously
        impossible, so the unsolvable cache is only carried over when nothing
        is excluded.

        Args:
            *exclude_keys: Keys of unused descriptors to leave out.

        Returns:
            A new registry sharing settings, search and tags with this one.
        """
        fork = ConverterRegistry(settings=self._settings, search=self._search, tags=self._tags)
        excluded = frozenset(exclude_keys)

        if not excluded:
            fork._unsolvable = self._unsolvable.copy()

        with self._lock.read():
            for key in self._keys:
                descriptor = self._descriptors[key]
                if descriptor.used or key not in excluded:
                    fork._descriptors[key] = replace(descriptor)
                    fork._shapes.add(descriptor.shape_key)
                    fork._keys.append(key)

        return fork

    # --- Unsolvable cache ---

    def push_unsolvable(self, key: str) -> bool:
        """Record that ``key`` has no conversion. Returns False if already recorded."""
        added = self._unsolvable.add(key)
        if added:
            logger.debug("No conversion for %s; caching as unsolvable", key)
        return added

    def is_unsolvable(self, key: str) -> bool:
        return key in self._unsolvable

    # --- Resolution ---

    def resolve(self, target_tp: str, arg_types: Sequence[str]) -> CallableDescriptor | None:
        """Find or synthesize a conversion from ``arg_types`` to ``target_tp``.

        Args:
            target_tp: Tag of the requested result type.
            arg_types: Tags of the caller's arguments, in order.

        Returns:
            The descriptor to execute, or None if there is no conversion.
        """
        key = format_signature("", arg_types, [target_tp])

        if (descriptor := self.get(key)) is not None:
            return descriptor

        if self.is_unsolvable(key):
            return None

        chain = self._search.find_chain(self.fork(), target_tp, arg_types)
        if not chain:
            if self._settings.cache_unsolvable:
                self.push_unsolvable(key)
            return None

        with self._lock.write():
            if (existing := self._descriptors.get(key)) is not None:
                return existing
            descriptor = CallableDescriptor.synthetic(arg_types, target_tp, chain)
            for member_key in chain:
                if (member := self._descriptors.get(member_key)) is not None:
                    member.used = True
            self._descriptors[key] = descriptor
            self._shapes.add(descriptor.shape_key)
            insort(self._keys, key)

        logger.debug("Synthesized %s as chain %s", key, chain)
        return descriptor

    def convert(self, target: Any, *args: Any) -> Any:
        """Convert ``args`` into a value of the type of ``target``.

        Args:
            target: The desired type, or an example value of it.
            *args: The values to convert from, in order.

        Returns:
            The converted value.

        Raises:
            InvalidArgumentsError: If no arguments are given.
            NotSupportedError: If no conversion exists or can be composed.
            ConversionFailedError: If the conversion ran but failed.
        """
        if not args:
            raise InvalidArgumentsError("Conversion needs at least one argument")

        target_tp = signature_of_target(target, self._tags)
        arg_types = signatures_of(*args, tags=self._tags)

        descriptor = self.resolve(target_tp, arg_types)
        if descriptor is None:
            raise NotSupportedError(target_tp, arg_types, source=args)

        return execute(descriptor, args, self.get)
