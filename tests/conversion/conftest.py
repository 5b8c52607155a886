from collections.abc import Sequence

import pytest

from typeless.conversion.builtins import register_builtins
from typeless.conversion.registry import ConverterRegistry
from typeless.conversion.search import DepthBoundedSearch
from typeless.settings import CompositionSettings


def join(a: str, b: str) -> str:
    return a + b


class CountingSearch(DepthBoundedSearch):
    """Depth-bounded search that records every request it receives."""

    def __init__(self, settings: CompositionSettings | None = None) -> None:
        super().__init__(settings)
        self.calls: list[tuple[str, tuple[str, ...]]] = []

    def find_chain(
        self,
        registry: ConverterRegistry,
        target_tp: str,
        arg_types: Sequence[str],
    ) -> list[str] | None:
        self.calls.append((target_tp, tuple(arg_types)))
        return super().find_chain(registry, target_tp, arg_types)


@pytest.fixture
def search() -> CountingSearch:
    return CountingSearch()


@pytest.fixture
def empty_registry(search: CountingSearch) -> ConverterRegistry:
    return ConverterRegistry(search=search)


@pytest.fixture
def registry(search: CountingSearch) -> ConverterRegistry:
    """A registry with the built-in conversions plus a named string join."""
    registry = ConverterRegistry(search=search)
    register_builtins(registry)
    registry.register({"join": join})
    return registry
