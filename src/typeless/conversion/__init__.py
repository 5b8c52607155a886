from typeless.conversion.builtins import builtin_conversions, register_builtins
from typeless.conversion.descriptor import CallableDescriptor, SuccessKind
from typeless.conversion.registry import ConverterRegistry
from typeless.conversion.search import ChainSearch, DepthBoundedSearch

default_registry = ConverterRegistry()
register_builtins(default_registry)

__all__ = [
    "CallableDescriptor",
    "ChainSearch",
    "ConverterRegistry",
    "DepthBoundedSearch",
    "SuccessKind",
    "builtin_conversions",
    "default_registry",
    "register_builtins",
]
