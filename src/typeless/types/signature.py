"""Canonical signatures for values and callables.

A callable's convertible shape is described by the tags of its positional
parameters and of its declared outputs. Both are rendered into a single
canonical string, e.g.::

    func(str) int
    func(int8) (uint8, bool)
    func join(str, str) str

These strings are used as dictionary keys by the conversion registry, so
they must be deterministic: the same callable shape always produces the
same key.
"""

import inspect
from collections.abc import Callable, Sequence
from types import BuiltinFunctionType, FunctionType, MethodType
from typing import Any, get_args, get_origin

from typing_extensions import Format, get_annotations

from typeless.types.annotations import unwrap
from typeless.types.tags import ERROR_TAG, NONE_TAG, TypeTags, default_tags

_UNSUPPORTED_KINDS = {
    inspect.Parameter.VAR_POSITIONAL: "*args",
    inspect.Parameter.VAR_KEYWORD: "**kwargs",
    inspect.Parameter.KEYWORD_ONLY: "keyword-only",
}


def format_signature(name: str, arg_tags: Sequence[str], out_tags: Sequence[str]) -> str:
    """Render a canonical signature string.

    Args:
        name: Optional callable name; included after ``func`` when non-empty.
        arg_tags: Argument tags in call order.
        out_tags: Output tags.

    Returns:
        ``func[ name](a, b)`` followed by `` out`` for a single output or
        `` (o1, o2)`` for several.

    Example:
        >>> format_signature("", ["str", "str"], ["int"])
        'func(str, str) int'
    """
    head = f"func {name}" if name else "func"
    key = f"{head}({', '.join(arg_tags)})"
    if len(out_tags) == 1:
        key += f" {out_tags[0]}"
    elif len(out_tags) > 1:
        key += f" ({', '.join(out_tags)})"
    return key


def _split_outputs(return_tp: Any, tags: TypeTags) -> list[str]:
    return_tp = unwrap(return_tp)
    if return_tp is None or return_tp is type(None):
        return []
    if get_origin(return_tp) is tuple:
        args = get_args(return_tp)
        if args == ((),):
            return []
        if args and args[-1] is not Ellipsis:
            return [tags.tag_of(it) for it in args]
    return [tags.tag_of(return_tp)]


def signature_of_callable(
    fn: Callable[..., Any], tags: TypeTags = default_tags
) -> tuple[list[str], list[str]]:
    """Describe a callable as (argument tags, output tags).

    Only positional parameters are supported and every parameter, plus the
    return value, must be annotated. A ``tuple[A, B]`` return annotation
    declares two outputs; ``None`` declares none.

    Args:
        fn: The callable to describe.
        tags: The tag service to use.

    Returns:
        A pair of the argument tags and all declared output tags, including
        any trailing success indicator.

    Raises:
        TypeError: If ``fn`` is not callable, has unsupported parameters or
            is missing annotations.
    """
    if not callable(fn):
        raise TypeError(f"Expected a callable, got {type(fn).__name__}")

    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError) as e:
        raise TypeError(f"Cannot inspect the signature of {fn!r}") from e

    target = fn.__func__ if isinstance(fn, MethodType) else fn
    try:
        annotations = get_annotations(target, eval_str=True, format=Format.VALUE)
    except TypeError:
        annotations = {}

    arg_tags = []
    for param in sig.parameters.values():
        if (kind := _UNSUPPORTED_KINDS.get(param.kind)) is not None:
            raise TypeError(
                f"Cannot register {fn!r}: {kind} parameter '{param.name}' is not supported"
            )
        annotation = annotations.get(param.name, param.annotation)
        if annotation is inspect.Parameter.empty:
            raise TypeError(
                f"Cannot register {fn!r}: parameter '{param.name}' has no type annotation.\n"
                f"Hint: conversion callables must be fully annotated, e.g. def f(x: str) -> int"
            )
        arg_tags.append(tags.tag_of(annotation))

    return_tp = annotations.get("return", sig.return_annotation)
    if return_tp is inspect.Signature.empty:
        raise TypeError(f"Cannot register {fn!r}: missing return annotation")

    return arg_tags, _split_outputs(return_tp, tags)


def signature_of(value: Any, tags: TypeTags = default_tags) -> str:
    """Return the tag describing a runtime value.

    Plain functions are described by their full callable signature, so that
    function values can themselves be conversion arguments.
    """
    if value is None:
        return NONE_TAG
    if isinstance(value, BaseException):
        return ERROR_TAG
    if isinstance(value, (FunctionType, BuiltinFunctionType, MethodType)):
        try:
            arg_tags, out_tags = signature_of_callable(value, tags)
        except TypeError:
            return tags.tag_of(type(value))
        return format_signature("", arg_tags, out_tags)
    return tags.tag_of(type(value))


def signatures_of(*values: Any, tags: TypeTags = default_tags) -> list[str]:
    """Return the tags of several runtime values, in order."""
    return [signature_of(it, tags) for it in values]


def _is_type_form(target: Any) -> bool:
    return isinstance(target, type) or get_origin(target) is not None or target is Any


def signature_of_target(target: Any, tags: TypeTags = default_tags) -> str:
    """Return the tag of a requested conversion target.

    The target may be given either as a type (``int``, ``list[str]``) or as
    an example value whose type is wanted (``0``, ``""``).
    """
    if _is_type_form(target):
        return tags.tag_of(target)
    return signature_of(target, tags)
