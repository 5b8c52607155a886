"""Type-tag assignment and interning.

Every type that takes part in conversion is identified by a plain string
tag. Tags are used to build the canonical signature keys under which
conversions are registered, so two different types never share one.

Most tags are derived from the type itself (``int``, ``str``,
``list[int]``, ``mypkg.models.User``), but types can also be bound to an
explicit tag with :meth:`TypeTags.assign`. This is how the fixed-width
integers in :mod:`typeless.numeric` get short tags such as ``int8``.

Tags derived for user classes are interned the first time they are seen.
A later, different class deriving the same name (two classes created by
one factory function, say) is told apart with an ``@<id>`` suffix.

A handful of literal tokens never expand to a concrete representation:

    - ``None``: the "no value" type.
    - ``any``: ``typing.Any`` and ``object``.
    - ``error``: any exception type, or a union of exception types and None.
    - ``bool``: the boolean type, used as a success indicator.
"""

import builtins
import re
from threading import Lock
from types import NoneType, UnionType
from typing import Any, Literal, Union, get_args, get_origin

from typeless.types.annotations import unwrap

NONE_TAG = "None"
ANY_TAG = "any"
ERROR_TAG = "error"
BOOL_TAG = "bool"

RESERVED_TAGS = frozenset({NONE_TAG, ANY_TAG, ERROR_TAG, BOOL_TAG})

_TAG_PATTERN = re.compile(r"[A-Za-z_][\w.]*")


def _is_exception_type(tp: Any) -> bool:
    return isinstance(tp, type) and issubclass(tp, BaseException)


def _is_union(tp: Any) -> bool:
    origin = get_origin(tp)
    return origin is Union or origin is UnionType


def _is_builtin_name(tag: str) -> bool:
    return isinstance(getattr(builtins, tag, None), type)


class TypeTags:
    """Assigns and interns string tags for Python types.

    Attributes:
        _by_type: Assigned and interned class tags, keyed by type.
        _by_tag: Reverse mapping used to keep tags injective.
    """

    def __init__(self) -> None:
        self._by_type: dict[Any, str] = {}
        self._by_tag: dict[str, Any] = {}
        self._lock = Lock()

    def assign(self, tp: Any, tag: str) -> None:
        """Bind ``tp`` to ``tag``.

        Args:
            tp: The type to bind.
            tag: The tag to use for it. A dotted identifier such as
                ``int8`` or ``units.Celsius``.

        Raises:
            ValueError: If ``tag`` is malformed, is one of the literal
                tokens, names a builtin type, or already names a different
                type; or if ``tp`` is already bound to a different tag.
        """
        if not _TAG_PATTERN.fullmatch(tag):
            raise ValueError(f"Type tag {tag!r} is not a dotted identifier")
        if tag in RESERVED_TAGS or _is_builtin_name(tag):
            raise ValueError(f"Type tag {tag!r} is reserved")

        with self._lock:
            existing_tp = self._by_tag.get(tag)
            existing_tag = self._by_type.get(tp)
            if existing_tp is tp and existing_tag == tag:
                return
            if existing_tp is not None:
                raise ValueError(f"Type tag {tag!r} is already assigned to {existing_tp!r}")
            if existing_tag is not None:
                raise ValueError(f"Type {tp!r} is already tagged as {existing_tag!r}")
            self._by_type[tp] = tag
            self._by_tag[tag] = tp

    def lookup(self, tag: str) -> Any | None:
        """Return the type bound to ``tag``, if any."""
        return self._by_tag.get(tag)

    def tag_of(self, tp: Any) -> str:
        """Return the tag for a type annotation.

        Args:
            tp: A type or type annotation.

        Returns:
            The canonical tag for ``tp``.
        """
        tp = unwrap(tp)

        try:
            known = self._by_type.get(tp)
        except TypeError:
            # unhashable annotation objects are never interned
            known = None
        if known is not None:
            return known

        if tp is None or tp is NoneType:
            return NONE_TAG
        if tp is Any or tp is object:
            return ANY_TAG
        if _is_exception_type(tp):
            return ERROR_TAG

        if _is_union(tp):
            members = get_args(tp)
            if all(_is_exception_type(it) or it is NoneType for it in members):
                return ERROR_TAG
            return " | ".join(self.tag_of(it) for it in members)

        origin = get_origin(tp)
        if origin is Literal:
            return repr(tp).removeprefix("typing.")
        if origin is not None:
            args = get_args(tp)
            if not args:
                return self.tag_of(origin)
            return f"{self.tag_of(origin)}[{', '.join(self._arg_tag(it) for it in args)}]"

        if isinstance(tp, type):
            if tp.__module__ == "builtins":
                return tp.__qualname__
            return self._intern(tp, f"{tp.__module__}.{tp.__qualname__}")

        return repr(tp)

    def _intern(self, tp: type, tag: str) -> str:
        with self._lock:
            known = self._by_type.get(tp)
            if known is not None:
                return known
            if tag in self._by_tag:
                tag = f"{tag}@{id(tp):x}"
            self._by_type[tp] = tag
            self._by_tag[tag] = tp
            return tag

    def _arg_tag(self, arg: Any) -> str:
        if arg is Ellipsis:
            return "..."
        if isinstance(arg, list):
            return f"[{', '.join(self._arg_tag(it) for it in arg)}]"
        return self.tag_of(arg)


default_tags = TypeTags()
