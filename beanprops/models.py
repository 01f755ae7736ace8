"""
Core data models for the bean property index.

A type is described by a :class:`TypeDescriptor`, an immutable list of the
:class:`Operation` records it exposes publicly. Descriptors can be registered
explicitly (for example from plain dicts) or derived from a live class with
:func:`beanprops.introspection.describe`.
"""

import types
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import InvalidTypeDescriptorError

# PEP 604 unions (X | Y), Python 3.10+
_UnionType = getattr(types, "UnionType", None)


class Primitive(Enum):
    """Primitive value kinds, each paired with its wrapper (object) type."""
    BOOLEAN = "boolean"
    CHAR = "char"
    BYTE = "byte"
    SHORT = "short"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"

    @property
    def wrapper(self) -> type:
        """The object type a value of this kind is boxed into."""
        return _WRAPPERS[self]


# Python has a single integer and a single floating point object type, so
# several primitive widths share a wrapper.
_WRAPPERS: Dict[Primitive, type] = {
    Primitive.BOOLEAN: bool,
    Primitive.CHAR: str,
    Primitive.BYTE: int,
    Primitive.SHORT: int,
    Primitive.INT: int,
    Primitive.LONG: int,
    Primitive.FLOAT: float,
    Primitive.DOUBLE: float,
}


def is_primitive(kind: Any) -> bool:
    """Return True if ``kind`` is one of the primitive value kinds."""
    return isinstance(kind, Primitive)


def wrapper(kind: Any) -> Optional[type]:
    """
    Return the wrapper type for a primitive kind.

    Args:
        kind: A primitive kind like ``Primitive.INT``

    Returns:
        The wrapper type, or None if ``kind`` is not primitive
    """
    if isinstance(kind, Primitive):
        return kind.wrapper
    return None


def is_union(annotation: Any) -> bool:
    """Return True for ``Union[...]``, ``Optional[...]`` and ``X | Y`` annotations."""
    origin = get_origin(annotation)
    return origin is Union or (_UnionType is not None and origin is _UnionType)


def is_assignable(target: Any, source: Any) -> bool:
    """
    Check whether a value of type ``source`` can be used where ``target`` is expected.

    Primitive kinds only match themselves here; primitive/wrapper equivalence
    is handled separately by the resolver. ``Any`` on either side matches.
    A union ``source`` matches when each of its non-None members does; a
    union ``target`` matches when any of its members does.
    """
    if target is source or target == source:
        return True
    if target is Any or source is Any:
        return True
    if source is None:
        return False
    if is_union(source):
        members = [arg for arg in get_args(source) if arg is not type(None)]
        return bool(members) and all(is_assignable(target, arg) for arg in members)
    if is_union(target):
        return any(is_assignable(arg, source) for arg in get_args(target))
    if is_primitive(target) or is_primitive(source):
        return False
    if target is object:
        return True

    target_cls = get_origin(target) or target
    source_cls = get_origin(source) or source
    if isinstance(target_cls, type) and isinstance(source_cls, type):
        try:
            return issubclass(source_cls, target_cls)
        except TypeError:
            return False
    return False


class Operation(BaseModel):
    """A public operation of a type: name, ordered parameter types and return type."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., min_length=1, description="Exact operation name")
    parameter_types: Tuple[Any, ...] = Field(
        default=(),
        description="Parameter types in declaration order"
    )
    return_type: Any = Field(
        default=None,
        description="Declared return type, None when nothing is returned"
    )
    handle: Optional[Callable[..., Any]] = Field(
        default=None,
        exclude=True,
        repr=False,
        description="Invocable accessor, when the operation was discovered on a live class"
    )

    @property
    def arity(self) -> int:
        return len(self.parameter_types)


class TypeDescriptor(BaseModel):
    """The set of public operations of a single type, in discovery order."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., description="Name of the described type")
    operations: Tuple[Operation, ...] = Field(default=())


class CaseInsensitiveMultiDict:
    """
    Multi-value, case-insensitive mapping of names to ordered value lists.

    Keys are compared case-insensitively and keep the casing they were first
    added with. Both key order and the order of values under a key follow
    insertion order.

    Example::

        index = CaseInsensitiveMultiDict()
        index.add('Name', op1)
        index.add('name', op2)
        index.get_all('NAME')   # Returns [op1, op2]
        list(index)             # Returns ['Name']
    """

    def __init__(self):
        # Internal storage: Dict[lowercase_name, Tuple[original_name, List[value]]]
        self._entries: Dict[str, Tuple[str, List[Any]]] = {}
        self._frozen = False

    def add(self, name: str, value: Any) -> None:
        """
        Append a value under a name.

        Raises:
            TypeError: If the mapping has been frozen
        """
        if self._frozen:
            raise TypeError("CaseInsensitiveMultiDict is frozen")
        name_lower = name.lower()
        if name_lower not in self._entries:
            self._entries[name_lower] = (name, [])
        self._entries[name_lower][1].append(value)

    def freeze(self) -> "CaseInsensitiveMultiDict":
        """Disallow further additions and return self."""
        self._frozen = True
        return self

    def get_all(self, name: str) -> List[Any]:
        """
        Get all values for a name.

        Returns:
            A copy of the values in insertion order (empty list if not found)
        """
        if not isinstance(name, str):
            return []
        entry = self._entries.get(name.lower())
        if entry is None:
            return []
        return list(entry[1])

    def get(self, name: str, default: Any = None) -> Any:
        """Get the first value for a name."""
        values = self.get_all(name)
        if values:
            return values[0]
        return default

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return name.lower() in self._entries

    def __iter__(self) -> Iterator[str]:
        """Iterate over names (using original casing of first occurrence)."""
        for original, _ in self._entries.values():
            yield original

    def __len__(self) -> int:
        return len(self._entries)

    def keys(self) -> List[str]:
        return list(self)

    def is_empty(self) -> bool:
        return not self._entries

    def __repr__(self) -> str:
        entries = {original: values for original, values in self._entries.values()}
        return f"CaseInsensitiveMultiDict({entries!r})"


EMPTY = CaseInsensitiveMultiDict().freeze()


def parse_descriptor(data: Any) -> TypeDescriptor:
    """
    Register a type from plain data.

    Example::

        parse_descriptor({
            "name": "Layer",
            "operations": [
                {"name": "getName", "return_type": str},
                {"name": "setName", "parameter_types": [str]},
            ],
        })

    Raises:
        InvalidTypeDescriptorError: If the data does not describe a type
    """
    if isinstance(data, TypeDescriptor):
        return data
    try:
        return TypeDescriptor.model_validate(data)
    except ValidationError as e:
        raise InvalidTypeDescriptorError(
            f"Invalid type descriptor: {e.error_count()} validation error(s)",
            original_exception=e,
        ) from e
