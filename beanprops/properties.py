"""
Lookup of bean properties (getters and setters) of a type.

A :class:`ClassProperties` is built once per type and then only queried:

    props = ClassProperties(Layer)
    props.properties()                 # ['resource', 'enabled', 'name', ...]
    props.getter('name')               # Operation for getName()
    props.setter('enabled', bool)      # Operation for setEnabled(bool)
    props.method('toString')           # Operation for toString()

Property names are case-insensitive. Lookups that cannot be resolved return
None, they never raise.
"""

import inspect
import logging
from typing import Any, FrozenSet, Iterable, List, Optional

from .exceptions import InvalidTypeDescriptorError
from .introspection import describe
from .models import (
    EMPTY,
    CaseInsensitiveMultiDict,
    Operation,
    TypeDescriptor,
    is_assignable,
    is_primitive,
    parse_descriptor,
    wrapper,
)

logger = logging.getLogger(__name__)

# Getters that do not follow the get/is naming convention
COMMON_DERIVED_PROPERTIES: FrozenSet[str] = frozenset({"prefixedName"})


class ClassProperties:
    """Provides lookup information about the bean properties of a type."""

    def __init__(self, target: Any, derived_properties: Optional[Iterable[str]] = None):
        """
        Index the public operations of a type.

        Args:
            target: A TypeDescriptor, a dict registering one, or a class to describe
            derived_properties: Extra operation names to treat as getters, in
                addition to COMMON_DERIVED_PROPERTIES

        Raises:
            InvalidTypeDescriptorError: If target is None or neither a
                TypeDescriptor nor a class
        """
        descriptor = _as_descriptor(target)
        self.type_name = descriptor.name
        self._derived = COMMON_DERIVED_PROPERTIES | frozenset(derived_properties or ())

        methods = CaseInsensitiveMultiDict()
        getters = CaseInsensitiveMultiDict()
        setters = CaseInsensitiveMultiDict()
        for operation in descriptor.operations:
            name = operation.name
            methods.add(name, operation)
            if (name.startswith("get") or name.startswith("is") or name in self._derived) \
                    and operation.arity == 0:
                prop = self._getter_property(name)
                if prop:
                    getters.add(prop, operation)
            elif name.startswith("set") and operation.arity == 1:
                prop = name[3:]
                if prop:
                    setters.add(prop, operation)

        # share one empty container instead of keeping many empty ones alive
        self._methods = methods.freeze() if not methods.is_empty() else EMPTY
        self._getters = getters.freeze() if not getters.is_empty() else EMPTY
        self._setters = setters.freeze() if not setters.is_empty() else EMPTY

        logger.debug(
            f"Indexed {self.type_name}: {len(descriptor.operations)} operations, "
            f"{len(self._getters)} getters, {len(self._setters)} setters"
        )

    def properties(self) -> List[str]:
        """
        Returns a list of all the properties of the type.

        A property named "resource" (in any case) is always listed first.
        """
        properties: List[str] = []
        for key in self._getters:
            if key.lower() == "resource":
                properties.insert(0, key)
            else:
                properties.append(key)
        return properties

    def setter(self, prop: str, value_type: Any = None) -> Optional[Operation]:
        """
        Looks up a setter by property name.

        setter("foo", int) --> setFoo(value: int)

        Args:
            prop: The property name
            value_type: The type of the value to be set, or None to accept any

        Returns:
            The setter for the property, or None if it does not exist
        """
        if not isinstance(prop, str):
            return None

        for setter in self._setters.get_all(prop):
            if value_type is None:
                return setter
            if _matches(setter.parameter_types[0], value_type):
                return setter

        # could not be found, try again with a more lax match
        lax_name = lax(prop)
        if lax_name != prop:
            return self.setter(lax_name, value_type)
        return None

    def getter(self, prop: str, value_type: Any = None) -> Optional[Operation]:
        """
        Looks up a getter by property name.

        getter("foo", int) --> getFoo() -> int

        Args:
            prop: The property name
            value_type: The type the value is expected to have, or None to accept any

        Returns:
            The getter for the property, or None if it does not exist
        """
        if not isinstance(prop, str):
            return None

        getters = self._getters.get_all(prop)
        if getters:
            if value_type is None:
                return getters[0]
            for getter in getters:
                if _matches(getter.return_type, value_type, returned=True):
                    return getter

        # could not be found, try again with a more lax match
        lax_name = lax(prop)
        if lax_name != prop:
            return self.getter(lax_name, value_type)
        return None

    def method(self, name: str) -> Optional[Operation]:
        """Looks up an operation by name; the first overload wins."""
        return self._methods.get(name)

    def _getter_property(self, name: str) -> str:
        """Returns the name of the property corresponding to a getter."""
        if name in self._derived:
            return name
        return _decapitalize(name[3:] if name.startswith("get") else name[2:])

    def __repr__(self) -> str:
        return f"ClassProperties({self.type_name!r})"


def lax(prop: str) -> str:
    """Turn a property name into a bean property name by collapsing "_" characters."""
    return prop.replace("_", "")


def _matches(target: Any, value_type: Any, returned: bool = False) -> bool:
    """
    Check an accessor's type against the type a caller asked for.

    For setters ``target`` (the parameter type) must accept ``value_type``; for
    getters (``returned=True``) ``value_type`` must accept ``target`` (the
    return type). Primitives and their wrappers match either way round.
    """
    if returned:
        assignable = is_assignable(value_type, target)
    else:
        assignable = is_assignable(target, value_type)
    return assignable \
        or (is_primitive(target) and value_type is wrapper(target)) \
        or (is_primitive(value_type) and target is wrapper(value_type))


def _decapitalize(name: str) -> str:
    if not name or name[0].islower():
        return name
    return name[0].lower() + name[1:]


def _as_descriptor(target: Any) -> TypeDescriptor:
    if target is None:
        raise InvalidTypeDescriptorError("Cannot index properties of None")
    if isinstance(target, TypeDescriptor):
        return target
    if isinstance(target, dict):
        return parse_descriptor(target)
    if inspect.isclass(target):
        return describe(target)
    raise InvalidTypeDescriptorError(
        f"Expected a TypeDescriptor or a class, got {type(target).__name__}"
    )
