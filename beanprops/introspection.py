"""
Type descriptors for live Python classes.
"""

import inspect
import logging
import typing
from typing import Any, Callable, Dict, List, Optional, Tuple

from .exceptions import InvalidTypeDescriptorError
from .models import Operation, TypeDescriptor

logger = logging.getLogger(__name__)

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def describe(cls: Any) -> TypeDescriptor:
    """Build a TypeDescriptor from the public routines of a class.

    Every name in ``dir(cls)`` that does not start with an underscore and
    resolves to a routine becomes an Operation, inherited routines included.
    Operations are listed in ``dir()`` order.

    Args:
        cls: The class to describe

    Returns:
        TypeDescriptor for the class

    Raises:
        InvalidTypeDescriptorError: If ``cls`` is not a class
    """
    if not inspect.isclass(cls):
        raise InvalidTypeDescriptorError(f"Cannot describe {cls!r}: not a class")

    operations: List[Operation] = []
    for name in dir(cls):
        if name.startswith("_"):
            continue
        try:
            attr = inspect.getattr_static(cls, name)
        except AttributeError:
            continue

        routine = _unwrap(cls, name, attr)
        if routine is None:
            continue
        func, handle, bound = routine
        parameter_types, return_type = _signature_types(func, bound)
        operations.append(Operation(
            name=name,
            parameter_types=parameter_types,
            return_type=return_type,
            handle=handle,
        ))

    logger.debug(f"Described {cls.__qualname__}: {len(operations)} public operations")
    return TypeDescriptor(name=cls.__qualname__, operations=tuple(operations))


def _unwrap(cls: type, name: str, attr: Any) -> Optional[Tuple[Callable, Callable, bool]]:
    """Return (function, handle, drops_first_parameter) for a routine attribute, else None."""
    if isinstance(attr, staticmethod):
        return attr.__func__, attr.__func__, False
    if isinstance(attr, classmethod):
        return attr.__func__, getattr(cls, name), True
    if inspect.isroutine(attr):
        return attr, attr, True
    return None


def _signature_types(func: Callable, bound: bool) -> Tuple[Tuple[Any, ...], Any]:
    """Read positional parameter types and the return type of a routine."""
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        # Some builtins carry no signature metadata
        return (), Any

    hints = _type_hints(func)
    params = [p for p in sig.parameters.values() if p.kind in _POSITIONAL]
    if bound and params:
        params = params[1:]

    parameter_types = tuple(hints.get(p.name, Any) for p in params)

    if "return" in hints:
        return_type = hints["return"]
    elif sig.return_annotation is not inspect.Signature.empty:
        return_type = sig.return_annotation
    else:
        # no annotation, nothing known about the returned value
        return_type = Any
    if return_type is type(None):
        return_type = None
    return parameter_types, return_type


def _type_hints(func: Callable) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(func)
    except (NameError, TypeError, AttributeError):
        # Unresolvable forward references; keep the raw annotations
        return dict(getattr(func, "__annotations__", None) or {})
