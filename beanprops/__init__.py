"""
Bean property lookup for Python types.

Discovers the accessor operations of a type (getters and setters following
the get/is/set naming convention), indexes them by case-insensitive property
name and resolves a property name, optionally with an expected value type,
back to the accessor to invoke.
"""

from .cache import PropertyIndexCache, class_properties
from .exceptions import BeanPropertiesError, InvalidTypeDescriptorError
from .introspection import describe
from .models import Operation, Primitive, TypeDescriptor, parse_descriptor, wrapper
from .properties import COMMON_DERIVED_PROPERTIES, ClassProperties, lax

__version__ = "0.1.0"
__author__ = "beanprops Contributors"
__license__ = "MIT"

__all__ = [
    "ClassProperties",
    "PropertyIndexCache",
    "class_properties",
    "describe",
    "parse_descriptor",
    "Operation",
    "TypeDescriptor",
    "Primitive",
    "wrapper",
    "lax",
    "COMMON_DERIVED_PROPERTIES",
    "BeanPropertiesError",
    "InvalidTypeDescriptorError",
]
