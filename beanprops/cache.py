"""
Process-wide cache of property indices, one per type.

Indices never change once built, so a single instance per type can be shared
freely between threads.
"""

import inspect
import logging
import os
import threading
import weakref
from typing import Any, Dict, Optional

from .exceptions import InvalidTypeDescriptorError
from .properties import ClassProperties

logger = logging.getLogger(__name__)


class PropertyIndexCache:
    """Cache of ClassProperties keyed by type identity.

    Keys are classes or TypeDescriptor values. Classes are held weakly, so a
    class created at runtime is dropped from the cache once it is collected.
    Building happens outside the lock; if two threads race on the same type
    the first stored index wins and both callers get it.
    """

    def __init__(self, enabled: Optional[bool] = None):
        self.enabled = self._should_enable(enabled)
        self._classes: "weakref.WeakKeyDictionary[type, ClassProperties]" = weakref.WeakKeyDictionary()
        self._descriptors: Dict[Any, ClassProperties] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _should_enable(explicit_enable: Optional[bool]) -> bool:
        """Determine if caching should be enabled.

        Priority:
        1. Explicit enabled parameter
        2. BEANPROPS_CACHE_ENABLED environment variable
        3. Default to True
        """
        if explicit_enable is not None:
            return explicit_enable

        env_value = os.environ.get('BEANPROPS_CACHE_ENABLED', '').lower()
        if env_value in ('false', '0', 'no', 'off'):
            logger.info("Property index cache disabled by BEANPROPS_CACHE_ENABLED")
            return False
        return True

    def get(self, target: Any) -> ClassProperties:
        """Get the property index for a type, building it on first use.

        Args:
            target: A class or a TypeDescriptor

        Returns:
            The shared ClassProperties for the type

        Raises:
            InvalidTypeDescriptorError: If target cannot be indexed
        """
        if not self.enabled:
            return ClassProperties(target)

        try:
            hash(target)
        except TypeError as e:
            raise InvalidTypeDescriptorError(
                f"Cannot cache properties of unhashable {type(target).__name__}",
                original_exception=e,
            ) from e

        indices = self._indices_for(target)
        with self._lock:
            cached = indices.get(target)
        if cached is not None:
            logger.debug(f"Property index cache hit for {cached.type_name}")
            return cached

        index = ClassProperties(target)
        with self._lock:
            index = indices.setdefault(target, index)
        logger.debug(f"Property index cache miss for {index.type_name}")
        return index

    def clear(self) -> None:
        with self._lock:
            self._classes.clear()
            self._descriptors.clear()

    def _indices_for(self, target: Any):
        if inspect.isclass(target):
            return self._classes
        return self._descriptors

    def __len__(self) -> int:
        return len(self._classes) + len(self._descriptors)

    def __contains__(self, target: Any) -> bool:
        try:
            return target in self._indices_for(target)
        except TypeError:
            return False


_default_cache = PropertyIndexCache()


def class_properties(target: Any) -> ClassProperties:
    """Return the shared property index for a class or TypeDescriptor."""
    return _default_cache.get(target)


def default_cache() -> PropertyIndexCache:
    return _default_cache
