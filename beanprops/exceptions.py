"""
Custom exceptions for the bean property index.
"""


class BeanPropertiesError(Exception):
    """Base exception for bean property index errors."""

    pass


class InvalidTypeDescriptorError(BeanPropertiesError, ValueError):
    """Raised when a property index is requested for a missing or malformed type."""

    def __init__(self, message="Invalid type descriptor", original_exception=None):
        self.message = message
        self.original_exception = original_exception
        super().__init__(self.message)
