"""Base exceptions for neo-capabilities.

This module defines the base exception hierarchy for the neo-capabilities
library. All exceptions inherit from NeoCapabilitiesError and carry an error
code and structured details.
"""

from typing import Any, Dict, Optional


class NeoCapabilitiesError(Exception):
    """Base exception for all neo-capabilities errors.

    All exceptions in the neo-capabilities library inherit from this base class
    and include structured error information for better debugging.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *args,
        **kwargs
    ):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


def create_error_response(exception: NeoCapabilitiesError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Args:
        exception: The neo-capabilities exception

    Returns:
        Error response dictionary
    """
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": exception.__class__.__name__,
        }
    }
