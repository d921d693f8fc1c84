"""
Utilities module - Common helpers for API responses and exceptions.
"""

from common.utils.responses import success_response
from common.utils.exceptions import (
    APIException,
    NotFoundException,
    ValidationException,
)

__all__ = [
    "success_response",
    "APIException",
    "NotFoundException",
    "ValidationException",
]
