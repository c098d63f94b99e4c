"""
Core module for SignOrderLedger.

Contains fundamental infrastructure components:
- exceptions: Custom exception hierarchy shared by models, services and routes
"""

from .exceptions import (
    SignOrderError,
    ValidationError,
    UnknownReferenceError,
    InvalidTransitionError,
)

__all__ = [
    "SignOrderError",
    "ValidationError",
    "UnknownReferenceError",
    "InvalidTransitionError",
]
