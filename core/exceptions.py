"""
Custom exceptions for SignOrderLedger.

Exception Hierarchy:
    SignOrderError (base)
    ├── ValidationError        - Rejected input (amounts, dimensions, discount, advance)
    ├── UnknownReferenceError  - Unknown material/service/entry/parent/item id
    └── InvalidTransitionError - Illegal ledger status change or baseline deletion

Usage:
    All errors are raised synchronously by the core and are never retried.
    Routes translate them into JSON responses with a user-facing message.
"""

from typing import Optional, Dict, Any


class SignOrderError(Exception):
    """
    Base exception for all SignOrderLedger errors.

    All custom exceptions inherit from this class, allowing callers to catch
    all application-specific errors with a single except clause if needed.
    """

    #: Short machine-readable kind used in JSON error bodies.
    kind = "error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional context for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON error responses."""
        return {
            "error": self.kind,
            "message": self.message,
            "details": dict(self.details),
        }


class ValidationError(SignOrderError):
    """
    Input was rejected before it could reach the pricing engine or ledger.

    Raised for non-positive or non-numeric amounts, dimensions and quantities,
    a discount outside [0, 100], an advance exceeding the order total, or an
    unrecognised enum value (payment method, entry kind, status).
    """

    kind = "validation_error"

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
        details: Optional[Dict[str, Any]] = None
    ):
        error_details = details or {}
        if field:
            error_details["field"] = field
            error_details["value"] = value
        super().__init__(message, error_details)
        self.field = field
        self.value = value


class UnknownReferenceError(SignOrderError):
    """
    A key or id does not resolve to a known object.

    Callers are expected to only offer keys that exist in the live catalog,
    so this usually signals a stale client or a deleted record.
    """

    kind = "unknown_reference"

    def __init__(self, ref_type: str, ref_id: str):
        message = f"Unknown {ref_type}: {ref_id}"
        details = {
            "ref_type": ref_type,
            "ref_id": ref_id,
        }
        super().__init__(message, details)
        self.ref_type = ref_type
        self.ref_id = ref_id


class InvalidTransitionError(SignOrderError):
    """
    A ledger mutation is not allowed from the entry's current state.

    Approved and rejected are terminal states. The baseline advance stored on
    an order or expense cannot be deleted through the ledger.
    """

    kind = "invalid_transition"

    def __init__(
        self,
        message: str,
        entry_id: Optional[str] = None,
        current: Optional[str] = None,
        requested: Optional[str] = None
    ):
        details: Dict[str, Any] = {}
        if entry_id:
            details["entry_id"] = entry_id
        if current:
            details["current"] = current
        if requested:
            details["requested"] = requested
        super().__init__(message, details)
        self.entry_id = entry_id
        self.current = current
        self.requested = requested
