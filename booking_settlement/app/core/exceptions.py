"""
Custom exceptions and error handlers for consistent error responses.

Provides the settlement error taxonomy and the global exception handlers.
User-facing errors are rendered with their own message; everything else
is logged with its kind and rendered as a generic failure.
"""

import logging
from fastapi import HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from typing import Any, Dict

logger = logging.getLogger("booking_settlement.errors")

GENERIC_FAILURE_MESSAGE = "Operation failed, please contact support"


class AppException(Exception):
    """Base application exception."""

    user_facing = True

    def __init__(self, message: str, error_code: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ResourceNotFoundError(AppException):
    """Raised when requested resource is not found."""

    def __init__(self, resource: str, resource_id: Any = None):
        message = f"{resource} not found"
        if resource_id is not None:
            message = f"{resource} with ID {resource_id} not found"
        super().__init__(
            message=message,
            error_code="ERR_NOT_FOUND_001",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": resource_id}
        )


class InvalidAmountError(AppException):
    """Raised when a money amount is not a positive integer."""

    def __init__(self, amount: Any):
        super().__init__(
            message=f"Amount must be a positive integer, got {amount!r}",
            error_code="ERR_BAD_REQUEST",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"amount": str(amount)}
        )


class MissingActorError(AppException):
    """Raised when an action is attempted without an acting identity."""

    def __init__(self):
        super().__init__(
            message="An acting identity is required for this action",
            error_code="ERR_BAD_REQUEST",
            status_code=status.HTTP_400_BAD_REQUEST
        )


# Wallet

class InsufficientFundsError(AppException):
    """Raised when a debit would drive a wallet balance negative."""

    def __init__(self, user_id: str, currency_code: str, balance: int, amount: int):
        super().__init__(
            message="Insufficient wallet balance. Please top up your wallet and try again.",
            error_code="ERR_WALLET_001",
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            details={
                "user_id": user_id,
                "currency": currency_code,
                "balance": balance,
                "requested": amount,
            }
        )


# Ledger (programmer errors, never shown to users)

class UnbalancedEntryError(AppException):
    """Raised when a journal entry's debits and credits differ."""

    user_facing = False

    def __init__(self, total_debit: int, total_credit: int, reason: str = None):
        message = reason or f"Unbalanced journal entry: debit {total_debit} != credit {total_credit}"
        super().__init__(
            message=message,
            error_code="ERR_LEDGER_001",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"total_debit": total_debit, "total_credit": total_credit}
        )


class UnknownAccountError(AppException):
    """Raised when a journal line references a missing or parent account."""

    user_facing = False

    def __init__(self, account_id: str, reason: str = "does not exist"):
        super().__init__(
            message=f"Account {account_id} {reason}",
            error_code="ERR_LEDGER_002",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"account_id": account_id}
        )


# Commission configuration

class NoCommissionModelError(AppException):
    """Raised when a booking's commission model cannot be resolved."""

    user_facing = False

    def __init__(self, booking_id: str, commission_model_id: Any = None):
        super().__init__(
            message=f"Booking {booking_id} has no resolvable commission model ({commission_model_id})",
            error_code="ERR_CONFIG_001",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"booking_id": booking_id, "commission_model_id": commission_model_id}
        )


class InvalidCommissionModelError(AppException):
    """Raised when commission rates would overstate commission owed."""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_CONFIG_002",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details
        )


# Settlement

class BookingAlreadySettledError(AppException):
    """Raised when a booking has already been settled."""

    def __init__(self, booking_id: str):
        super().__init__(
            message=f"Booking {booking_id} has already been settled",
            error_code="ERR_SETTLE_001",
            status_code=status.HTTP_409_CONFLICT,
            details={"booking_id": booking_id}
        )


class BookingNotSettleableError(AppException):
    """Raised when settlement is attempted for a booking that is not confirmed."""

    def __init__(self, booking_id: str, booking_status: Any = None):
        status_value = getattr(booking_status, "value", booking_status)
        super().__init__(
            message=f"Booking {booking_id} cannot be settled while it is {status_value}",
            error_code="ERR_SETTLE_002",
            status_code=status.HTTP_409_CONFLICT,
            details={"booking_id": booking_id, "status": status_value}
        )


# Refunds

class InvalidTransitionError(AppException):
    """Raised when a refund is not in the state an action expects."""

    def __init__(self, refund_id: int, action: str, current_status: Any = None):
        super().__init__(
            message="This refund was already processed by someone else. Please refresh and try again.",
            error_code="ERR_REFUND_001",
            status_code=status.HTTP_409_CONFLICT,
            details={
                "refund_id": refund_id,
                "action": action,
                "current_status": getattr(current_status, "value", current_status),
            }
        )


class RefundAlreadyRequestedError(AppException):
    """Raised when a booking already has an open or completed refund."""

    def __init__(self, booking_id: str, refund_id: int):
        super().__init__(
            message=f"A refund for booking {booking_id} has already been requested",
            error_code="ERR_REFUND_002",
            status_code=status.HTTP_409_CONFLICT,
            details={"booking_id": booking_id, "refund_id": refund_id}
        )


class RejectionReasonRequiredError(AppException):
    """Raised when a refund is rejected without a reason."""

    def __init__(self):
        super().__init__(
            message="A rejection reason is required",
            error_code="ERR_REFUND_003",
            status_code=status.HTTP_400_BAD_REQUEST
        )


class BookingNotRefundableError(AppException):
    """Raised when a refund is requested for a booking that cannot be refunded."""

    def __init__(self, booking_id: str, reason: str):
        super().__init__(
            message=f"Booking {booking_id} cannot be refunded: {reason}",
            error_code="ERR_REFUND_004",
            status_code=status.HTTP_409_CONFLICT,
            details={"booking_id": booking_id}
        )


# Global Exception Handlers

async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for custom application exceptions."""
    if not exc.user_facing:
        logger.error(
            "Settlement failure %s: %s",
            type(exc).__name__,
            exc.message,
            extra={"error_code": exc.error_code, "details": exc.details, "path": request.url.path}
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error_code": "ERR_OPERATION_FAILED",
                "message": GENERIC_FAILURE_MESSAGE,
                "details": {}
            }
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": exc.error_code,
            "message": exc.message,
            "details": exc.details
        }
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handler for FastAPI HTTPException with standardized format."""
    # Map status code to error code
    error_code_map = {
        400: "ERR_BAD_REQUEST",
        404: "ERR_NOT_FOUND",
        409: "ERR_CONFLICT",
        500: "ERR_INTERNAL_SERVER"
    }

    error_code = error_code_map.get(exc.status_code, "ERR_UNKNOWN")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": error_code,
            "message": exc.detail,
            "details": {}
        }
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handler for Pydantic validation errors."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error_code": "ERR_VALIDATION",
            "message": "Validation error",
            "details": {
                "errors": jsonable_encoder(exc.errors())
            }
        }
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.exception("Unhandled exception: %s", type(exc).__name__)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error_code": "ERR_INTERNAL_SERVER",
            "message": GENERIC_FAILURE_MESSAGE,
            "details": {}
        }
    )
