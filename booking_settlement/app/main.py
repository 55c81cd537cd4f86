"""
FastAPI Application Entry Point.

This is the main application file for the Booking Settlement Service.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from booking_settlement.app.core.config import settings
from booking_settlement.app.core.observability import ObservabilityMiddleware, configure_logging
from booking_settlement.app.api.v1.router import router as api_v1_router
from booking_settlement.app.db.session import engine, Base
from booking_settlement.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from booking_settlement.app.models.account import Account
from booking_settlement.app.models.commission_model import CommissionModel
from booking_settlement.app.models.refund_policy import RefundPolicy, RefundPolicyRule
from booking_settlement.app.models.booking import Booking  # after commission models / policies for FK
from booking_settlement.app.models.journal_entry import JournalEntry, JournalLine
from booking_settlement.app.models.wallet import Wallet, WalletTransaction
from booking_settlement.app.models.refund import Refund
from booking_settlement.app.models.audit_log import AuditLog
from booking_settlement.app.models.notification import Notification

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.
    
    Creates database tables on startup.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()

# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Commission split, double-entry ledger, wallets and refund workflow for booked flights",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.
    
    Returns:
        dict: Status and application information
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.api_version,
    }


# Include API v1 router
app.include_router(api_v1_router, prefix=f"/{settings.api_version}")
