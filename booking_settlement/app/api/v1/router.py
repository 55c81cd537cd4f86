"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from booking_settlement.app.api.v1.endpoints import (
    settlements, refunds, wallets, ledger, commission_models, notifications
)

router = APIRouter()

# Booking settlement
router.include_router(settlements.router)

# Refund workflow
router.include_router(refunds.router)
router.include_router(refunds.admin_router)

# Wallets
router.include_router(wallets.router)
router.include_router(wallets.admin_router)

# Ledger and configuration
router.include_router(ledger.router)
router.include_router(commission_models.router)

# Notification outbox
router.include_router(notifications.admin_router)
