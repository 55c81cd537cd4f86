"""
Audit logging service for tracking admin and settlement actions.

Audit rows are added to the caller's transaction, so an action and its
audit record commit or roll back together.
"""

from typing import Optional, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from booking_settlement.app.models.audit_log import AuditLog

SYSTEM_ACTOR = "system"


# Audit event constants
class AuditAction:
    """Standardized audit action constants."""
    # Settlement
    BOOKING_SETTLED = "BOOKING_SETTLED"
    COMMISSION_PAID = "COMMISSION_PAID"
    COMMISSION_MODEL_CREATED = "COMMISSION_MODEL_CREATED"
    
    # Wallet
    WALLET_MANUAL_CHARGE = "WALLET_MANUAL_CHARGE"
    
    # Refund workflow
    REFUND_SUBMITTED = "REFUND_SUBMITTED"
    REFUND_EXPERT_APPROVED = "REFUND_EXPERT_APPROVED"
    REFUND_FINANCIAL_APPROVED = "REFUND_FINANCIAL_APPROVED"
    REFUND_PAID = "REFUND_PAID"
    REFUND_REJECTED = "REFUND_REJECTED"


async def log_event(
    db: AsyncSession,
    action: str,
    actor_name: str,
    target_user_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """
    Record an action in the audit log.
    
    Args:
        db: Database session (caller commits)
        action: Action being performed (use AuditAction constants)
        actor_name: Identity of whoever performed the action
        target_user_id: User whose wallet/booking/refund was affected
        metadata: Additional context as JSON
        
    Returns:
        Created AuditLog instance
    """
    audit_log = AuditLog(
        actor_name=actor_name,
        action=action,
        target_user_id=target_user_id,
        meta_data=metadata,
    )
    
    db.add(audit_log)
    await db.flush()
    
    return audit_log


async def get_audit_trail(
    db: AsyncSession,
    target_user_id: Optional[str] = None,
    action: Optional[str] = None,
    limit: int = 100
) -> list[AuditLog]:
    """
    Retrieve audit trail with optional filtering.
    
    Returns:
        List of AuditLog instances, most recent first
    """
    query = select(AuditLog).order_by(desc(AuditLog.timestamp), desc(AuditLog.id))
    
    if target_user_id:
        query = query.where(AuditLog.target_user_id == target_user_id)
    
    if action:
        query = query.where(AuditLog.action == action)
    
    query = query.limit(limit)
    
    result = await db.execute(query)
    return list(result.scalars().all())
