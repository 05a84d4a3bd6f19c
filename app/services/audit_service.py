# app/services/audit_service.py

from uuid import UUID
from typing import Optional, Dict, Any
from loguru import logger

from app.models.audit import AuditLog
from app.core.database import AsyncSessionLocal


# Manages its own session so it can run as a BackgroundTask after the
# request's session is closed.
async def log_activity(
    action: str,
    actor_id: Optional[UUID],
    actor_role: Optional[str] = None,
    actor_name: Optional[str] = None,
    resource_type: Optional[str] = None,
    resource_id: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None
):
    """
    Creates an audit log entry in a separate DB session.
    Safe for use in BackgroundTasks.
    """
    async with AsyncSessionLocal() as session:
        try:
            log_entry = AuditLog(
                actor_id=actor_id,
                actor_role=actor_role,
                actor_name=actor_name,
                action=action,
                resource_type=resource_type,
                resource_id=resource_id,
                details=details or {}
            )

            session.add(log_entry)
            await session.commit()

        except Exception as e:
            # An audit failure must not crash the background worker
            logger.error(f"Audit log error ({action}): {e}")
            await session.rollback()


def audit_kwargs(user) -> dict:
    """Actor fields for ``log_activity`` taken from the acting user."""
    role = getattr(user.role, "value", user.role)
    return {
        "actor_id": user.id,
        "actor_role": role,
        "actor_name": user.full_name or user.username,
    }
