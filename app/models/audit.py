#app/models/audit.py

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, JSON
from typing import Optional, Dict, Any
from uuid import UUID, uuid4
from datetime import datetime, timezone

class AuditLog(SQLModel, table=True):
    __tablename__ = "audit_logs"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    actor_id: Optional[UUID] = Field(default=None, foreign_key="users.id")
    actor_role: Optional[str] = None
    actor_name: Optional[str] = None

    # e.g. "USER_DELETED", "ROLE_CHANGED", "CONFIG_UPDATED"
    action: str = Field(index=True)
    resource_type: Optional[str] = None
    resource_id: Optional[str] = None

    details: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
