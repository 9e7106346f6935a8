from __future__ import annotations
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.audit_log import AuditLog

def audit(
    db: AsyncSession,
    *,
    actor_api_key_id: str | None,
    action: str,
    target_type: str | None = None,
    target_id: str | None = None,
    detail: dict | None = None,
) -> AuditLog:
    """Stage an audit row in the caller's transaction; the caller commits."""
    row = AuditLog(
        actor_api_key_id=actor_api_key_id,
        action=action,
        target_type=target_type,
        target_id=target_id,
        detail=detail or {},
    )
    db.add(row)
    return row
