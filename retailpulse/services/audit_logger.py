# retailpulse/services/audit_logger.py
import logging
from typing import Dict, Any, List, Optional
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from retailpulse.core.utils import utc_now
from retailpulse.models.audit_log import AuditLog
from retailpulse.models.user import User
from retailpulse.schemas.audit import AuditLogRead

logger = logging.getLogger(__name__)

class AuditLogger:
    """
    Service for recording who did what to which entity.

    Entries are added to the caller's session and flushed, never committed, so
    they land in the same transaction as the change they describe.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def log(
        self,
        action: str,
        user_id: Optional[int] = None,
        entity_type: Optional[str] = None,
        entity_id: Optional[Any] = None,
        old_values: Optional[Dict[str, Any]] = None,
        new_values: Optional[Dict[str, Any]] = None,
        notes: Optional[str] = None,
    ) -> Optional[AuditLog]:
        """
        Log an action.

        Args:
            action: create, update, delete, billing, refund or stock
            user_id: ID of the user who performed the action
            entity_type: The type of entity affected (transaction, expense, user, product)
            entity_id: The ID of the affected entity
            old_values: State before the change
            new_values: State after the change
            notes: Free text shown in the audit screen

        Returns:
            The created AuditLog, or None if it could not be recorded
        """
        try:
            entry = AuditLog(
                action=action,
                entity_type=entity_type,
                entity_id=str(entity_id) if entity_id is not None else None,
                details={
                    "old_values": old_values,
                    "new_values": new_values,
                    "notes": notes,
                },
                user_id=user_id,
                created_at=utc_now(),
            )

            self.db.add(entry)
            await self.db.flush()

            logger.debug(f"Audit logged: {action} {entity_type} {entity_id} (user: {user_id or 'system'})")
            return entry

        except Exception as e:
            logger.error(f"Error writing audit log: {str(e)}")
            # Don't raise, an audit failure must not undo the business change
            return None

    async def list_logs(self, limit: int = 500) -> List[AuditLogRead]:
        result = await self.db.execute(
            select(AuditLog, User.name, User.role)
            .outerjoin(User, User.id == AuditLog.user_id)
            .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
            .limit(limit)
        )

        logs = []
        for entry, user_name, user_role in result.all():
            details = entry.details or {}
            logs.append(AuditLogRead(
                id=entry.id,
                user_id=entry.user_id,
                user_name=user_name,
                user_role=user_role.value if user_role is not None else None,
                action_type=entry.action,
                entity_type=entry.entity_type,
                entity_id=entry.entity_id,
                old_values=details.get("old_values"),
                new_values=details.get("new_values"),
                notes=details.get("notes"),
                created_at=entry.created_at,
            ))
        return logs

    async def clear_logs(self) -> int:
        result = await self.db.execute(delete(AuditLog))
        await self.db.commit()
        logger.info(f"Cleared {result.rowcount} audit log entries")
        return result.rowcount
