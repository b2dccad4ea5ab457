# retailpulse/models/audit_log.py
from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func

from retailpulse.core.utils import utc_now
from retailpulse.database import Base

class AuditLog(Base):
    """
    Records significant user actions for the audit trail.

    This includes:
    - Billing and refunds
    - Expense changes
    - User management (create, role, status, password, delete)
    - Manual stock corrections
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True)
    action = Column(String(50), nullable=False, index=True)  # 'create', 'update', 'delete', 'billing', 'refund'
    entity_type = Column(String(50), nullable=True, index=True)  # 'transaction', 'expense', 'user', ...
    entity_id = Column(String(100), nullable=True, index=True)

    # old_values / new_values / notes
    details = Column(JSON, nullable=True)

    # Simple user_id without foreign key constraint
    user_id = Column(Integer, nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog {self.action} {self.entity_type} {self.entity_id}>"
