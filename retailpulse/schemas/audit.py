from datetime import datetime
from typing import Any, Dict, Optional

from retailpulse.schemas.base import BaseSchema


class AuditLogRead(BaseSchema):
    id: int
    user_id: Optional[int] = None
    user_name: Optional[str] = None
    user_role: Optional[str] = None
    action_type: str
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None
    old_values: Optional[Dict[str, Any]] = None
    new_values: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None
    created_at: datetime
