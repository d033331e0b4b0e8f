import uuid
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class AuditLogCreate(BaseModel):
    action_type: str
    target_type: str
    target_id: Optional[uuid.UUID] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
