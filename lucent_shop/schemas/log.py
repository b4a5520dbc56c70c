# lucent_shop/schemas/log.py
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from lucent_shop.schemas.common import PaginatedResponse


class EventLog(BaseModel):
    id: int
    event_type: str
    event_category: str
    severity: str
    user_id: Optional[int] = None
    admin_id: Optional[int] = None
    resource_type: Optional[str] = None
    resource_id: Optional[str] = None
    message: str
    # ORM attribute is `meta`; the column is named `metadata`
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="meta")
    changes: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class PaginatedLogs(PaginatedResponse[EventLog]):
    pass


class LogStats(BaseModel):
    total: int
    by_category: Dict[str, int]
    by_severity: Dict[str, int]
