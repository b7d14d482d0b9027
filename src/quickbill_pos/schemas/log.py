from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from quickbill_pos.models.log import LogLevelEnum


class LogCreate(BaseModel):
    level: LogLevelEnum
    message: str = Field(..., min_length=1)
    meta: Optional[Dict[str, Any]] = None


class LogRead(BaseModel):
    id: int
    level: LogLevelEnum
    message: str
    meta: Optional[Dict[str, Any]] = None
    timestamp: datetime
    user_id: Optional[int] = None
    username: Optional[str] = None

    @classmethod
    def from_orm_with_user(cls, log):
        return cls(
            id=log.id,
            level=log.level,
            message=log.message,
            meta=log.meta,
            timestamp=log.timestamp,
            user_id=log.user_id,
            username=log.user.username if log.user else None,
        )
