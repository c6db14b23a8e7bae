# app/schemas/auth/activity_schemas.py

from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime
from fastapi import Query


class UserActivityFilters(BaseModel):
    user_id: Optional[int] = Query(None)
    username: Optional[str] = Query(None)
    code: Optional[str] = Query(None)

    limit: int = Query(50, ge=1, le=200)
    offset: int = Query(0, ge=0)

    sort_by: str = Query("created_at")
    sort_order: str = Query("desc")


class UserActivityOut(BaseModel):
    id: int
    user_id: Optional[int]
    username_snapshot: str
    code: str
    message: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
