from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class WarehouseCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    location: Optional[str] = Field(default=None, max_length=255)
    capacity: Optional[int] = Field(default=None, ge=0)
    manager_id: Optional[int] = None


class WarehouseUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    location: Optional[str] = Field(default=None, max_length=255)
    capacity: Optional[int] = Field(default=None, ge=0)
    manager_id: Optional[int] = None


class WarehouseOut(BaseModel):
    id: int
    name: str
    location: Optional[str]
    capacity: Optional[int]
    manager_id: Optional[int]
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)
