from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional, List
from datetime import datetime

from app.models.enums.user_role import UserRole


# =========================
# CREATE / UPDATE
# =========================
class UserCreateSchema(BaseModel):
    username: str = Field(min_length=3, max_length=150)
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    password: str = Field(min_length=6)
    role: UserRole = UserRole.VIEWER


class UserRoleUpdateSchema(BaseModel):
    role: UserRole


# =========================
# LIST FILTERS
# =========================
class UserListFilters(BaseModel):
    search: Optional[str] = None
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
    limit: int = Field(50, ge=1, le=200)
    offset: int = Field(0, ge=0)


# =========================
# RESPONSE SCHEMAS
# =========================
class UserDetailSchema(BaseModel):
    id: int
    username: str
    email: Optional[str]
    first_name: Optional[str]
    last_name: Optional[str]
    role: str
    is_active: bool
    last_login: Optional[datetime]
    created_at: datetime
    updated_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)


class UserListData(BaseModel):
    total: int
    items: List[UserDetailSchema]
