from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import datetime


class LoginRequest(BaseModel):
    username: str = Field(min_length=1, max_length=150)
    password: str = Field(min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: Literal["bearer"] = "bearer"


class LoginUser(BaseModel):
    id: int
    username: str
    role: str


class LoginData(BaseModel):
    auth: TokenPair
    user: LoginUser


class TokenResponse(TokenPair):
    role: str


class MeOut(BaseModel):
    id: int
    username: str
    email: Optional[str]
    display_name: str
    role: str
    last_login: Optional[datetime]
