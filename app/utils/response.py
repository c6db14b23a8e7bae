# app/utils/response.py

from typing import TypeVar, Generic, Optional, Dict, Any, List
from pydantic import BaseModel

T = TypeVar("T")


def success_response(message: str, data: Optional[T] = None) -> Dict[str, Any]:
    return {
        "success": True,
        "message": message,
        "data": data,
    }


def page_data(items: list, total: int, limit: int, offset: int) -> Dict[str, Any]:
    return {
        "items": items,
        "total": total,
        "limit": limit,
        "offset": offset,
    }


class APIResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: Optional[T] = None


class PageData(BaseModel, Generic[T]):
    items: List[T]
    total: int
    limit: int
    offset: int
