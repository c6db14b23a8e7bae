# app/schemas/masters/product_schemas.py

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, List, Any
from decimal import Decimal
from datetime import datetime

from app.models.enums.product_audit_action import ProductAuditAction


class ProductCreate(BaseModel):
    code: str = Field(min_length=1, max_length=100)
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    category_id: Optional[int] = None
    brand: Optional[str] = None
    unit: str = "unit"
    purchase_price: Optional[Decimal] = Field(default=None, ge=0)
    sale_price: Optional[Decimal] = Field(default=None, ge=0)
    min_stock: int = Field(default=0, ge=0)
    max_stock: Optional[int] = Field(default=None, ge=0)
    supplier_id: Optional[int] = None
    barcode: Optional[str] = None
    attributes: Optional[dict[str, Any]] = None

    @model_validator(mode="after")
    def stock_range(self):
        if self.max_stock is not None and self.max_stock < self.min_stock:
            raise ValueError("max_stock must be greater than or equal to min_stock")
        return self


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    category_id: Optional[int] = None
    brand: Optional[str] = None
    unit: Optional[str] = None
    purchase_price: Optional[Decimal] = Field(default=None, ge=0)
    sale_price: Optional[Decimal] = Field(default=None, ge=0)
    min_stock: Optional[int] = Field(default=None, ge=0)
    max_stock: Optional[int] = Field(default=None, ge=0)
    supplier_id: Optional[int] = None
    barcode: Optional[str] = None
    attributes: Optional[dict[str, Any]] = None


class ProductOut(BaseModel):
    id: int
    code: str
    name: str
    description: Optional[str]
    category_id: Optional[int]
    brand: Optional[str]
    unit: str
    purchase_price: Optional[Decimal]
    sale_price: Optional[Decimal]
    min_stock: int
    max_stock: Optional[int]
    supplier_id: Optional[int]
    barcode: Optional[str]
    attributes: Optional[dict[str, Any]]

    is_active: bool
    created_by: Optional[int]
    updated_by: Optional[int]
    created_at: datetime
    updated_at: Optional[datetime]


class ProductListItem(ProductOut):
    category_name: Optional[str] = None
    supplier_name: Optional[str] = None
    total_stock: int
    is_low_stock: bool


class ProductListData(BaseModel):
    total: int
    items: List[ProductListItem]


class ProductStateChange(BaseModel):
    reason: Optional[str] = Field(default=None, max_length=1000)


class ProductAuditOut(BaseModel):
    id: int
    product_id: int
    action: ProductAuditAction
    user_id: Optional[int]
    username: Optional[str]
    reason: Optional[str]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProductAuditData(BaseModel):
    total: int
    items: List[ProductAuditOut]
