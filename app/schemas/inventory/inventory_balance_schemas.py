from pydantic import BaseModel, ConfigDict
from typing import Optional, List
from datetime import datetime


class BalanceOut(BaseModel):
    product_id: int
    warehouse_id: int
    current_stock: int


class WarehouseInventoryRow(BaseModel):
    product_id: int
    product_code: str
    product_name: str
    category_name: Optional[str]
    current_stock: int
    min_stock: int
    updated_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)


class ProductInventoryRow(BaseModel):
    warehouse_id: int
    warehouse_name: str
    current_stock: int
    updated_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)


class LowStockRow(BaseModel):
    product_id: int
    product_code: str
    product_name: str
    warehouse_id: int
    warehouse_name: str
    current_stock: int
    min_stock: int


class ProductStockLine(BaseModel):
    warehouse_id: int
    warehouse_name: str
    current_stock: int


class ProductWithInventoryOut(BaseModel):
    id: int
    code: str
    name: str
    min_stock: int
    max_stock: Optional[int]
    is_active: bool
    category: Optional[dict]
    supplier: Optional[dict]
    total_stock: int
    inventory: List[ProductStockLine]
