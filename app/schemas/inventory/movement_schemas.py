# app/schemas/inventory/movement_schemas.py

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Literal, Optional, Union, List

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator

from app.constants.inventory_movement_type import MovementType


# -------------------------
# CREATE (tagged by `type`)
# -------------------------
class _MovementCreateBase(BaseModel):
    model_config = ConfigDict(extra="forbid")

    product_id: int
    quantity: int = Field(gt=0)
    unit_price: Optional[Decimal] = Field(default=None, ge=0)
    reason: Optional[str] = Field(default=None, max_length=2000)


class EntryMovementCreate(_MovementCreateBase):
    type: Literal["entry"]
    destination_warehouse_id: int


class ExitMovementCreate(_MovementCreateBase):
    type: Literal["exit"]
    source_warehouse_id: int


class TransferMovementCreate(_MovementCreateBase):
    type: Literal["transfer"]
    source_warehouse_id: int
    destination_warehouse_id: int

    @model_validator(mode="after")
    def distinct_warehouses(self):
        if self.source_warehouse_id == self.destination_warehouse_id:
            raise ValueError("transfer source and destination warehouses must differ")
        return self


class AdjustmentMovementCreate(_MovementCreateBase):
    """Manual correction at one warehouse: destination adds stock, source removes it."""

    type: Literal["adjustment"]
    source_warehouse_id: Optional[int] = None
    destination_warehouse_id: Optional[int] = None

    @model_validator(mode="after")
    def one_warehouse(self):
        if (self.source_warehouse_id is None) == (self.destination_warehouse_id is None):
            raise ValueError(
                "adjustment needs exactly one of source_warehouse_id or destination_warehouse_id"
            )
        return self


MovementCreate = Annotated[
    Union[
        EntryMovementCreate,
        ExitMovementCreate,
        TransferMovementCreate,
        AdjustmentMovementCreate,
    ],
    Field(discriminator="type"),
]

movement_create_adapter = TypeAdapter(MovementCreate)


# -------------------------
# FILTERS
# -------------------------
class MovementFilters(BaseModel):
    # UTC window [date_from, date_to)
    product_id: Optional[int] = None
    type: Optional[MovementType] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None


# -------------------------
# OUTPUT
# -------------------------
class MovementOut(BaseModel):
    id: int
    product_id: int
    type: MovementType
    quantity: int
    source_warehouse_id: Optional[int]
    destination_warehouse_id: Optional[int]
    unit_price: Optional[Decimal]
    total_value: Optional[Decimal]
    reason: Optional[str]
    user_id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WarehouseRef(BaseModel):
    id: int
    name: str


class MovementDetailOut(MovementOut):
    product_code: Optional[str] = None
    product_name: Optional[str] = None
    source_warehouse: Optional[WarehouseRef] = None
    destination_warehouse: Optional[WarehouseRef] = None
    user_name: Optional[str] = None


class MovementListData(BaseModel):
    items: List[MovementDetailOut]
    total: int
    limit: int
    offset: int
