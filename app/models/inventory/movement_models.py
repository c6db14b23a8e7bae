from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    Integer,
    Numeric,
    Text,
    DateTime,
    Enum,
    ForeignKey,
    CheckConstraint,
    Index,
    event,
)
from sqlalchemy.orm import relationship
from app.core.db import Base
from app.constants.inventory_movement_type import MovementType


def _utcnow():
    return datetime.now(timezone.utc)


class Movement(Base):
    """Append-only movement log. Corrections are new counter-movements."""

    __tablename__ = "movements"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False)
    type = Column(
        Enum(
            MovementType,
            name="movement_type",
            values_callable=lambda enum: [m.value for m in enum],
        ),
        nullable=False,
        index=True,
    )
    quantity = Column(Integer, nullable=False)
    source_warehouse_id = Column(Integer, ForeignKey("warehouses.id", ondelete="RESTRICT"), nullable=True, index=True)
    destination_warehouse_id = Column(Integer, ForeignKey("warehouses.id", ondelete="RESTRICT"), nullable=True, index=True)
    unit_price = Column(Numeric(10, 2), nullable=True)
    total_value = Column(Numeric(12, 2), nullable=True)
    reason = Column(Text, nullable=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    product = relationship("Product")
    source_warehouse = relationship("Warehouse", foreign_keys=[source_warehouse_id])
    destination_warehouse = relationship("Warehouse", foreign_keys=[destination_warehouse_id])
    user = relationship("User")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_movement_quantity_positive"),
        CheckConstraint(
            "source_warehouse_id IS NULL OR destination_warehouse_id IS NULL "
            "OR source_warehouse_id <> destination_warehouse_id",
            name="ck_movement_warehouses_differ",
        ),
        CheckConstraint(
            "(type = 'entry' AND destination_warehouse_id IS NOT NULL AND source_warehouse_id IS NULL) "
            "OR (type = 'exit' AND source_warehouse_id IS NOT NULL AND destination_warehouse_id IS NULL) "
            "OR (type = 'transfer' AND source_warehouse_id IS NOT NULL AND destination_warehouse_id IS NOT NULL) "
            "OR (type = 'adjustment' AND (source_warehouse_id IS NULL) <> (destination_warehouse_id IS NULL))",
            name="ck_movement_warehouses_by_type",
        ),
        Index("ix_movements_product", "product_id"),
        Index("ix_movements_created_at", "created_at"),
    )

    def __repr__(self):
        return (
            f"<Movement id={self.id} type={self.type} product_id={self.product_id} qty={self.quantity} "
            f"{self.source_warehouse_id}->{self.destination_warehouse_id}>"
        )


class MovementImmutableError(Exception):
    pass


@event.listens_for(Movement, "before_update")
def _reject_movement_update(mapper, connection, target):
    raise MovementImmutableError(f"Movement {target.id} is immutable")


@event.listens_for(Movement, "before_delete")
def _reject_movement_delete(mapper, connection, target):
    raise MovementImmutableError(f"Movement {target.id} cannot be deleted")
