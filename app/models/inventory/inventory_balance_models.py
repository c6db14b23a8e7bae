from sqlalchemy import Column, Integer, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.db import Base


class InventoryBalance(Base):
    """Ledger row: current stock of one product in one warehouse. Never deleted."""

    __tablename__ = "inventory_balances"

    product_id = Column(Integer, ForeignKey("products.id", ondelete="RESTRICT"), primary_key=True)
    warehouse_id = Column(Integer, ForeignKey("warehouses.id", ondelete="RESTRICT"), primary_key=True, index=True)
    current_stock = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    product = relationship("Product", back_populates="inventory_balances")
    warehouse = relationship("Warehouse", back_populates="inventory_balances")

    __table_args__ = (CheckConstraint("current_stock >= 0", name="ck_inventory_balance_stock_non_negative"),)

    def __repr__(self):
        return f"<InventoryBalance product_id={self.product_id} warehouse_id={self.warehouse_id} stock={self.current_stock}>"
