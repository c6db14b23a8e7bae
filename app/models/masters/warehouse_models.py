from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from app.core.db import Base
from app.models.base.mixins import TimestampMixin, ActiveFlagMixin, AuditMixin


class Warehouse(Base, TimestampMixin, ActiveFlagMixin, AuditMixin):
    __tablename__ = "warehouses"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False, index=True)
    location = Column(String(255), nullable=True)
    capacity = Column(Integer, nullable=True)
    manager_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    inventory_balances = relationship("InventoryBalance", back_populates="warehouse")

    def __repr__(self):
        return f"<Warehouse id={self.id} name={self.name} active={self.is_active}>"
