from sqlalchemy import Column, Integer, String, Text, Numeric, ForeignKey, JSON, Index
from sqlalchemy.orm import relationship
from app.core.db import Base
from app.models.base.mixins import TimestampMixin, ActiveFlagMixin, AuditMixin


class Product(Base, TimestampMixin, ActiveFlagMixin, AuditMixin):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    code = Column(String(100), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)
    brand = Column(String(255), nullable=True)
    unit = Column(String(50), nullable=False, default="unit")
    purchase_price = Column(Numeric(10, 2), nullable=True)
    sale_price = Column(Numeric(10, 2), nullable=True)
    min_stock = Column(Integer, nullable=False, default=0)
    max_stock = Column(Integer, nullable=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id", ondelete="SET NULL"), nullable=True, index=True)
    barcode = Column(String(255), nullable=True)
    # free-form attributes (family, presentation, batch, ...)
    attributes = Column("metadata", JSON, nullable=True)

    category = relationship("Category", back_populates="products")
    supplier = relationship("Supplier", back_populates="products")
    inventory_balances = relationship("InventoryBalance", back_populates="product")

    __table_args__ = (Index("ix_product_name_code", "name", "code"),)

    def __repr__(self):
        return f"<Product id={self.id} code={self.code} name={self.name}>"
