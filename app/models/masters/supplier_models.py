from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship
from app.core.db import Base
from app.models.base.mixins import TimestampMixin, ActiveFlagMixin, AuditMixin


class Supplier(Base, TimestampMixin, ActiveFlagMixin, AuditMixin):
    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False, index=True)
    tax_id = Column(String(50), nullable=True)
    contact = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    address = Column(Text, nullable=True)

    products = relationship("Product", back_populates="supplier")

    def __repr__(self):
        return f"<Supplier id={self.id} name={self.name}>"
