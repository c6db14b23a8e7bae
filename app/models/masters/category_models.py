from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship
from app.core.db import Base
from app.models.base.mixins import TimestampMixin, ActiveFlagMixin, AuditMixin


class Category(Base, TimestampMixin, ActiveFlagMixin, AuditMixin):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)

    products = relationship("Product", back_populates="category")

    def __repr__(self):
        return f"<Category id={self.id} name={self.name}>"
