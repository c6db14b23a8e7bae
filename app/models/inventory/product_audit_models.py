from sqlalchemy import Column, Integer, Text, Enum, ForeignKey, Index
from app.core.db import Base
from app.models.base.mixins import TimestampMixin
from app.models.enums.product_audit_action import ProductAuditAction


class ProductAuditEvent(Base, TimestampMixin):
    """Deactivate / reactivate trail for products. APPEND-ONLY."""

    __tablename__ = "product_audit_events"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    action = Column(
        Enum(
            ProductAuditAction,
            name="product_audit_action",
            values_callable=lambda enum: [a.value for a in enum],
        ),
        nullable=False,
    )
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reason = Column(Text, nullable=True)

    __table_args__ = (Index("ix_product_audit_product_created", "product_id", "created_at"),)

    def __repr__(self):
        return f"<ProductAuditEvent id={self.id} product_id={self.product_id} action={self.action}>"
