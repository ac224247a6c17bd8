from sqlalchemy import Column, Integer, ForeignKey, String, Text, Numeric, Boolean
from sqlalchemy.orm import relationship

from storefront.data.database import Base, UTCDateTime


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    total = Column(Numeric(10, 2), nullable=False)
    shipping_address = Column(Text, nullable=False)
    billing_address = Column(Text, nullable=False)
    payment_method = Column(String(50), nullable=False)

    status = Column(String(20), nullable=False, default="pending")  # pending, processing, shipped, delivered, cancelled
    is_paid = Column(Boolean, nullable=False, default=False)
    paid_at = Column(UTCDateTime, nullable=True)
    created_at = Column(UTCDateTime, nullable=False)
    updated_at = Column(UTCDateTime, nullable=False)

    items = relationship("OrderItemModel", back_populates="order")
