from sqlalchemy import Column, Integer, ForeignKey, String, Numeric
from sqlalchemy.orm import relationship

from storefront.data.database import Base, UTCDateTime


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)

    #snapshot of the product at order time, not a live reference
    name = Column(String(100), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)

    quantity = Column(Integer, nullable=False)
    created_at = Column(UTCDateTime, nullable=False)

    order = relationship("OrderModel", back_populates="items")
