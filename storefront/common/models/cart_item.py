from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship
from .base import Base, utcnow


class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(String(36), primary_key=True)
    cart_id = Column(String(36), ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True)
    # no FK: the product may be deleted while the line still exists
    product_id = Column(String(50), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    price_at_addition = Column(Numeric(10, 2), nullable=False)
    added_at = Column(DateTime, nullable=False, default=utcnow)

    cart = relationship("Cart", back_populates="items")
    product = relationship(
        "Product",
        primaryjoin="foreign(CartItem.product_id) == Product.id",
        viewonly=True,
        lazy="joined",
    )
