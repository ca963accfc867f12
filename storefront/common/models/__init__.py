from .base import Base
from .cart import Cart
from .cart_item import CartItem
from .order import Order, OrderStatus
from .order_item import OrderItem
from .product import Product
from .user import User

__all__ = [
    "Base",
    "Cart",
    "CartItem",
    "Order",
    "OrderItem",
    "OrderStatus",
    "Product",
    "User",
]
