"""Storefront domain services."""

from .auth_service import AuthService
from .cart_service import CartService
from .catalog_service import CatalogService
from .order_service import OrderService
from .token_service import Claims, TokenService
from .user_service import UserService

__all__ = [
    "AuthService",
    "CartService",
    "CatalogService",
    "Claims",
    "OrderService",
    "TokenService",
    "UserService",
]
