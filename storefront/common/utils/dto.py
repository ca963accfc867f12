from decimal import Decimal
from typing import Any, Dict, Optional

from .money import quantize, to_decimal, to_float
from .roles import normalize_roles


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def to_user_dto(row: Any) -> Dict:
    return {
        "id": row.id,
        "email": row.email,
        "firstName": row.first_name,
        "lastName": row.last_name,
        "roles": normalize_roles(row.roles),
        "createdAt": _iso(row.created_at),
        "updatedAt": _iso(row.updated_at),
    }


def to_product_dto(row: Any) -> Optional[Dict]:
    if row is None:
        return None
    return {
        "id": row.id,
        "name": row.name,
        "type": row.type,
        "amdChip": row.amd_chip,
        "price": to_float(row.price),
        "specs": list(row.specs or []),
        "imageUrl": row.image_url,
    }


def to_cart_item_dto(row: Any) -> Dict:
    return {
        "id": row.id,
        "productId": row.product_id,
        "quantity": row.quantity,
        "priceAtAddition": to_float(row.price_at_addition),
        "product": to_product_dto(row.product),
    }


def to_cart_dto(cart: Any) -> Dict:
    items = [to_cart_item_dto(it) for it in cart.items]
    subtotal = sum(
        ((to_decimal(it.price_at_addition) or Decimal("0")) * it.quantity for it in cart.items),
        Decimal("0"),
    )
    return {
        "id": cart.id,
        "userId": cart.user_id,
        "items": items,
        "itemCount": sum(it["quantity"] for it in items),
        "totalAmount": float(quantize(subtotal)),
        "createdAt": _iso(cart.created_at),
        "updatedAt": _iso(cart.updated_at),
    }


def to_order_item_dto(row: Any) -> Dict:
    return {
        "id": row.id,
        "orderId": row.order_id,
        "productId": row.product_id,
        "productName": row.product_name,
        "quantity": row.quantity,
        "priceAtPurchase": to_float(row.price_at_purchase),
        "product": to_product_dto(row.product),
    }


def to_order_dto(order: Any) -> Dict:
    status = order.status.value if hasattr(order.status, "value") else order.status
    return {
        "id": order.id,
        "userId": order.user_id,
        "items": [to_order_item_dto(it) for it in order.items],
        "totalAmount": to_float(order.total_amount),
        "status": status,
        "createdAt": _iso(order.created_at),
    }
