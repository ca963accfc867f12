from typing import Dict, Optional
from uuid import uuid4

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ..errors import Conflict, ItemNotFound, ProductNotFound, ValidationFailed
from ..models.cart import Cart
from ..models.cart_item import CartItem
from ..models.product import Product
from ..utils.dto import to_cart_dto
from ..utils.validators import MAX_QUANTITY, ensure_int, ensure_positive_int
from .logging import log_event


class CartService:
    """Cart operations backed by DB.

    Each user owns exactly one cart, created on first access. Lines are unique
    per product and keep the price seen when the product was first added.
    """

    def __init__(self, session_factory):
        self._session_factory = session_factory

    @staticmethod
    def load_cart(session: Session, user_id: str) -> Optional[Cart]:
        return session.query(Cart).filter(Cart.user_id == user_id).first()

    @classmethod
    def _get_or_create(cls, session: Session, user_id: str) -> Cart:
        cart = cls.load_cart(session, user_id)
        if cart is None:
            cart = Cart(id=str(uuid4()), user_id=user_id)
            session.add(cart)
            session.flush()
            log_event("debug", "cart.created", user_id=user_id, cart_id=cart.id)
        return cart

    @staticmethod
    def _find_line(cart: Cart, item_id: str) -> CartItem:
        # only the caller's own cart is searched, foreign ids look absent
        for it in cart.items:
            if it.id == item_id:
                return it
        raise ItemNotFound(f'Cart item "{item_id}" not found.')

    def _refreshed(self, session: Session, user_id: str) -> Dict:
        session.flush()
        session.expire_all()
        return to_cart_dto(self.load_cart(session, user_id))

    def _mutate(self, user_id: str, action):
        try:
            with self._session_factory() as session:
                cart = self._get_or_create(session, user_id)
                action(session, cart)
                cart.touch()
                return self._refreshed(session, user_id)
        except StaleDataError:
            log_event("warning", "cart.conflict", user_id=user_id)
            raise Conflict("Cart was modified concurrently, please retry.")
        except IntegrityError:
            log_event("warning", "cart.conflict", user_id=user_id)
            raise Conflict("Cart was modified concurrently, please retry.")

    def get_cart(self, user_id: str) -> Dict:
        try:
            with self._session_factory() as session:
                cart = self._get_or_create(session, user_id)
                return to_cart_dto(cart)
        except IntegrityError:
            # a concurrent request created the cart first
            with self._session_factory() as session:
                return to_cart_dto(self.load_cart(session, user_id))

    def add_item(self, user_id: str, product_id: str, quantity=1) -> Dict:
        if not isinstance(product_id, str) or not product_id.strip():
            raise ValidationFailed("productId is required")
        product_id = product_id.strip()
        qnty = ensure_positive_int(1 if quantity is None else quantity, "quantity", MAX_QUANTITY)

        def action(session: Session, cart: Cart) -> None:
            product = session.get(Product, product_id)
            if product is None:
                raise ProductNotFound(f'Product "{product_id}" not found.')
            existing = next((it for it in cart.items if it.product_id == product_id), None)
            if existing is not None:
                if existing.quantity + qnty > MAX_QUANTITY:
                    raise ValidationFailed(f"quantity must be <= {MAX_QUANTITY}")
                existing.quantity += qnty
                log_event("info", "cart.item_added", user_id=user_id, product_id=product_id,
                          quantity=existing.quantity, merged=True)
                return
            cart.items.append(
                CartItem(
                    id=str(uuid4()),
                    product_id=product.id,
                    quantity=qnty,
                    price_at_addition=product.price,
                )
            )
            log_event("info", "cart.item_added", user_id=user_id, product_id=product_id,
                      quantity=qnty, merged=False)

        return self._mutate(user_id, action)

    def update_item_quantity(self, user_id: str, item_id: str, quantity) -> Dict:
        qnty = ensure_int(quantity, "quantity", MAX_QUANTITY)

        def action(session: Session, cart: Cart) -> None:
            it = self._find_line(cart, item_id)
            if qnty <= 0:
                cart.items.remove(it)
                log_event("info", "cart.item_removed", user_id=user_id, item_id=item_id)
                return
            it.quantity = qnty
            log_event("info", "cart.item_updated", user_id=user_id, item_id=item_id, quantity=qnty)

        return self._mutate(user_id, action)

    def remove_item(self, user_id: str, item_id: str) -> Dict:
        def action(session: Session, cart: Cart) -> None:
            it = self._find_line(cart, item_id)
            cart.items.remove(it)
            log_event("info", "cart.item_removed", user_id=user_id, item_id=item_id)

        return self._mutate(user_id, action)

    def clear_cart(self, user_id: str) -> Dict:
        def action(session: Session, cart: Cart) -> None:
            count = len(cart.items)
            cart.items.clear()
            log_event("info", "cart.cleared", user_id=user_id, items=count)

        return self._mutate(user_id, action)
