from decimal import Decimal
from typing import Dict, List
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ..errors import Conflict, EmptyCart, InvalidPrice, NoValidItems, OrderNotFound, StorefrontError
from ..models.cart import Cart
from ..models.order import Order, OrderStatus
from ..models.order_item import OrderItem
from ..utils.dto import to_order_dto
from ..utils.money import quantize, to_decimal
from .cart_service import CartService
from .logging import log_event


class OrderService:
    """Order creation and retrieval backed by DB.

    An order is written once, from the caller's cart, and never updated
    afterwards. Payment is simulated, so every order is created COMPLETED.
    """

    def __init__(self, session_factory):
        self._session_factory = session_factory

    @staticmethod
    def _snapshot_lines(cart: Cart) -> List[Dict]:
        lines = []
        for it in cart.items:
            if it.product is None:
                log_event(
                    "warning",
                    "order.item_skipped",
                    cart_id=cart.id,
                    cart_item_id=it.id,
                    product_id=it.product_id,
                    reason="product no longer exists",
                )
                continue
            lines.append(
                {
                    "product_id": it.product_id,
                    "product_name": it.product.name,
                    "quantity": it.quantity,
                    # frozen cart price, not the live catalog price
                    "price": it.price_at_addition,
                }
            )
        return lines

    @staticmethod
    def _total(lines: List[Dict]) -> Decimal:
        total = Decimal("0")
        for line in lines:
            price = to_decimal(line["price"])
            if price is None or price < 0:
                log_event("error", "order.invalid_price", product_id=line["product_id"], price=str(line["price"]))
                raise InvalidPrice(f'Invalid price for product in cart: {line["product_name"]}')
            line["price"] = quantize(price)
            total += line["price"] * line["quantity"]
        return quantize(total)

    @staticmethod
    def _persist(session: Session, order: Order) -> None:
        session.add(order)
        session.flush()

    def create_order_from_cart(self, user_id: str) -> Dict:
        try:
            with self._session_factory() as session:
                cart = CartService.load_cart(session, user_id)
                if cart is None or not cart.items:
                    raise EmptyCart("Cart is empty, cannot create an order.")

                lines = self._snapshot_lines(cart)
                if not lines:
                    raise NoValidItems("Cart has no valid items to order.")
                total = self._total(lines)

                order_id = str(uuid4())
                order = Order(
                    id=order_id,
                    user_id=user_id,
                    total_amount=total,
                    status=OrderStatus.COMPLETED,
                    items=[
                        OrderItem(
                            id=str(uuid4()),
                            line_no=n,
                            product_id=line["product_id"],
                            product_name=line["product_name"],
                            quantity=line["quantity"],
                            price_at_purchase=line["price"],
                        )
                        for n, line in enumerate(lines, start=1)
                    ],
                )
                self._persist(session, order)

                # order rows are written; only now empty the cart, same transaction
                skipped = len(cart.items) - len(lines)
                cart.items.clear()
                cart.touch()
                session.flush()
        except StaleDataError:
            log_event("warning", "order.failed", user_id=user_id, reason="cart modified concurrently")
            raise Conflict("Cart was modified concurrently, please retry.")
        except SQLAlchemyError as exc:
            log_event("error", "order.failed", user_id=user_id, reason=type(exc).__name__)
            raise

        log_event(
            "info",
            "order.created",
            order_id=order_id,
            user_id=user_id,
            items=len(lines),
            skipped=skipped,
            total=str(total),
        )
        try:
            return self.find_one_for_user(order_id, user_id)
        except OrderNotFound:
            log_event("critical", "order.missing_after_save", order_id=order_id)
            raise StorefrontError("Order could not be retrieved after saving.")

    def find_all_for_user(self, user_id: str) -> List[Dict]:
        with self._session_factory() as session:
            rows = (
                session.query(Order)
                .filter(Order.user_id == user_id)
                .order_by(Order.created_at.desc(), Order.id.desc())
                .all()
            )
            return [to_order_dto(o) for o in rows]

    def find_one_for_user(self, order_id: str, user_id: str) -> Dict:
        with self._session_factory() as session:
            o = (
                session.query(Order)
                .filter(Order.id == order_id, Order.user_id == user_id)
                .first()
            )
            if o is None:
                # another user's order is reported exactly like a missing one
                raise OrderNotFound(f'Order "{order_id}" not found.')
            return to_order_dto(o)
