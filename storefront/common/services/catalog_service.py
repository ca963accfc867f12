import json
from pathlib import Path
from typing import Any, Dict, List

from ..errors import Conflict, ProductNotFound
from ..models.product import Product
from ..utils.dto import to_product_dto
from ..utils.validators import validate_product_payload
from .logging import log_event


class CatalogService:
    """Product catalog backed by DB.

    Cart and order code only ever read from here; mutations are reserved to
    the admin endpoints.
    """

    def __init__(self, session_factory):
        self._session_factory = session_factory

    def list_products(self) -> List[Dict]:
        with self._session_factory() as session:
            rows = session.query(Product).order_by(Product.type, Product.price, Product.id).all()
            return [to_product_dto(r) for r in rows]

    def get_product(self, product_id: str) -> Dict:
        """Return ProductDTO for given product id."""
        with self._session_factory() as session:
            row = session.get(Product, product_id) if product_id else None
            if row is None:
                raise ProductNotFound(f'Product "{product_id}" not found.')
            return to_product_dto(row)

    def create_product(self, payload: Dict[str, Any]) -> Dict:
        values = validate_product_payload(payload)
        with self._session_factory() as session:
            if session.get(Product, values["id"]) is not None:
                raise Conflict(f'Product "{values["id"]}" already exists.')
            row = Product(**values)
            session.add(row)
            session.flush()
            log_event("info", "catalog.product_created", product_id=row.id)
            return to_product_dto(row)

    def update_product(self, product_id: str, payload: Dict[str, Any]) -> Dict:
        values = validate_product_payload(payload, partial=True)
        with self._session_factory() as session:
            row = session.get(Product, product_id)
            if row is None:
                raise ProductNotFound(f'Product "{product_id}" not found.')
            for key, value in values.items():
                setattr(row, key, value)
            session.flush()
            log_event("info", "catalog.product_updated", product_id=row.id, fields=sorted(values))
            return to_product_dto(row)

    def delete_product(self, product_id: str) -> None:
        # cart and order lines keep their product_id and become stale references
        with self._session_factory() as session:
            row = session.get(Product, product_id)
            if row is None:
                raise ProductNotFound(f'Product "{product_id}" not found.')
            session.delete(row)
        log_event("info", "catalog.product_deleted", product_id=product_id)

    def seed_defaults(self, path: Path) -> int:
        """Load the default catalog when the products table is empty."""
        with self._session_factory() as session:
            if session.query(Product.id).first() is not None:
                return 0
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        count = 0
        for item in raw:
            self.create_product(item)
            count += 1
        log_event("info", "catalog.seeded", count=count)
        return count
