import math
import re
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ..errors import ValidationFailed
from .money import to_decimal


EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
URL_RE = re.compile(r"^https?://[^\s/$.?#][^\s]*$", re.IGNORECASE)
PRODUCT_TYPES = {"CPU", "GPU"}
MIN_PASSWORD_LENGTH = 8
MIN_PRICE = Decimal("0.01")
# fits a signed 32-bit INTEGER column
MAX_QUANTITY = 2**31 - 1


def ensure_int(value: Any, field: str, maximum: Optional[int] = None) -> int:
    if isinstance(value, bool):
        raise ValidationFailed(f"{field} must be an integer")
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            raise ValidationFailed(f"{field} must be an integer")
        n = int(value)
    else:
        try:
            n = int(value)
        except (TypeError, ValueError):
            raise ValidationFailed(f"{field} must be an integer")
    if maximum is not None and n > maximum:
        raise ValidationFailed(f"{field} must be <= {maximum}")
    return n


def ensure_positive_int(value: Any, field: str, maximum: Optional[int] = None) -> int:
    n = ensure_int(value, field, maximum)
    if n < 1:
        raise ValidationFailed(f"{field} must be >= 1")
    return n


def ensure_email(value: Any) -> str:
    email = str(value or "").strip().lower()
    if not email:
        raise ValidationFailed("email is required")
    if len(email) > 100 or not EMAIL_RE.match(email):
        raise ValidationFailed("email is not valid")
    return email


def ensure_password(value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise ValidationFailed("password is required")
    if len(value) < MIN_PASSWORD_LENGTH:
        raise ValidationFailed(f"password must be at least {MIN_PASSWORD_LENGTH} characters")
    return value


def optional_name(value: Any, field: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationFailed(f"{field} must be a string")
    value = value.strip()
    if len(value) > 50:
        raise ValidationFailed(f"{field} must be at most 50 characters")
    return value or None


def ensure_price(value: Any) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise ValidationFailed("price must be a number")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationFailed("price must be a finite number")
    price = to_decimal(value)
    if price is None:
        raise ValidationFailed("price must be a number")
    if price < MIN_PRICE:
        raise ValidationFailed("price must be at least 0.01")
    if price != price.quantize(Decimal("0.01")):
        raise ValidationFailed("price must have at most 2 decimal places")
    return price


def ensure_specs(value: Any) -> List[str]:
    if not isinstance(value, list) or not value:
        raise ValidationFailed("specs must be a non-empty list")
    specs = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise ValidationFailed("each spec must be a non-empty string")
        specs.append(item.strip())
    return specs


def validate_product_payload(payload: Dict[str, Any], *, partial: bool = False) -> Dict[str, Any]:
    """Validate a product body and return column values.

    With ``partial`` only supplied fields are checked and returned; the
    product id can never be changed through a partial update.
    """
    if not isinstance(payload, dict):
        raise ValidationFailed("request body must be a JSON object")
    out: Dict[str, Any] = {}

    if not partial:
        pid = payload.get("id")
        if not isinstance(pid, str) or not pid.strip():
            raise ValidationFailed("id is required")
        if len(pid.strip()) > 50:
            raise ValidationFailed("id must be at most 50 characters")
        out["id"] = pid.strip()
    elif "id" in payload:
        raise ValidationFailed("id cannot be changed")

    if not partial or "name" in payload:
        name = payload.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ValidationFailed("name is required")
        if len(name.strip()) > 255:
            raise ValidationFailed("name must be at most 255 characters")
        out["name"] = name.strip()

    if not partial or "type" in payload:
        ptype = payload.get("type")
        if ptype not in PRODUCT_TYPES:
            raise ValidationFailed("type must be CPU or GPU")
        out["type"] = ptype

    if not partial or "price" in payload:
        out["price"] = ensure_price(payload.get("price"))

    if not partial or "specs" in payload:
        out["specs"] = ensure_specs(payload.get("specs"))

    if "imageUrl" in payload:
        url = payload.get("imageUrl")
        if url in (None, ""):
            out["image_url"] = None
        elif not isinstance(url, str) or not URL_RE.match(url.strip()):
            raise ValidationFailed("imageUrl is not a valid URL")
        else:
            out["image_url"] = url.strip()

    if "amdChip" in payload:
        chip = payload.get("amdChip")
        if chip is not None and not isinstance(chip, str):
            raise ValidationFailed("amdChip must be a string")
        if chip and len(chip) > 100:
            raise ValidationFailed("amdChip must be at most 100 characters")
        out["amd_chip"] = chip.strip() if chip else None

    return out
