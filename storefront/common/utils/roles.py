import re
from enum import Enum
from typing import Iterable, List, Union


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


ROLE_ORDER = [UserRole.USER.value, UserRole.ADMIN.value]
DEFAULT_ROLES = [UserRole.USER.value]

_NON_ALPHA = re.compile(r"[^a-z]")


def _split(raw: Union[str, Iterable, None]) -> List[str]:
    if raw is None:
        return []
    if isinstance(raw, (str, bytes)):
        text = raw.decode("utf-8", "ignore") if isinstance(raw, bytes) else raw
        # textual array forms such as "{user,admin}" or "user, admin"
        return text.split(",")
    if isinstance(raw, UserRole):
        return [raw.value]
    parts: List[str] = []
    for item in raw:
        if isinstance(item, UserRole):
            parts.append(item.value)
        elif item is not None:
            parts.extend(str(item).split(","))
    return parts


def normalize_roles(raw) -> List[str]:
    """Reduce arbitrary role data to a non-empty subset of the known roles.

    Values are case-folded and stripped of anything but letters; unknown values
    are dropped; an empty result falls back to ``["user"]``. The output is
    deduplicated and ordered user-then-admin, so the function is idempotent.
    """
    seen = set()
    for part in _split(raw):
        cleaned = _NON_ALPHA.sub("", part.strip().lower())
        if cleaned in ROLE_ORDER:
            seen.add(cleaned)
    if not seen:
        return list(DEFAULT_ROLES)
    return [r for r in ROLE_ORDER if r in seen]


def has_role(roles, role: Union[str, UserRole]) -> bool:
    wanted = role.value if isinstance(role, UserRole) else _NON_ALPHA.sub("", str(role).strip().lower())
    return wanted in ROLE_ORDER and wanted in normalize_roles(roles)
