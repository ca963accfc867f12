from sqlalchemy import JSON
from sqlalchemy.types import TypeDecorator

from ..utils.roles import normalize_roles


class RoleList(TypeDecorator):
    """JSON list of role names, normalized on the way in and on the way out."""

    impl = JSON
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return normalize_roles(value)

    def process_result_value(self, value, dialect):
        return normalize_roles(value)
