from passlib.context import CryptContext
from sqlalchemy import Column, DateTime, String

from ..utils.roles import DEFAULT_ROLES
from .base import Base, utcnow
from .types import RoleList


pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    email = Column(String(100), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(50), nullable=True)
    last_name = Column(String(50), nullable=True)
    roles = Column(RoleList, nullable=False, default=lambda: list(DEFAULT_ROLES))
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def set_password(self, plain: str) -> None:
        self.password_hash = pwd_context.hash(plain)

    def verify_password(self, attempt: str) -> bool:
        if not self.password_hash or not attempt:
            return False
        return pwd_context.verify(attempt, self.password_hash)
