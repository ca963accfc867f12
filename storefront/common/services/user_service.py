from typing import Dict, Iterable, Optional
from uuid import uuid4

from sqlalchemy.exc import IntegrityError

from ..errors import Conflict
from ..models.user import User
from ..utils.dto import to_user_dto
from ..utils.roles import normalize_roles
from ..utils.validators import ensure_email, ensure_password, optional_name
from .logging import log_event


class UserService:
    """Credential store: user records, password hashes and role sets."""

    def __init__(self, session_factory):
        self._session_factory = session_factory

    def find_by_email(self, email: str) -> Optional[User]:
        key = (email or "").strip().lower()
        if not key:
            return None
        with self._session_factory() as session:
            return session.query(User).filter(User.email == key).first()

    def find_by_id(self, user_id: str) -> Optional[User]:
        if not user_id:
            return None
        with self._session_factory() as session:
            return session.query(User).filter(User.id == user_id).first()

    def create(
        self,
        *,
        email: str,
        password: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        roles: Optional[Iterable[str]] = None,
    ) -> User:
        email = ensure_email(email)
        password = ensure_password(password)
        first_name = optional_name(first_name, "firstName")
        last_name = optional_name(last_name, "lastName")
        try:
            with self._session_factory() as session:
                if session.query(User.id).filter(User.email == email).first():
                    raise Conflict("Email is already registered.")
                user = User(
                    id=str(uuid4()),
                    email=email,
                    first_name=first_name,
                    last_name=last_name,
                    roles=normalize_roles(roles),
                )
                user.set_password(password)
                session.add(user)
                session.flush()
        except IntegrityError:
            # lost a race with a concurrent registration of the same email
            raise Conflict("Email is already registered.")
        return user

    def ensure_admin(self, email: str, password: str) -> Dict:
        """Create the configured admin account, or grant admin to an existing one."""
        email = ensure_email(email)
        with self._session_factory() as session:
            user = session.query(User).filter(User.email == email).first()
            if user is not None:
                if "admin" not in user.roles:
                    user.roles = normalize_roles(list(user.roles) + ["admin"])
                    log_event("info", "auth.admin_granted", user_id=user.id)
                return to_user_dto(user)
        user = self.create(email=email, password=password, roles=["user", "admin"])
        log_event("info", "auth.admin_created", user_id=user.id)
        return to_user_dto(user)
