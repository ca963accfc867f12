from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from .base import Base, utcnow


class Cart(Base):
    __tablename__ = "carts"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    items = relationship(
        "CartItem",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItem.added_at",
    )

    # every write bumps version; a stale writer fails with StaleDataError
    __mapper_args__ = {"version_id_col": version}

    def touch(self) -> None:
        self.updated_at = utcnow()
