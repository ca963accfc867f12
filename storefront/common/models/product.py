from sqlalchemy import Column, DateTime, JSON, Numeric, String, Text
from .base import Base, utcnow


class Product(Base):
    __tablename__ = "products"

    id = Column(String(50), primary_key=True)
    name = Column(String(255), nullable=False)
    type = Column(String(3), nullable=False)
    amd_chip = Column(String(100), nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    specs = Column(JSON, nullable=False)
    image_url = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
