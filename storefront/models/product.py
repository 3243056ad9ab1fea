"""
Catálogo de productos
"""
import uuid

from sqlalchemy import DECIMAL, CheckConstraint, Column, DateTime, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from storefront.core.database import Base


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price"),
        CheckConstraint("stock >= 0", name="ck_products_stock"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")

    # Precio y stock vivos
    price = Column(DECIMAL(12, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0)

    category_id = Column(UUID(as_uuid=True), index=True)
    image_url = Column(String(500))

    # Metadata
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
