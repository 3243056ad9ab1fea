"""
Product Domain Model

Represents a catalog entry. Price and stock are live values; orders copy the
price at creation time and never read it back.

Author: TM3
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    """
    Product domain model - represents a product in our catalog

    Fields:
        id: Product ID (primary key)
        name: Product name
        description: Product description
        price: Current selling price
        stock: Units available (mutated by stock reservation/release)
        category_id: Optional category reference
        image_url: Optional product image
        created_at / updated_at: Timestamps
    """

    id: UUID = Field(..., description="Product ID")
    name: str = Field(..., description="Product name")
    description: str = Field("", description="Product description")
    price: Decimal = Field(..., description="Sale price", ge=0)
    stock: int = Field(0, description="Current stock level")
    category_id: Optional[UUID] = Field(None, description="Category ID")
    image_url: Optional[str] = Field(None, description="Image URL")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_out_of_stock(self) -> bool:
        """Check if product is out of stock"""
        return self.stock <= 0

    def to_dict(self) -> dict:
        """Convert to dictionary with computed fields"""
        data = self.model_dump()
        data['price'] = float(self.price)
        data['is_out_of_stock'] = self.is_out_of_stock
        return data


class ProductCreate(BaseModel):
    """Schema for creating a new product"""
    name: str = ""
    description: str = ""
    price: Decimal = Decimal('0')
    stock: int = 0
    category_id: Optional[UUID] = None
    image_url: Optional[str] = None


class ProductUpdate(BaseModel):
    """Schema for updating an existing product"""
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    stock: Optional[int] = None
    category_id: Optional[UUID] = None
    image_url: Optional[str] = None


class StockChangeRequest(BaseModel):
    quantity: int = 0


PRODUCT_ORDERINGS = {
    "price_asc": "price ASC",
    "price_desc": "price DESC",
    "name_asc": "name ASC",
    "name_desc": "name DESC",
    "created_at_asc": "created_at ASC",
    "created_at_desc": "created_at DESC",
}


class ProductFilter(BaseModel):
    """Product listing filter; limit/offset are clamped by the service"""
    category_id: Optional[UUID] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    search: Optional[str] = None
    in_stock: Optional[bool] = None
    order_by: Optional[str] = None
    limit: int = 20
    offset: int = 0


class ProductListResponse(BaseModel):
    products: List[Product]
    total: int
    limit: int
    offset: int
