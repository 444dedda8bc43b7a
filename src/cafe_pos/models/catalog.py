import enum
from uuid import uuid4

from sqlalchemy import Column, Integer, String, Enum as SAEnum
from ..db.base import Base


class ProductType(str, enum.Enum):
    FOOD = "FOOD"
    DRINK = "DRINK"
    SPECIAL = "SPECIAL"
    MENU = "MENU"


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), nullable=False, unique=True, index=True, default=lambda: str(uuid4()))
    name = Column(String(128), nullable=False)
    price = Column(Integer, nullable=False)  # в центах
    type = Column(SAEnum(ProductType, name="product_type"), nullable=False, default=ProductType.FOOD)


class VariationItem(Base):
    __tablename__ = "variation_items"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), nullable=False, unique=True, index=True, default=lambda: str(uuid4()))
    name = Column(String(128), nullable=False)  # например "Large", "0.5L"
    additional_cost = Column(Integer, nullable=False, default=0)


class Offer(Base):
    __tablename__ = "offers"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), nullable=False, unique=True, index=True, default=lambda: str(uuid4()))
    name = Column(String(128), nullable=False)
