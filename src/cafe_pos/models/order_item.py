import enum
from uuid import uuid4

from sqlalchemy import Boolean, CheckConstraint, Column, Integer, String, Text, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import relationship
from ..db.base import Base


class OrderItemType(str, enum.Enum):
    PRODUCT = "PRODUCT"
    MENU = "MENU"
    SPECIAL = "SPECIAL"
    DIVERSE_FOOD = "DIVERSE_FOOD"
    DIVERSE_DRINK = "DIVERSE_DRINK"
    DIVERSE_OTHER = "DIVERSE_OTHER"


DIVERSE_TYPES = frozenset({
    OrderItemType.DIVERSE_FOOD,
    OrderItemType.DIVERSE_DRINK,
    OrderItemType.DIVERSE_OTHER,
})
COMPOSITE_TYPES = frozenset({OrderItemType.MENU, OrderItemType.SPECIAL})


class OrderItem(Base):
    __tablename__ = "order_items"
    __table_args__ = (
        CheckConstraint(
            "(product_id IS NOT NULL AND diverse_price IS NULL)"
            " OR (product_id IS NULL AND diverse_price IS NOT NULL)",
            name="ck_order_items_product_or_diverse_price",
        ),
        CheckConstraint("count > 0", name="ck_order_items_count_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), nullable=False, unique=True, index=True, default=lambda: str(uuid4()))
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    parent_id = Column(Integer, ForeignKey("order_items.id", ondelete="CASCADE"), nullable=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=True)
    offer_id = Column(Integer, ForeignKey("offers.id"), nullable=True)
    type = Column(SAEnum(OrderItemType, name="order_item_type"), nullable=False, default=OrderItemType.PRODUCT)
    count = Column(Integer, nullable=False, default=1)
    discount = Column(Integer, nullable=False, default=0)
    diverse_price = Column(Integer, nullable=True)  # только для позиций без продукта
    notes = Column(Text, nullable=True)
    take_away = Column(Boolean, nullable=False, default=False)
    course = Column(Integer, nullable=True)

    # связи
    order = relationship("Order", back_populates="items")
    product = relationship("Product")
    offer = relationship("Offer")
    parent = relationship("OrderItem", back_populates="children", remote_side=[id])
    children = relationship(
        "OrderItem",
        back_populates="parent",
        cascade="all, delete",
        order_by="OrderItem.id",
    )
    variations = relationship(
        "OrderItemVariation",
        back_populates="order_item",
        cascade="all, delete-orphan",
        order_by="OrderItemVariation.id",
    )

    @property
    def unit_price(self) -> int:
        if self.diverse_price is not None:
            return self.diverse_price
        return self.product.price if self.product is not None else 0


class OrderItemVariation(Base):
    __tablename__ = "order_item_variations"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), nullable=False, unique=True, index=True, default=lambda: str(uuid4()))
    order_item_id = Column(Integer, ForeignKey("order_items.id", ondelete="CASCADE"), nullable=False, index=True)
    count = Column(Integer, nullable=False, default=1)

    order_item = relationship("OrderItem", back_populates="variations")
    links = relationship(
        "OrderItemVariationToVariationItem",
        back_populates="order_item_variation",
        cascade="all, delete-orphan",
    )


class OrderItemVariationToVariationItem(Base):
    __tablename__ = "order_item_variation_to_variation_items"

    order_item_variation_id = Column(
        Integer, ForeignKey("order_item_variations.id", ondelete="CASCADE"), primary_key=True
    )
    variation_item_id = Column(Integer, ForeignKey("variation_items.id"), primary_key=True)

    order_item_variation = relationship("OrderItemVariation", back_populates="links")
    variation_item = relationship("VariationItem")
