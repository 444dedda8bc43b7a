from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, conint

from cafe_pos.models import OrderItemType, PaymentMethod


class OrderItemVariationInput(BaseModel):
    client_id: Optional[str] = None
    variation_item_uuids: List[str] = Field(default_factory=list)
    count: conint(ge=1)

    model_config = ConfigDict(extra="forbid")


class OrderItemInput(BaseModel):
    """
    Одна позиция заказа в том виде, в каком её присылает клиент.
    Для меню и спешлов дочерние позиции передаются в ``children``.
    """

    client_id: Optional[str] = None
    product_uuid: Optional[str] = None
    type: Optional[OrderItemType] = None
    diverse_price: Optional[conint(ge=0)] = None
    count: conint(ge=1)
    discount: conint(ge=0) = 0
    notes: Optional[str] = None
    take_away: bool = False
    course: Optional[int] = None
    offer_uuid: Optional[str] = None
    # None - не трогать вариации при полном обновлении, [] - удалить все
    variations: Optional[List[OrderItemVariationInput]] = None
    children: List["OrderItemInput"] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class RemoveOrderItemInput(BaseModel):
    client_id: Optional[str] = None
    product_uuid: Optional[str] = None
    count: conint(ge=1)

    model_config = ConfigDict(extra="forbid")


class OrderItemsPayload(BaseModel):
    items: List[OrderItemInput]


class RemoveOrderItemsPayload(BaseModel):
    items: List[RemoveOrderItemInput]


class CompleteOrderPayload(BaseModel):
    payment_method: PaymentMethod


class OrderItemVariationRead(BaseModel):
    uuid: str
    count: int
    variation_item_uuids: List[str]

    @classmethod
    def from_orm_with_items(cls, variation):
        return cls(
            uuid=variation.uuid,
            count=variation.count,
            variation_item_uuids=[link.variation_item.uuid for link in variation.links],
        )


class OrderItemRead(BaseModel):
    uuid: str
    type: OrderItemType
    product_uuid: Optional[str] = None
    product_name: Optional[str] = None
    offer_uuid: Optional[str] = None
    count: int
    unit_price: int
    discount: int
    diverse_price: Optional[int] = None
    notes: Optional[str] = None
    take_away: bool
    course: Optional[int] = None
    variations: List[OrderItemVariationRead] = []
    children: List["OrderItemRead"] = []

    @classmethod
    def from_orm_tree(cls, item):
        return cls(
            uuid=item.uuid,
            type=item.type,
            product_uuid=item.product.uuid if item.product else None,
            product_name=item.product.name if item.product else None,
            offer_uuid=item.offer.uuid if item.offer else None,
            count=item.count,
            unit_price=item.unit_price,
            discount=item.discount,
            diverse_price=item.diverse_price,
            notes=item.notes,
            take_away=item.take_away,
            course=item.course,
            variations=[OrderItemVariationRead.from_orm_with_items(v) for v in item.variations],
            children=[cls.from_orm_tree(child) for child in item.children],
        )


class OrderRead(BaseModel):
    uuid: str
    created_at: datetime
    paid_at: Optional[datetime] = None
    payment_method: Optional[PaymentMethod] = None
    items: List[OrderItemRead] = []
    total_price: int

    @classmethod
    def from_orm_with_items(cls, order, items, total_price: int):
        return cls(
            uuid=order.uuid,
            created_at=order.created_at,
            paid_at=order.paid_at,
            payment_method=order.payment_method,
            items=[OrderItemRead.from_orm_tree(i) for i in items],
            total_price=total_price,
        )


class OrderSummary(BaseModel):
    uuid: str
    created_at: datetime
    paid_at: Optional[datetime] = None
    payment_method: Optional[PaymentMethod] = None

    model_config = ConfigDict(from_attributes=True)


class OrderList(BaseModel):
    total: int
    items: List[OrderSummary]


class OrderTotal(BaseModel):
    uuid: str
    total_price: int
