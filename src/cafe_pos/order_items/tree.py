"""
Значения для поддеревьев позиций заказа.

Сравнение и слияние работают с этими неизменяемыми деревьями, а не с
живыми ORM-строками: сохранённая позиция загружается один раз
(``line_from_model``), входящая собирается из запроса клиента, дальше
движок сравнивает и объединяет их как обычные значения. У ещё не
сохранённых узлов ``id=None``.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from cafe_pos.models import COMPOSITE_TYPES, DIVERSE_TYPES, OrderItem, OrderItemType, OrderItemVariation


def variation_key(variation_item_ids: Iterable[int]) -> Tuple[int, ...]:
    """Идентичность вариации без учёта порядка: отсортированные уникальные id элементов."""
    return tuple(sorted(set(variation_item_ids)))


@dataclass(frozen=True)
class VariationNode:
    variation_item_ids: Tuple[int, ...]
    count: int
    id: Optional[int] = None
    client_id: Optional[str] = None

    @classmethod
    def build(cls, variation_item_ids: Iterable[int], count: int, **kwargs) -> "VariationNode":
        return cls(variation_item_ids=variation_key(variation_item_ids), count=count, **kwargs)


@dataclass(frozen=True)
class LineNode:
    type: OrderItemType
    count: int
    product_id: Optional[int] = None
    diverse_price: Optional[int] = None
    offer_id: Optional[int] = None
    notes: Optional[str] = None
    take_away: bool = False
    course: Optional[int] = None
    discount: int = 0
    variations: Tuple[VariationNode, ...] = ()
    children: Tuple["LineNode", ...] = ()
    id: Optional[int] = None
    client_id: Optional[str] = None

    @property
    def is_diverse(self) -> bool:
        return self.type in DIVERSE_TYPES

    @property
    def is_composite(self) -> bool:
        return self.type in COMPOSITE_TYPES


def variation_from_model(variation: OrderItemVariation) -> VariationNode:
    return VariationNode.build(
        (link.variation_item_id for link in variation.links),
        variation.count,
        id=variation.id,
        client_id=variation.uuid,
    )


def line_from_model(item: OrderItem) -> LineNode:
    """
    Снимок сохранённой позиции. ``variations`` (со ссылками) и ``children``
    должны быть уже загружены у ``item`` и у его детей.
    """
    return LineNode(
        type=item.type,
        count=item.count,
        product_id=item.product_id,
        diverse_price=item.diverse_price,
        offer_id=item.offer_id,
        notes=item.notes,
        take_away=bool(item.take_away),
        course=item.course,
        discount=item.discount or 0,
        variations=tuple(variation_from_model(v) for v in item.variations),
        children=tuple(line_from_model(child) for child in item.children),
        id=item.id,
        client_id=item.uuid,
    )
