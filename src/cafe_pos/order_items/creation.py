"""
Создание позиций заказа.

Строит новые строки OrderItem (вариации, ссылки на элементы вариаций и,
для меню и спешлов, дочерние позиции) из разрешённого ``LineNode``.
Строки связаны через relationship; позицию верхнего уровня добавляет
в сессию вызывающий код.
"""

from cafe_pos.models import OrderItem, OrderItemVariation, OrderItemVariationToVariationItem

from .tree import LineNode, VariationNode


def build_variation(node: VariationNode) -> OrderItemVariation:
    kwargs = {"count": node.count}
    if node.client_id is not None:
        kwargs["uuid"] = node.client_id

    variation = OrderItemVariation(**kwargs)
    variation.links = [
        OrderItemVariationToVariationItem(variation_item_id=variation_item_id)
        for variation_item_id in node.variation_item_ids
    ]
    return variation


def build_order_item(node: LineNode, order_id: int) -> OrderItem:
    kwargs = dict(
        order_id=order_id,
        type=node.type,
        count=node.count,
        discount=node.discount,
        notes=node.notes,
        take_away=node.take_away,
        course=node.course,
        offer_id=node.offer_id,
    )
    if node.is_diverse:
        kwargs["diverse_price"] = node.diverse_price
    else:
        kwargs["product_id"] = node.product_id
    if node.client_id is not None:
        kwargs["uuid"] = node.client_id

    item = OrderItem(**kwargs)
    item.variations = [build_variation(v) for v in node.variations]

    if node.is_composite:
        item.children = [
            build_order_item(child, order_id) for child in node.children
        ]
    return item
