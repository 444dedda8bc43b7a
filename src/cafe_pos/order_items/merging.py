"""
Слияние позиций заказа.

``merge_line`` объединяет входящую позицию с существующей как значения,
``write_line`` затем переносит результат на строки в базе. Слияние только
добавляет и увеличивает, ничего не удаляет.
"""

from dataclasses import replace
from typing import Sequence, Tuple

from cafe_pos.models import OrderItem, OrderItemType, OrderItemVariation

from .comparison import find_equal_variation, pair_children
from .creation import build_variation
from .tree import LineNode, VariationNode


def merge_variations(
    existing: Sequence[VariationNode], incoming: Sequence[VariationNode]
) -> Tuple[VariationNode, ...]:
    """
    Для каждой входящей вариации: увеличиваем существующую с тем же набором
    элементов или добавляем новую (ещё не сохранённую).
    """
    merged = list(existing)
    for variation in incoming:
        index = find_equal_variation(merged, variation)
        if index is None:
            merged.append(replace(variation, id=None))
        else:
            current = merged[index]
            merged[index] = replace(current, count=current.count + variation.count)
    return tuple(merged)


def _merge_child(existing: LineNode, incoming: LineNode) -> LineNode:
    return replace(
        existing,
        count=existing.count + incoming.count,
        variations=merge_variations(existing.variations, incoming.variations),
    )


def _menu_slots(existing: LineNode, incoming: LineNode):
    pairs = pair_children(existing.children, incoming.children, existing.count, incoming.count)
    if pairs is None:
        return list(enumerate(incoming.children))
    return list(zip(pairs, incoming.children))


def merge_line(existing: LineNode, incoming: LineNode) -> LineNode:
    """
    Вливает ``incoming`` в ``existing``; совместимость уже проверена
    вызывающим кодом.

    Количество и скидка суммируются. SPECIAL сливает свою единственную
    дочернюю позицию, MENU - каждую дочернюю позицию с той существующей,
    с которой её сопоставило сравнение. Порядок существующих детей
    сохраняется.
    """
    merged = replace(
        existing,
        count=existing.count + incoming.count,
        discount=existing.discount + incoming.discount,
        variations=merge_variations(existing.variations, incoming.variations),
    )

    if not (existing.children and incoming.children):
        return merged

    if existing.type == OrderItemType.SPECIAL:
        first = _merge_child(existing.children[0], incoming.children[0])
        return replace(merged, children=(first,) + existing.children[1:])

    if existing.type == OrderItemType.MENU:
        children = list(existing.children)
        for index, extra in _menu_slots(existing, incoming):
            if index < len(children):
                children[index] = _merge_child(children[index], extra)
        return replace(merged, children=tuple(children))

    return merged


def write_variations(item: OrderItem, variations: Sequence[VariationNode]) -> None:
    by_id = {variation.id: variation for variation in item.variations}
    for node in variations:
        if node.id is None:
            item.variations.append(build_variation(node))
            continue
        row: OrderItemVariation = by_id[node.id]
        if row.count != node.count:
            row.count = node.count


def write_line(item: OrderItem, node: LineNode) -> None:
    """
    Переносит результат слияния на ``item`` и его загруженных детей.
    Дети идут в том же порядке, в каком их прочитал ``line_from_model``.
    """
    if item.count != node.count:
        item.count = node.count
    if (item.discount or 0) != node.discount:
        item.discount = node.discount
    write_variations(item, node.variations)

    for child, child_node in zip(item.children, node.children):
        write_line(child, child_node)
