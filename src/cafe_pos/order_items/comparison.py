"""
Сравнение позиций заказа.

Решает, можно ли влить входящую позицию в существующую вместо того, чтобы
создавать рядом новую. ``count`` и ``discount`` в базовом сравнении не
участвуют: именно их накапливает слияние.

Меню сравниваются пропорционально. Существующее меню, заказанное дважды
с четырьмя пиццами, совпадает с входящим меню, заказанным один раз с двумя
пиццами, потому что 4 * 1 == 2 * 2. Перекрёстное умножение держит все
сравнения в целых числах.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from cafe_pos.models import OrderItemType

from .tree import LineNode, VariationNode

# поля, по которым сравнивается любая позиция
_COMMON_FIELDS = ("type", "notes", "take_away", "course", "offer_id")

# что определяет оплачиваемую сущность для каждого вида позиции
_IDENTITY_FIELDS: Dict[OrderItemType, Tuple[str, ...]] = {
    OrderItemType.PRODUCT: ("product_id",),
    OrderItemType.MENU: ("product_id",),
    OrderItemType.SPECIAL: ("product_id",),
    OrderItemType.DIVERSE_FOOD: ("diverse_price",),
    OrderItemType.DIVERSE_DRINK: ("diverse_price",),
    OrderItemType.DIVERSE_OTHER: ("diverse_price",),
}


def variation_items_equal(first: VariationNode, second: VariationNode) -> bool:
    """True, если обе вариации ссылаются на один и тот же набор элементов."""
    return first.variation_item_ids == second.variation_item_ids


def find_equal_variation(
    variations: Sequence[VariationNode], wanted: VariationNode
) -> Optional[int]:
    for index, variation in enumerate(variations):
        if variation_items_equal(variation, wanted):
            return index
    return None


def is_basic_equal(existing: LineNode, incoming: LineNode) -> bool:
    if existing is incoming:
        return True
    if existing.type != incoming.type:
        return False

    fields = _COMMON_FIELDS + _IDENTITY_FIELDS[existing.type]
    return all(getattr(existing, name) == getattr(incoming, name) for name in fields)


def _check_parent_counts(parent_existing: int, parent_incoming: int) -> None:
    if parent_existing <= 0 or parent_incoming <= 0:
        raise ValueError(
            f"Parent counts must be > 0 for proportional matching "
            f"(got {parent_existing} and {parent_incoming})"
        )


def is_proportional(
    existing_count: int, incoming_count: int, parent_existing: int, parent_incoming: int
) -> bool:
    """existing / parent_existing == incoming / parent_incoming, без деления."""
    return existing_count * parent_incoming == incoming_count * parent_existing


def are_variations_proportionally_equal(
    existing: LineNode,
    incoming: LineNode,
    parent_existing: int,
    parent_incoming: int,
) -> bool:
    _check_parent_counts(parent_existing, parent_incoming)

    if len(existing.variations) != len(incoming.variations):
        return False

    unmatched = list(incoming.variations)
    for existing_variation in existing.variations:
        for index, incoming_variation in enumerate(unmatched):
            if variation_items_equal(existing_variation, incoming_variation) and is_proportional(
                existing_variation.count,
                incoming_variation.count,
                parent_existing,
                parent_incoming,
            ):
                del unmatched[index]
                break
        else:
            return False

    return not unmatched


def pair_children(
    existing_children: Sequence[LineNode],
    incoming_children: Sequence[LineNode],
    parent_existing: int,
    parent_incoming: int,
) -> Optional[List[int]]:
    """
    Сопоставление двух наборов дочерних позиций без учёта порядка.

    Каждая входящая дочерняя позиция должна найти свою, ещё не занятую
    существующую: базово равную, с пропорциональным количеством,
    пропорциональными вариациями и (рекурсивно) совпадающими детьми.
    Возвращает для каждой входящей позиции индекс существующей или None,
    если сопоставить не удалось.
    """
    _check_parent_counts(parent_existing, parent_incoming)

    if len(existing_children) != len(incoming_children):
        return None

    matched = [False] * len(existing_children)
    pairs: List[int] = []
    for incoming_child in incoming_children:
        for index, existing_child in enumerate(existing_children):
            if matched[index]:
                continue
            if _is_child_match(existing_child, incoming_child, parent_existing, parent_incoming):
                matched[index] = True
                pairs.append(index)
                break
        else:
            return None

    return pairs


def are_children_proportionally_equal(
    existing_children: Sequence[LineNode],
    incoming_children: Sequence[LineNode],
    parent_existing: int,
    parent_incoming: int,
) -> bool:
    return pair_children(existing_children, incoming_children, parent_existing, parent_incoming) is not None


def _is_child_match(
    existing_child: LineNode,
    incoming_child: LineNode,
    parent_existing: int,
    parent_incoming: int,
) -> bool:
    if not is_basic_equal(existing_child, incoming_child):
        return False
    if not is_proportional(existing_child.count, incoming_child.count, parent_existing, parent_incoming):
        return False
    if not are_variations_proportionally_equal(
        existing_child, incoming_child, parent_existing, parent_incoming
    ):
        return False
    if len(existing_child.children) != len(incoming_child.children):
        return False
    if existing_child.children and not are_children_proportionally_equal(
        existing_child.children, incoming_child.children, parent_existing, parent_incoming
    ):
        return False
    return True


def _first_child_product(line: LineNode) -> Optional[int]:
    return line.children[0].product_id if line.children else None


def is_order_item_meta_equal(existing: LineNode, incoming: LineNode) -> bool:
    """
    Главная проверка: можно ли влить ``incoming`` в ``existing``?

    1. базовое сравнение (тип, заметки, на вынос, курс, акция и продукт
       или, для позиций без продукта, их цена)
    2. SPECIAL: выбранный вариант (продукт первой дочерней позиции) совпадает
    3. MENU: пропорциональное сравнение всех дочерних позиций
    """
    if not is_basic_equal(existing, incoming):
        return False

    if existing.type == OrderItemType.SPECIAL:
        return _first_child_product(existing) == _first_child_product(incoming)

    if existing.type == OrderItemType.MENU:
        return are_children_proportionally_equal(
            existing.children, incoming.children, existing.count, incoming.count
        )

    return True
