"""
Проверка формы присланных клиентом позиций.

Все ошибки одного запроса собираются и выбрасываются вместе одним
``ValidationFailed`` ещё до обращения к базе. Правила, зависящие от типа
продукта в каталоге, проверяет ``CatalogResolver.check_line_types``.
"""

from typing import List, Optional, Sequence

from cafe_pos.errors import raise_validation_errors
from cafe_pos.models import DIVERSE_TYPES, OrderItemType
from cafe_pos.schemas.order import OrderItemInput, RemoveOrderItemInput


def _is_diverse_input(line: OrderItemInput) -> bool:
    if line.type is not None:
        return line.type in DIVERSE_TYPES
    return line.diverse_price is not None and line.product_uuid is None


def _line_errors(line: OrderItemInput, path: str) -> List[Optional[str]]:
    errors: List[Optional[str]] = []

    if _is_diverse_input(line):
        if line.diverse_price is None:
            errors.append(f"{path}: diverse_price is required for diverse lines")
        if line.product_uuid is not None:
            errors.append(f"{path}: diverse lines must not reference a product")
        if line.children:
            errors.append(f"{path}: diverse lines cannot have children")
    else:
        if line.product_uuid is None:
            errors.append(f"{path}: product_uuid is required")
        if line.diverse_price is not None:
            errors.append(f"{path}: diverse_price is only allowed on diverse lines")

    if line.type is not None and line.type not in DIVERSE_TYPES:
        errors.extend(composite_errors(line.type, len(line.children), path))

    return errors


def composite_errors(line_type: OrderItemType, children: int, path: str) -> List[str]:
    """Правила количества дочерних позиций для (возможно, выведенного) типа."""
    if line_type == OrderItemType.SPECIAL and children != 1:
        return [f"{path}: a SPECIAL line needs exactly one child, got {children}"]
    if line_type == OrderItemType.MENU and children < 1:
        return [f"{path}: a MENU line needs at least one child"]
    if line_type == OrderItemType.PRODUCT and children:
        return [f"{path}: children are only allowed on MENU and SPECIAL lines"]
    return []


def _child_errors(child: OrderItemInput, path: str) -> List[Optional[str]]:
    errors: List[Optional[str]] = []
    if child.product_uuid is None:
        errors.append(f"{path}: product_uuid is required")
    if child.diverse_price is not None:
        errors.append(f"{path}: child lines cannot be diverse")
    if child.type is not None and child.type != OrderItemType.PRODUCT:
        errors.append(f"{path}: child lines must be PRODUCT lines")
    if child.children:
        errors.append(f"{path}: child lines cannot have children of their own")
    return errors


def _collect_client_ids(lines: Sequence[OrderItemInput], seen: set, duplicates: set) -> None:
    for line in lines:
        ids = [line.client_id] + [v.client_id for v in line.variations or []]
        for client_id in ids:
            if client_id is None:
                continue
            if client_id in seen:
                duplicates.add(client_id)
            seen.add(client_id)
        _collect_client_ids(line.children, seen, duplicates)


def validate_order_items(lines: Sequence[OrderItemInput]) -> None:
    errors: List[Optional[str]] = []
    for index, line in enumerate(lines):
        path = f"items[{index}]"
        errors.extend(_line_errors(line, path))
        for child_index, child in enumerate(line.children):
            errors.extend(_child_errors(child, f"{path}.children[{child_index}]"))

    duplicates: set = set()
    _collect_client_ids(lines, set(), duplicates)
    for client_id in sorted(duplicates):
        errors.append(f"client_id {client_id} is used more than once")

    raise_validation_errors(*errors)


def validate_removals(lines: Sequence[RemoveOrderItemInput]) -> None:
    raise_validation_errors(*[
        f"items[{index}]: either product_uuid or client_id is required"
        for index, line in enumerate(lines)
        if line.product_uuid is None and line.client_id is None
    ])
