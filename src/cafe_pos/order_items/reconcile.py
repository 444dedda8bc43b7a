"""
Полная замена списка позиций заказа.

Целевые позиции сопоставляются с существующими позициями верхнего уровня
только по client_id. У найденной позиции выравниваются количество и
вариации, ненайденная создаётся заново, а всё, что не попало в целевой
список, удаляется. Коммитит всё одной транзакцией вызывающий код.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from cafe_pos.crud import order_item as order_item_crud
from cafe_pos.errors import OrderItemDoesNotExist, OrderItemVariationDoesNotExist
from cafe_pos.models import Order, OrderItem, OrderItemVariation
from cafe_pos.schemas.order import OrderItemInput, OrderItemVariationInput
from cafe_pos.utils.logging import get_logger

from .creation import build_order_item, build_variation
from .resolvers import CatalogResolver

logger = get_logger(__name__)


async def reconcile_order_items(
    db: AsyncSession, order: Order, targets: Sequence[OrderItemInput]
) -> None:
    resolver = CatalogResolver(db)
    await resolver.check_line_types(targets)

    existing = await order_item_crud.get_top_level_items(db, order.id)
    to_delete: Dict[str, OrderItem] = {item.uuid: item for item in existing}

    matched: List[Tuple[OrderItemInput, Optional[OrderItem]]] = []
    for target in targets:
        item = to_delete.pop(target.client_id, None) if target.client_id else None
        matched.append((target, item))

    # удаляем до создания: новые позиции могут переиспользовать client_id
    # дочерних позиций и вариаций удаляемых строк
    for item in to_delete.values():
        logger.debug("Order item %s is not in the target list, deleting it", item.uuid)
        await db.delete(item)
    await db.flush()

    for target, item in matched:
        if item is None:
            await _create(db, resolver, order, target)
            continue

        if item.count != target.count:
            logger.debug("Order item %s: count %s -> %s", item.uuid, item.count, target.count)
            item.count = target.count
        if target.variations is not None:
            await _reconcile_variations(db, resolver, item, target.variations)

    await db.flush()
    logger.info(
        "Order %s reconciled: %d target lines, %d lines deleted",
        order.uuid,
        len(targets),
        len(to_delete),
    )


async def _ensure_variation_id_free(db: AsyncSession, client_id: Optional[str], owner: str) -> None:
    if client_id and await order_item_crud.variation_uuid_exists(db, client_id):
        raise OrderItemVariationDoesNotExist(
            f"Order item variation {client_id} does not exist on order item {owner}"
        )


async def _ensure_client_ids_free(db: AsyncSession, target: OrderItemInput) -> None:
    """
    Новая позиция получает client_id как uuid. Если какой-то id в поддереве
    уже занят (другой заказ, дочерняя позиция, чужая вариация), адресовать
    его отсюда нельзя.
    """
    if target.client_id and await order_item_crud.order_item_uuid_exists(db, target.client_id):
        raise OrderItemDoesNotExist(f"Order item {target.client_id} does not exist in this order")

    owner = target.client_id or "new"
    for variation in target.variations or []:
        await _ensure_variation_id_free(db, variation.client_id, owner)
    for child in target.children:
        await _ensure_client_ids_free(db, child)


async def _create(db: AsyncSession, resolver: CatalogResolver, order: Order, target: OrderItemInput) -> None:
    await _ensure_client_ids_free(db, target)

    node = await resolver.line(target)
    db.add(build_order_item(node, order.id))
    logger.debug("Created %s line for order %s", node.type.value, order.uuid)


async def _reconcile_variations(
    db: AsyncSession,
    resolver: CatalogResolver,
    item: OrderItem,
    targets: Sequence[OrderItemVariationInput],
) -> None:
    to_delete: Dict[str, OrderItemVariation] = {v.uuid: v for v in item.variations}

    for target in targets:
        variation = to_delete.pop(target.client_id, None) if target.client_id else None
        if variation is not None:
            if variation.count != target.count:
                variation.count = target.count
            continue

        await _ensure_variation_id_free(db, target.client_id, item.uuid)
        item.variations.append(build_variation(await resolver.variation(target)))

    for variation in to_delete.values():
        item.variations.remove(variation)
