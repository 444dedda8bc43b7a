"""
Добавление и удаление позиций без полной замены заказа.
"""

from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from cafe_pos.crud import order_item as order_item_crud
from cafe_pos.errors import OrderItemDoesNotExist, ProductNotInOrder
from cafe_pos.models import Order, OrderItem
from cafe_pos.schemas.order import OrderItemInput, RemoveOrderItemInput
from cafe_pos.utils.logging import get_logger

from .comparison import is_order_item_meta_equal
from .creation import build_order_item
from .merging import merge_line, write_line
from .resolvers import CatalogResolver
from .tree import LineNode, line_from_model

logger = get_logger(__name__)


async def add_order_items(db: AsyncSession, order: Order, lines: Sequence[OrderItemInput]) -> None:
    """
    Каждая позиция вливается в совпадающую позицию верхнего уровня,
    а если такой нет, создаётся.
    """
    resolver = CatalogResolver(db, keep_client_ids=False)
    await resolver.check_line_types(lines)

    for line in lines:
        incoming = await resolver.line(line)
        candidates = await order_item_crud.get_merge_candidates(
            db, order.id, incoming.product_id, incoming.diverse_price
        )

        target = _find_match(candidates, incoming)
        if target is not None:
            write_line(target, merge_line(line_from_model(target), incoming))
            logger.debug("Merged %s line into order item %s", incoming.type.value, target.uuid)
        else:
            db.add(build_order_item(incoming, order.id))
            logger.debug("Created %s line for order %s", incoming.type.value, order.uuid)

        await db.flush()

    logger.info("Added %d lines to order %s", len(lines), order.uuid)


def _find_match(candidates: Sequence[OrderItem], incoming: LineNode):
    for candidate in candidates:
        if is_order_item_meta_equal(line_from_model(candidate), incoming):
            return candidate
    return None


async def remove_order_items(
    db: AsyncSession, order: Order, lines: Sequence[RemoveOrderItemInput]
) -> None:
    """
    Уменьшает количество позиций верхнего уровня; позиция, у которой
    остаётся не больше удаляемого, удаляется вместе с вариациями и детьми.
    """
    resolver = CatalogResolver(db)

    for line in lines:
        if line.client_id is not None:
            item = await order_item_crud.get_top_level_item_by_uuid(db, order.id, line.client_id)
            if item is None:
                raise OrderItemDoesNotExist(f"Order item {line.client_id} does not exist in this order")
        else:
            product = await resolver.product(line.product_uuid)
            item = await order_item_crud.get_top_level_item_by_product(db, order.id, product.id)
            if item is None:
                raise ProductNotInOrder(f"Product {line.product_uuid} is not in the order")

        if item.count <= line.count:
            logger.debug("Deleting order item %s", item.uuid)
            await db.delete(item)
        else:
            item.count -= line.count

        await db.flush()

    logger.info("Removed %d lines from order %s", len(lines), order.uuid)
