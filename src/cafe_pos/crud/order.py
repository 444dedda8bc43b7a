from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from cafe_pos.crud.order_item import calculate_total_price, get_top_level_items
from cafe_pos.db.session import atomic
from cafe_pos.errors import ActionNotAllowed, OrderAlreadyCompleted, OrderDoesNotExist
from cafe_pos.models import Order, OrderItem, PaymentMethod
from cafe_pos.order_items import (
    add_order_items,
    reconcile_order_items,
    remove_order_items,
    validate_order_items,
    validate_removals,
)
from cafe_pos.schemas.order import OrderItemInput, RemoveOrderItemInput
from cafe_pos.utils.logging import get_logger

logger = get_logger(__name__)


async def get_order_by_uuid(db: AsyncSession, uuid: str) -> Optional[Order]:
    result = await db.execute(select(Order).where(Order.uuid == uuid))
    return result.scalars().first()


async def _get_order_or_raise(db: AsyncSession, uuid: str) -> Order:
    order = await get_order_by_uuid(db, uuid)
    if order is None:
        raise OrderDoesNotExist(f"Order {uuid} does not exist")
    return order


async def _get_open_order(db: AsyncSession, uuid: str) -> Order:
    order = await _get_order_or_raise(db, uuid)
    if order.is_completed:
        raise ActionNotAllowed(f"Order {uuid} is already paid and cannot be changed")
    return order


async def get_order_with_items(db: AsyncSession, uuid: str) -> Tuple[Order, List[OrderItem], int]:
    """
    Возвращает заказ, его позиции верхнего уровня (с вариациями и дочерними
    позициями) и итоговую сумму.
    """
    order = await _get_order_or_raise(db, uuid)
    items = await get_top_level_items(db, order.id, refresh=True)
    total = await calculate_total_price(db, order.id)
    return order, items, total


async def get_orders(
    db: AsyncSession,
    completed: bool = False,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> Tuple[int, List[Order]]:
    """
    Возвращает список заказов: оплаченные (completed=True) или открытые.
    """
    condition = Order.paid_at.isnot(None) if completed else Order.paid_at.is_(None)

    total = (await db.execute(select(func.count(Order.id)).where(condition))).scalar_one()

    stmt = select(Order).where(condition).order_by(Order.created_at.desc(), Order.id.desc())
    if limit:
        stmt = stmt.limit(limit)
    if offset:
        stmt = stmt.offset(offset)
    result = await db.execute(stmt)
    return total, list(result.scalars().all())


async def get_total_price(db: AsyncSession, uuid: str) -> int:
    order = await _get_order_or_raise(db, uuid)
    return await calculate_total_price(db, order.id)


async def create_order(db: AsyncSession) -> Order:
    async with atomic(db):
        order = Order()
        db.add(order)
    await db.refresh(order)
    logger.info("Created order %s", order.uuid)
    return order


async def update_order(db: AsyncSession, uuid: str, lines: Sequence[OrderItemInput]) -> Order:
    """
    Полная замена позиций заказа: после вызова заказ содержит ровно
    переданные позиции.
    """
    validate_order_items(lines)
    async with atomic(db):
        order = await _get_open_order(db, uuid)
        await reconcile_order_items(db, order, lines)
    return order


async def add_products_to_order(db: AsyncSession, uuid: str, lines: Sequence[OrderItemInput]) -> Order:
    validate_order_items(lines)
    async with atomic(db):
        order = await _get_open_order(db, uuid)
        await add_order_items(db, order, lines)
    return order


async def remove_products_from_order(
    db: AsyncSession, uuid: str, lines: Sequence[RemoveOrderItemInput]
) -> Order:
    validate_removals(lines)
    async with atomic(db):
        order = await _get_open_order(db, uuid)
        await remove_order_items(db, order, lines)
    return order


async def complete_order(db: AsyncSession, uuid: str, payment_method: PaymentMethod) -> Order:
    async with atomic(db):
        order = await _get_order_or_raise(db, uuid)
        if order.is_completed:
            raise OrderAlreadyCompleted(f"Order {uuid} is already completed")
        order.paid_at = datetime.now(timezone.utc)
        order.payment_method = payment_method
    logger.info("Order %s completed, paid by %s", uuid, payment_method.value)
    return order
