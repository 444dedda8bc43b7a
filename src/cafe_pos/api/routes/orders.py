from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from cafe_pos.crud.order import (
    add_products_to_order,
    complete_order,
    create_order,
    get_order_with_items,
    get_orders,
    get_total_price,
    remove_products_from_order,
    update_order,
)
from cafe_pos.db.deps import get_async_session
from cafe_pos.schemas.order import (
    CompleteOrderPayload,
    OrderItemsPayload,
    OrderList,
    OrderRead,
    OrderSummary,
    OrderTotal,
    RemoveOrderItemsPayload,
)


router = APIRouter(prefix="/orders", tags=["orders"])


async def _read_order(db: AsyncSession, uuid: str) -> OrderRead:
    order, items, total = await get_order_with_items(db, uuid)
    return OrderRead.from_orm_with_items(order, items, total)


@router.post("/", response_model=OrderRead, status_code=201)
async def create_order_endpoint(db: AsyncSession = Depends(get_async_session)):
    """
    Создаёт пустой заказ.
    """
    order = await create_order(db)
    return OrderRead.from_orm_with_items(order, [], 0)


@router.get("/", response_model=OrderList)
async def list_orders(
    completed: bool = Query(False, description="Только оплаченные заказы"),
    limit: Optional[int] = Query(None, ge=1, description="Количество записей для вывода"),
    offset: Optional[int] = Query(None, ge=0, description="Смещение для пагинации"),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Возвращает список заказов и их общее количество.
    """
    total, orders = await get_orders(db, completed=completed, limit=limit, offset=offset)
    return OrderList(total=total, items=[OrderSummary.model_validate(o) for o in orders])


@router.get("/{uuid}", response_model=OrderRead)
async def get_order(
    uuid: str = Path(..., description="UUID заказа"),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Возвращает заказ с позициями, вариациями, дочерними позициями и суммой.
    """
    return await _read_order(db, uuid)


@router.get("/{uuid}/total", response_model=OrderTotal)
async def get_order_total(uuid: str, db: AsyncSession = Depends(get_async_session)):
    """
    Итоговая сумма заказа (без учёта скидок).
    """
    return OrderTotal(uuid=uuid, total_price=await get_total_price(db, uuid))


@router.put("/{uuid}/items", response_model=OrderRead)
async def update_order_endpoint(
    uuid: str,
    payload: OrderItemsPayload,
    db: AsyncSession = Depends(get_async_session),
):
    """
    Полностью заменяет позиции заказа переданным списком.
    Позиции сопоставляются по client_id, всё, чего нет в списке, удаляется.
    """
    await update_order(db, uuid, payload.items)
    return await _read_order(db, uuid)


@router.post("/{uuid}/items", response_model=OrderRead)
async def add_products_endpoint(
    uuid: str,
    payload: OrderItemsPayload,
    db: AsyncSession = Depends(get_async_session),
):
    """
    Добавляет позиции: совпадающие позиции объединяются, остальные создаются.
    """
    await add_products_to_order(db, uuid, payload.items)
    return await _read_order(db, uuid)


@router.post("/{uuid}/items/remove", response_model=OrderRead)
async def remove_products_endpoint(
    uuid: str,
    payload: RemoveOrderItemsPayload,
    db: AsyncSession = Depends(get_async_session),
):
    """
    Уменьшает количество позиций; позиция удаляется целиком,
    если убирается не меньше, чем есть.
    """
    await remove_products_from_order(db, uuid, payload.items)
    return await _read_order(db, uuid)


@router.post("/{uuid}/complete", response_model=OrderRead)
async def complete_order_endpoint(
    uuid: str,
    payload: CompleteOrderPayload,
    db: AsyncSession = Depends(get_async_session),
):
    """
    Отмечает заказ оплаченным.
    """
    await complete_order(db, uuid, payload.payment_method)
    return await _read_order(db, uuid)
