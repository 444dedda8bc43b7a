from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cafe_pos.models import (
    OrderItem,
    OrderItemVariation,
    OrderItemVariationToVariationItem,
    Product,
)


def order_item_tree_options():
    """
    Загружаем позицию целиком: вариации со ссылками, дочерние позиции
    и их вариации. Без этого ленивые загрузки в async-сессии падают
    с MissingGreenlet (в том числе при каскадном удалении).
    """
    return [
        selectinload(OrderItem.product),
        selectinload(OrderItem.offer),
        selectinload(OrderItem.variations)
        .selectinload(OrderItemVariation.links)
        .selectinload(OrderItemVariationToVariationItem.variation_item),
        selectinload(OrderItem.children).selectinload(OrderItem.product),
        selectinload(OrderItem.children).selectinload(OrderItem.offer),
        selectinload(OrderItem.children)
        .selectinload(OrderItem.variations)
        .selectinload(OrderItemVariation.links)
        .selectinload(OrderItemVariationToVariationItem.variation_item),
        selectinload(OrderItem.children).selectinload(OrderItem.children),
    ]


async def get_top_level_items(db: AsyncSession, order_id: int, refresh: bool = False) -> List[OrderItem]:
    stmt = (
        select(OrderItem)
        .where(OrderItem.order_id == order_id, OrderItem.parent_id.is_(None))
        .options(*order_item_tree_options())
        .order_by(OrderItem.id)
    )
    if refresh:
        stmt = stmt.execution_options(populate_existing=True)
    result = await db.execute(stmt)
    return list(result.scalars().unique().all())


async def get_merge_candidates(
    db: AsyncSession, order_id: int, product_id: Optional[int], diverse_price: Optional[int]
) -> List[OrderItem]:
    """
    Позиции верхнего уровня с тем же продуктом
    (для позиций без продукта - с той же diverse_price).
    """
    stmt = select(OrderItem).where(OrderItem.order_id == order_id, OrderItem.parent_id.is_(None))
    if product_id is not None:
        stmt = stmt.where(OrderItem.product_id == product_id)
    else:
        stmt = stmt.where(OrderItem.product_id.is_(None), OrderItem.diverse_price == diverse_price)

    result = await db.execute(stmt.options(*order_item_tree_options()).order_by(OrderItem.id))
    return list(result.scalars().unique().all())


async def get_top_level_item_by_product(
    db: AsyncSession, order_id: int, product_id: int
) -> Optional[OrderItem]:
    stmt = (
        select(OrderItem)
        .where(
            OrderItem.order_id == order_id,
            OrderItem.parent_id.is_(None),
            OrderItem.product_id == product_id,
        )
        .options(*order_item_tree_options())
        .order_by(OrderItem.id)
        .limit(1)
    )
    result = await db.execute(stmt)
    return result.scalars().first()


async def get_top_level_item_by_uuid(db: AsyncSession, order_id: int, uuid: str) -> Optional[OrderItem]:
    stmt = (
        select(OrderItem)
        .where(
            OrderItem.order_id == order_id,
            OrderItem.parent_id.is_(None),
            OrderItem.uuid == uuid,
        )
        .options(*order_item_tree_options())
    )
    result = await db.execute(stmt)
    return result.scalars().first()


async def order_item_uuid_exists(db: AsyncSession, uuid: str) -> bool:
    result = await db.execute(select(func.count(OrderItem.id)).where(OrderItem.uuid == uuid))
    return result.scalar_one() > 0


async def variation_uuid_exists(db: AsyncSession, uuid: str) -> bool:
    result = await db.execute(
        select(func.count(OrderItemVariation.id)).where(OrderItemVariation.uuid == uuid)
    )
    return result.scalar_one() > 0


async def calculate_total_price(db: AsyncSession, order_id: int) -> int:
    """
    Сумма по позициям верхнего уровня: (diverse_price или цена продукта) * count.
    Скидка (discount) в сумме не учитывается.
    """
    stmt = (
        select(func.sum(func.coalesce(OrderItem.diverse_price, Product.price, 0) * OrderItem.count))
        .select_from(OrderItem)
        .outerjoin(Product, OrderItem.product_id == Product.id)
        .where(OrderItem.order_id == order_id, OrderItem.parent_id.is_(None))
    )
    result = await db.execute(stmt)
    return int(result.scalar() or 0)
