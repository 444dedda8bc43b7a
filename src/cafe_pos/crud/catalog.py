from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cafe_pos.models import Offer, Product, VariationItem


async def get_product_by_uuid(db: AsyncSession, uuid: str) -> Optional[Product]:
    result = await db.execute(select(Product).where(Product.uuid == uuid))
    return result.scalars().first()


async def get_variation_item_by_uuid(db: AsyncSession, uuid: str) -> Optional[VariationItem]:
    result = await db.execute(select(VariationItem).where(VariationItem.uuid == uuid))
    return result.scalars().first()


async def get_offer_by_uuid(db: AsyncSession, uuid: str) -> Optional[Offer]:
    result = await db.execute(select(Offer).where(Offer.uuid == uuid))
    return result.scalars().first()
