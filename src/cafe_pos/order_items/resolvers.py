"""
Разрешение uuid.

Клиент ссылается на продукты, элементы вариаций и акции по внешнему uuid,
движок работает с внутренними id. ``CatalogResolver`` превращает
``OrderItemInput`` в ``LineNode`` и кэширует все запросы на время одной
операции.
"""

from typing import Dict, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from cafe_pos.crud import catalog
from cafe_pos.errors import (
    ProductDoesNotExist,
    ValidationFailed,
    VariationItemDoesNotExist,
    raise_validation_errors,
)
from cafe_pos.models import DIVERSE_TYPES, OrderItemType, Product, ProductType
from cafe_pos.schemas.order import OrderItemInput, OrderItemVariationInput
from cafe_pos.utils.logging import get_logger

from .tree import LineNode, VariationNode
from .validation import composite_errors

logger = get_logger(__name__)

_TYPE_BY_PRODUCT_TYPE = {
    ProductType.MENU: OrderItemType.MENU,
    ProductType.SPECIAL: OrderItemType.SPECIAL,
}


def _is_diverse_line(line: OrderItemInput) -> bool:
    return line.diverse_price is not None and line.product_uuid is None


class CatalogResolver:
    def __init__(self, db: AsyncSession, keep_client_ids: bool = True) -> None:
        self.db = db
        self.keep_client_ids = keep_client_ids
        self._products: Dict[str, Product] = {}
        self._variation_items: Dict[str, int] = {}
        self._offers: Dict[str, Optional[int]] = {}

    async def product(self, uuid: Optional[str]) -> Product:
        if not uuid:
            raise ProductDoesNotExist()
        if uuid not in self._products:
            product = await catalog.get_product_by_uuid(self.db, uuid)
            if product is None:
                raise ProductDoesNotExist(f"Product {uuid} does not exist")
            self._products[uuid] = product
        return self._products[uuid]

    async def variation_item_ids(self, uuids: Sequence[str]) -> List[int]:
        resolved = []
        for uuid in uuids:
            if uuid not in self._variation_items:
                variation_item = await catalog.get_variation_item_by_uuid(self.db, uuid)
                if variation_item is None:
                    raise VariationItemDoesNotExist(f"Variation item {uuid} does not exist")
                self._variation_items[uuid] = variation_item.id
            resolved.append(self._variation_items[uuid])
        return resolved

    async def offer_id(self, uuid: Optional[str]) -> Optional[int]:
        # неизвестная акция отбрасывается, заказ из-за неё не падает
        if not uuid:
            return None
        if uuid not in self._offers:
            offer = await catalog.get_offer_by_uuid(self.db, uuid)
            if offer is None:
                logger.warning("Offer %s does not exist, ignoring it", uuid)
            self._offers[uuid] = offer.id if offer is not None else None
        return self._offers[uuid]

    async def line_type(self, line: OrderItemInput) -> OrderItemType:
        """
        Тип позиции: явно переданный, иначе DIVERSE_OTHER для позиции без
        продукта, MENU/SPECIAL по типу продукта или PRODUCT.
        """
        if _is_diverse_line(line):
            return line.type or OrderItemType.DIVERSE_OTHER
        product = await self.product(line.product_uuid)
        return line.type or _TYPE_BY_PRODUCT_TYPE.get(product.type, OrderItemType.PRODUCT)

    async def check_line_types(self, lines: Sequence[OrderItemInput]) -> None:
        """
        Проверка дочерних позиций для выведенного типа. Тип меню и спешла
        известен только из каталога, поэтому проверка идёт после поиска
        продуктов, но до любых изменений, и собирает ошибки всех позиций.
        """
        errors: List[str] = []
        for index, line in enumerate(lines):
            line_type = await self.line_type(line)
            if line_type not in DIVERSE_TYPES:
                errors.extend(composite_errors(line_type, len(line.children), f"items[{index}]"))
        raise_validation_errors(*errors)

    def _client_id(self, client_id: Optional[str]) -> Optional[str]:
        return client_id if self.keep_client_ids else None

    async def variation(self, variation: OrderItemVariationInput) -> VariationNode:
        return VariationNode.build(
            await self.variation_item_ids(variation.variation_item_uuids),
            variation.count,
            client_id=self._client_id(variation.client_id),
        )

    async def variations(self, variations: Optional[Sequence[OrderItemVariationInput]]) -> tuple:
        return tuple([await self.variation(v) for v in variations or []])

    async def child(self, child: OrderItemInput) -> LineNode:
        product = await self.product(child.product_uuid)
        return LineNode(
            type=OrderItemType.PRODUCT,
            count=child.count,
            product_id=product.id,
            notes=child.notes,
            take_away=child.take_away,
            course=child.course,
            variations=await self.variations(child.variations),
            client_id=self._client_id(child.client_id),
        )

    async def line(self, line: OrderItemInput) -> LineNode:
        line_type = await self.line_type(line)
        product_id = None
        if not _is_diverse_line(line):
            product_id = (await self.product(line.product_uuid)).id
            errors = composite_errors(line_type, len(line.children), "line")
            if errors:
                raise ValidationFailed(errors)

        children = ()
        if line_type in (OrderItemType.MENU, OrderItemType.SPECIAL):
            children = tuple([await self.child(child) for child in line.children])

        return LineNode(
            type=line_type,
            count=line.count,
            product_id=product_id,
            diverse_price=line.diverse_price if product_id is None else None,
            offer_id=await self.offer_id(line.offer_uuid),
            notes=line.notes,
            take_away=line.take_away,
            course=line.course,
            discount=line.discount,
            variations=await self.variations(line.variations),
            children=children,
            client_id=self._client_id(line.client_id),
        )
