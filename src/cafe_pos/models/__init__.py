from .catalog import Product, ProductType, VariationItem, Offer
from .order import Order, PaymentMethod
from .order_item import (
    COMPOSITE_TYPES,
    DIVERSE_TYPES,
    OrderItem,
    OrderItemType,
    OrderItemVariation,
    OrderItemVariationToVariationItem,
)

__all__ = [
    "Product",
    "ProductType",
    "VariationItem",
    "Offer",
    "Order",
    "PaymentMethod",
    "OrderItem",
    "OrderItemType",
    "OrderItemVariation",
    "OrderItemVariationToVariationItem",
    "DIVERSE_TYPES",
    "COMPOSITE_TYPES",
]
