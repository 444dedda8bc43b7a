"""
Движок позиций заказа.

- tree.py: неизменяемые значения для поддеревьев позиций
- comparison.py: можно ли влить входящую позицию в существующую
- merging.py: слияние совместимых позиций и запись результата
- creation.py: создание новых строк OrderItem
- resolvers.py: uuid клиента -> внутренние id
- validation.py: проверка формы входных данных
- reconcile.py: полная замена позиций заказа
- incremental.py: добавление и удаление позиций
"""

from .comparison import is_order_item_meta_equal
from .incremental import add_order_items, remove_order_items
from .merging import merge_line, merge_variations
from .reconcile import reconcile_order_items
from .tree import LineNode, VariationNode, line_from_model
from .validation import validate_order_items, validate_removals

__all__ = [
    "LineNode",
    "VariationNode",
    "line_from_model",
    "is_order_item_meta_equal",
    "merge_line",
    "merge_variations",
    "reconcile_order_items",
    "add_order_items",
    "remove_order_items",
    "validate_order_items",
    "validate_removals",
]
