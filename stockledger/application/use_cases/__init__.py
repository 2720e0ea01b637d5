"""Application use cases."""

from stockledger.application.use_cases.adjust_stock import AdjustStockResult, AdjustStockUseCase
from stockledger.application.use_cases.create_item import CreateItemUseCase
from stockledger.application.use_cases.delete_items import DeleteItemsUseCase
from stockledger.application.use_cases.get_item_metrics import GetItemMetricsUseCase
from stockledger.application.use_cases.manage_categories import ManageCategoriesUseCase
from stockledger.application.use_cases.update_item import UpdateItemUseCase

__all__ = [
    "AdjustStockUseCase",
    "AdjustStockResult",
    "CreateItemUseCase",
    "UpdateItemUseCase",
    "DeleteItemsUseCase",
    "GetItemMetricsUseCase",
    "ManageCategoriesUseCase",
]
