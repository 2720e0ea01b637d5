"""API route modules."""

from stockledger.api.routes.adjustments import router as adjustments_router
from stockledger.api.routes.categories import router as categories_router
from stockledger.api.routes.health import router as health_router
from stockledger.api.routes.inventory import router as inventory_router

__all__ = [
    "health_router",
    "inventory_router",
    "adjustments_router",
    "categories_router",
]
