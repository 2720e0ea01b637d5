"""API tests for inventory item and stock adjustment endpoints."""

from datetime import datetime
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from stockledger.api.dependencies import (
    get_adjust_stock_use_case,
    get_create_item_use_case,
    get_delete_items_use_case,
    get_item_metrics_use_case,
    get_item_store,
    get_update_item_use_case,
)
from stockledger.api.main import app
from stockledger.application.use_cases import (
    AdjustStockUseCase,
    CreateItemUseCase,
    DeleteItemsUseCase,
    GetItemMetricsUseCase,
    UpdateItemUseCase,
)
from stockledger.core.entities.inventory import StockTransaction, TransactionType
from stockledger.core.exceptions import InsufficientStockError
from stockledger.core.services.event_bus import EventBus
from stockledger.core.services.metrics_calculator import recalculate_average_cost


@pytest.fixture
def mock_inventory_store(sample_item):
    store = AsyncMock()
    store.get_item.return_value = sample_item
    store.get_item_by_name.return_value = None
    store.list_items.return_value = [sample_item]
    store.count_items.return_value = 3
    store.get_recent_purchase_prices.return_value = [12.5, 11.0]

    async def create(item, opening_stock=None):
        return item.model_copy(update={"id": 7})

    async def record(transaction):
        update = {"stock_quantity": sample_item.stock_quantity + transaction.quantity_change}
        if transaction.transaction_type is TransactionType.PURCHASE:
            update["average_purchase_price"] = recalculate_average_cost(
                sample_item.stock_quantity,
                sample_item.average_purchase_price,
                transaction.quantity_change,
                transaction.unit_price,
            )
            update["last_purchase_price"] = transaction.unit_price
        updated = sample_item.model_copy(update=update)
        return transaction.model_copy(update={"id": 55}), updated

    store.create_item.side_effect = create
    store.record_adjustment.side_effect = record
    store.update_item.side_effect = lambda item: item
    return store


@pytest.fixture
def mock_category_store():
    store = AsyncMock()
    store.get_category.return_value = None
    return store


@pytest.fixture
async def inv_client(mock_inventory_store, mock_category_store):
    bus = EventBus()
    overrides = {
        get_item_store: lambda: mock_inventory_store,
        get_create_item_use_case: lambda: CreateItemUseCase(
            mock_inventory_store, mock_category_store, bus
        ),
        get_update_item_use_case: lambda: UpdateItemUseCase(
            mock_inventory_store, mock_category_store, bus
        ),
        get_delete_items_use_case: lambda: DeleteItemsUseCase(mock_inventory_store, bus),
        get_adjust_stock_use_case: lambda: AdjustStockUseCase(mock_inventory_store, bus),
        get_item_metrics_use_case: lambda: GetItemMetricsUseCase(mock_inventory_store),
    }
    app.dependency_overrides.update(overrides)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    for dependency in overrides:
        app.dependency_overrides.pop(dependency, None)


class TestItemEndpoints:
    async def test_list_items(self, inv_client: AsyncClient, mock_inventory_store):
        response = await inv_client.get(
            "/api/inventory/items", params={"limit": 1, "search": "bean", "low_stock_only": True}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert data["has_more"] is True
        assert data["items"][0]["stock_status"] == "over_stocked"
        assert data["items"][0]["stock_value"] == 480.0
        kwargs = mock_inventory_store.list_items.await_args.kwargs
        assert kwargs["search"] == "bean"
        assert kwargs["low_stock_only"] is True

    async def test_list_rejects_bad_limit(self, inv_client: AsyncClient):
        response = await inv_client.get("/api/inventory/items", params={"limit": 0})
        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_create_item(self, inv_client: AsyncClient, mock_inventory_store):
        response = await inv_client.post(
            "/api/inventory/items",
            json={
                "name": "Green tea",
                "unit": "box",
                "initial_stock": 4,
                "initial_purchase_price": 2.5,
            },
            headers={"X-Actor": "  sam "},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["id"] == 7
        assert data["stock_quantity"] == 4
        assert data["average_purchase_price"] == 2.5
        _, opening = mock_inventory_store.create_item.await_args.args
        assert opening.actor == "sam"
        assert opening.total_price == 10.0

    async def test_create_duplicate_is_409(
        self, inv_client: AsyncClient, mock_inventory_store, sample_item
    ):
        mock_inventory_store.get_item_by_name.return_value = sample_item
        response = await inv_client.post(
            "/api/inventory/items", json={"name": "arabica BEANS", "unit": "kg"}
        )
        assert response.status_code == 409
        assert response.json()["error_code"] == "DUPLICATE_ITEM"

    async def test_create_with_unknown_category_is_404(self, inv_client: AsyncClient):
        response = await inv_client.post(
            "/api/inventory/items", json={"name": "Tea", "unit": "box", "category_id": 3}
        )
        assert response.status_code == 404
        assert response.json()["error_code"] == "CATEGORY_NOT_FOUND"

    async def test_get_missing_item(self, inv_client: AsyncClient, mock_inventory_store):
        mock_inventory_store.get_item.return_value = None
        response = await inv_client.get("/api/inventory/items/99")

        assert response.status_code == 404
        data = response.json()
        assert data["error_code"] == "ITEM_NOT_FOUND"
        assert data["path"] == "/api/inventory/items/99"
        assert data["hint"]

    async def test_update_item(self, inv_client: AsyncClient):
        response = await inv_client.put(
            "/api/inventory/items/1",
            json={"name": "Arabica beans", "selling_price": 20, "reorder_point": 15},
        )
        assert response.status_code == 200
        assert response.json()["reorder_gap"] == 25

    async def test_patch_reorder_point(
        self, inv_client: AsyncClient, mock_inventory_store, sample_item
    ):
        mock_inventory_store.update_reorder_point.return_value = sample_item.model_copy(
            update={"reorder_point": None}
        )
        response = await inv_client.patch(
            "/api/inventory/items/1", json={"reorder_point": None}
        )
        assert response.status_code == 200
        assert response.json()["stock_status"] == "in_stock"

    async def test_delete_item(self, inv_client: AsyncClient, mock_inventory_store):
        mock_inventory_store.delete_items.return_value = 1
        response = await inv_client.delete("/api/inventory/items/1")
        assert response.status_code == 200
        assert response.json() == {"requested": 1, "deleted": 1}

    async def test_bulk_delete(self, inv_client: AsyncClient, mock_inventory_store):
        mock_inventory_store.delete_items.return_value = 2
        response = await inv_client.post(
            "/api/inventory/items/bulk-delete", json={"item_ids": [1, 2, 2, 3]}
        )
        assert response.json() == {"requested": 3, "deleted": 2}

    async def test_metrics(self, inv_client: AsyncClient):
        response = await inv_client.get("/api/inventory/items/1/metrics")
        assert response.status_code == 200
        data = response.json()
        assert data["markup_percent"] == 50.0
        assert data["last_vs_previous_delta_value"] == 1.5

    async def test_transactions(self, inv_client: AsyncClient, mock_inventory_store):
        mock_inventory_store.get_transactions.return_value = [
            StockTransaction(
                id=3,
                item_id=1,
                transaction_type=TransactionType.SALE,
                quantity_change=-2,
                unit_price=18.0,
                total_price=36.0,
                transaction_date=datetime(2024, 3, 2),
            )
        ]
        mock_inventory_store.count_transactions.return_value = 1

        response = await inv_client.get(
            "/api/inventory/items/1/transactions",
            params={
                "transaction_types": ["sale", "damaged"],
                "date_from": "2024-03-01T00:00:00+02:00",
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["transactions"][0]["direction"] == "decrease"
        assert data["has_more"] is False
        kwargs = mock_inventory_store.get_transactions.await_args.kwargs
        assert kwargs["transaction_types"] == [TransactionType.SALE, TransactionType.DAMAGED]
        assert kwargs["date_from"] == datetime(2024, 2, 29, 22, 0)


class TestStockAdjustmentEndpoint:
    async def test_purchase(self, inv_client: AsyncClient):
        response = await inv_client.post(
            "/api/inventory/items/1/stock",
            json={"transaction_type": "purchase", "quantity": 10, "total_price": 145},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["item"]["stock_quantity"] == 50
        assert data["item"]["average_purchase_price"] == 12.5
        assert data["transaction"]["unit_price"] == 14.5
        assert data["transaction"]["quantity_change"] == 10

    async def test_field_errors_are_422(self, inv_client: AsyncClient):
        response = await inv_client.post(
            "/api/inventory/items/1/stock",
            json={"transaction_type": "damaged", "quantity": 41, "unit_price": 1},
        )

        assert response.status_code == 422
        data = response.json()
        assert data["error_code"] == "ADJUSTMENT_REJECTED"
        errors = {e["field"]: e for e in data["field_errors"]}
        assert errors["quantity"]["max_allowed"] == 40
        assert errors["reason"]["message"] == "Reason is required for this transaction type"

    async def test_initial_stock_is_rejected(self, inv_client: AsyncClient):
        response = await inv_client.post(
            "/api/inventory/items/1/stock",
            json={"transaction_type": "initial-stock", "quantity": 1},
        )
        assert response.status_code == 422
        assert response.json()["error_code"] == "MALFORMED_DRAFT"

    async def test_lost_race_is_409(self, inv_client: AsyncClient, mock_inventory_store):
        mock_inventory_store.record_adjustment.side_effect = InsufficientStockError(1, 5, 2)
        response = await inv_client.post(
            "/api/inventory/items/1/stock",
            json={"transaction_type": "sale", "quantity": 5, "unit_price": 18},
        )
        assert response.status_code == 409
        assert response.json()["error_code"] == "INSUFFICIENT_STOCK"

    async def test_unknown_type_is_validation_error(self, inv_client: AsyncClient):
        response = await inv_client.post(
            "/api/inventory/items/1/stock",
            json={"transaction_type": "gift", "quantity": 1},
        )
        assert response.status_code == 422
        assert response.json()["field_errors"][0]["field"] == "transaction_type"
