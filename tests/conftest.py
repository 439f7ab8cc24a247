"""
Shared fixtures: a fake catalog served through httpx.MockTransport, and
stores wired to it with in-memory persistence.
"""

import asyncio
from typing import Any

import httpx
import pytest

from tiercart.cart import CartStore
from tiercart.persistence import CartPersistence, MemoryMedium
from tiercart.stock import CatalogClient, StockValidator, FAIL_OPEN

CATALOG_URL = "http://catalog.test/api"


class FakeCatalog:
    """
    In-process stand-in for GET /products/{id}.

    down: every request fails with a connection error.
    status: every request answers with this HTTP status.
    gate: when set, requests wait on it before answering.
    """

    def __init__(self) -> None:
        self.products: dict[str, dict[str, Any]] = {}
        self.requests: list[str] = []
        self.down = False
        self.status: int | None = None
        self.gate: asyncio.Event | None = None

    def add(
        self,
        product_id: str,
        *,
        stock: int = 100,
        enabled: bool = True,
        backorders: bool = False,
        **fields: Any,
    ) -> dict[str, Any]:
        data = {
            "id": product_id,
            "stockEnabled": enabled,
            "stockQuantity": stock,
            "allowBackorders": backorders,
            "retailPrice": 20,
            "retailMinQty": 1,
            "wholesalePrice": 15,
            "wholesaleMinQty": 20,
            "distributorPrice": 10,
            "distributorMinQty": 50,
            "price": 20,
        }
        data.update(fields)
        self.products[product_id] = data
        return data

    async def handle(self, request: httpx.Request) -> httpx.Response:
        product_id = request.url.path.rsplit("/", 1)[-1]
        self.requests.append(product_id)
        if self.gate is not None:
            await self.gate.wait()
        if self.down:
            raise httpx.ConnectError("catalog unreachable", request=request)
        if self.status is not None:
            return httpx.Response(self.status, json={"success": False})
        data = self.products.get(product_id)
        if data is None:
            return httpx.Response(200, json={"success": False, "data": None})
        return httpx.Response(200, json={"success": True, "data": data})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture
def catalog() -> FakeCatalog:
    """Fresh fake catalog with no products."""
    return FakeCatalog()


@pytest.fixture
async def http(catalog: FakeCatalog):
    """httpx client routed to the fake catalog."""
    async with httpx.AsyncClient(base_url=CATALOG_URL, transport=catalog.transport) as client:
        yield client


@pytest.fixture
def catalog_client(http: httpx.AsyncClient) -> CatalogClient:
    return CatalogClient(http)


@pytest.fixture
def validator(catalog_client: CatalogClient) -> StockValidator:
    return StockValidator(catalog_client, policy=FAIL_OPEN)


@pytest.fixture
def medium() -> MemoryMedium:
    return MemoryMedium()


@pytest.fixture
def persistence(medium: MemoryMedium) -> CartPersistence:
    return CartPersistence(medium)


@pytest.fixture
async def store(validator: StockValidator, persistence: CartPersistence) -> CartStore:
    """Empty, fail-open cart store backed by memory."""
    return await CartStore.open(validator, persistence)
