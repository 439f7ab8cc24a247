"""
Configuration and wiring tests
"""

import logging
from datetime import timedelta

import pytest

from tiercart import CartCandidate, CartConfig, MemoryMedium, configure_logging, connect
from tiercart.persistence import DEFAULT_STORAGE_KEY
from tiercart.stock import FAIL_CLOSED, FAIL_OPEN

from tests.conftest import FakeCatalog

ENV_NAMES = (
    "TIERCART_CATALOG_URL",
    "TIERCART_TIMEOUT",
    "TIERCART_CATALOG_RETRIES",
    "TIERCART_STOCK_POLICY",
    "TIERCART_STORAGE_KEY",
    "TIERCART_PRICE_SCALE",
    "TIERCART_LOW_STOCK",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No TIERCART_* variables and no .env file in the working directory."""
    for name in ENV_NAMES:
        # setenv first so teardown also removes values load_dotenv writes
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


class TestBuilders:
    """Immutable fluent builders."""

    def test_defaults(self):
        config = CartConfig()
        assert config.policy is FAIL_OPEN
        assert config.storage_key == DEFAULT_STORAGE_KEY
        assert config.price_scale == 1
        assert config.timeout == timedelta(seconds=10)

    def test_builders_return_new_config(self):
        # Arrange
        base = CartConfig()

        # Act
        config = (
            base
            .with_catalog("https://shop.example/api/", retries=2)
            .with_timeout(seconds=3)
            .with_policy(FAIL_CLOSED)
            .with_storage_key("shop:cart")
            .with_price_scale(100)
            .with_low_stock_threshold(4)
        )

        # Assert
        assert base == CartConfig()
        assert config.catalog_url == "https://shop.example/api"
        assert config.catalog_retries == 2
        assert config.timeout == timedelta(seconds=3)
        assert config.policy is FAIL_CLOSED
        assert config.storage_key == "shop:cart"
        assert config.price_scale == 100
        assert config.low_stock_threshold == 4

    @pytest.mark.parametrize(
        "build",
        [
            lambda c: c.with_catalog(" "),
            lambda c: c.with_catalog("http://x", retries=-1),
            lambda c: c.with_timeout(delta=timedelta(0)),
            lambda c: c.with_timeout(seconds=0),
            lambda c: c.with_storage_key(""),
            lambda c: c.with_price_scale(0),
            lambda c: c.with_low_stock_threshold(-1),
        ],
    )
    def test_invalid_values_raise(self, build):
        with pytest.raises(ValueError):
            build(CartConfig())


class TestFromEnv:
    """TIERCART_* variables, optionally from a .env file."""

    def test_reads_environment(self, clean_env):
        # Arrange
        clean_env.setenv("TIERCART_CATALOG_URL", "https://catalog.example/api")
        clean_env.setenv("TIERCART_TIMEOUT", "2.5")
        clean_env.setenv("TIERCART_CATALOG_RETRIES", "3")
        clean_env.setenv("TIERCART_STOCK_POLICY", "fail_closed")
        clean_env.setenv("TIERCART_PRICE_SCALE", "100")

        # Act
        config = CartConfig.from_env()

        # Assert
        assert config.catalog_url == "https://catalog.example/api"
        assert config.timeout == timedelta(seconds=2.5)
        assert config.catalog_retries == 3
        assert config.policy is FAIL_CLOSED
        assert config.price_scale == 100
        assert config.storage_key == DEFAULT_STORAGE_KEY

    def test_reads_env_file(self, clean_env, tmp_path):
        # Arrange
        env_file = tmp_path / "cart.env"
        env_file.write_text("TIERCART_STORAGE_KEY=kiosk:cart\nTIERCART_LOW_STOCK=3\n")

        # Act
        config = CartConfig.from_env(env_file)

        # Assert
        assert config.storage_key == "kiosk:cart"
        assert config.low_stock_threshold == 3

    def test_zero_timeout_raises(self, clean_env):
        clean_env.setenv("TIERCART_TIMEOUT", "0")
        with pytest.raises(ValueError, match="Timeout"):
            CartConfig.from_env()

    def test_unknown_policy_raises(self, clean_env):
        clean_env.setenv("TIERCART_STOCK_POLICY", "sometimes")
        with pytest.raises(ValueError, match="sometimes"):
            CartConfig.from_env()


@pytest.mark.asyncio
class TestConnect:
    """connect() wires the whole engine."""

    async def test_connect_restores_and_mutates(self, catalog: FakeCatalog):
        # Arrange
        catalog.add("A", stock=3)
        medium = MemoryMedium()
        config = CartConfig().with_catalog("http://catalog.test/api").with_storage_key("test:cart")

        # Act
        async with connect(config, medium, transport=catalog.transport) as store:
            await store.add_to_cart(CartCandidate("A", "Widget", 20, quantity=5))
        async with connect(config, medium, transport=catalog.transport) as store:
            snapshot = store.snapshot

        # Assert
        assert snapshot.get("A").quantity == 3
        assert await medium.read("test:cart") is not None
        assert catalog.requests == ["A"]


class TestLogging:
    """Opt-in logging setup."""

    def test_configure_logging_sets_package_level(self):
        # Act
        configure_logging("debug")

        # Assert
        assert logging.getLogger("tiercart").level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING
