"""
Unit tests for the seeding entry points (run_seed / main).

Every outcome maps to an exit status and the process always exits.
"""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, patch

import pytest

from database.connection import StoreConnectionError
from database.seeds import orchestrator
from database.seeds.plan import DEFAULT_PLAN
from shared.config import Settings
from shared.startup_validator import StartupValidationError


@pytest.fixture
def settings():
    return Settings(DB_CONNECTION="mongodb://localhost:27017", SEED_RANDOM_SEED=42)


@pytest.fixture(autouse=True)
def no_logging_reconfig():
    """Keep pytest's log capture handlers in place."""
    with patch("database.seeds.orchestrator.configure_logging"):
        yield


def _store_factory(store):
    @asynccontextmanager
    async def fake_open_store(settings):
        yield store

    return fake_open_store


class TestRunSeed:
    @pytest.mark.asyncio
    async def test_success_returns_zero(self, settings, store):
        with patch("database.seeds.orchestrator.open_store", _store_factory(store)):
            status = await orchestrator.run_seed(DEFAULT_PLAN, settings=settings)

        assert status == 0
        assert await store.count("vendors") == 10
        assert await store.count("bookings") == 10

    @pytest.mark.asyncio
    async def test_settings_passed_to_seed_all(self, store):
        settings = Settings(
            DB_CONNECTION="mongodb://localhost:27017",
            SEED_RANDOM_SEED=7,
            SEED_STRICT_PAST_DATES=True,
        )
        seed_all = AsyncMock()

        with patch("database.seeds.orchestrator.open_store", _store_factory(store)), patch(
            "database.seeds.orchestrator.seed_all", seed_all
        ):
            status = await orchestrator.run_seed(DEFAULT_PLAN, settings=settings)

        assert status == 0
        args, kwargs = seed_all.call_args
        assert args == (store, DEFAULT_PLAN)
        assert kwargs["strict_dates"] is True

    @pytest.mark.asyncio
    async def test_connection_failure_returns_one(self, settings, caplog):
        @asynccontextmanager
        async def failing_open_store(settings):
            raise StoreConnectionError("Cannot connect to MongoDB: timeout")
            yield  # pragma: no cover

        with patch("database.seeds.orchestrator.open_store", failing_open_store):
            status = await orchestrator.run_seed(DEFAULT_PLAN, settings=settings)

        assert status == 1
        assert "Database connection failed" in caplog.text

    @pytest.mark.asyncio
    async def test_seeding_error_returns_one(self, settings, store, caplog):
        with patch("database.seeds.orchestrator.open_store", _store_factory(store)), patch(
            "database.seeds.orchestrator.seed_all", AsyncMock(side_effect=RuntimeError("boom"))
        ):
            status = await orchestrator.run_seed(DEFAULT_PLAN, settings=settings)

        assert status == 1
        assert "Database seeding failed" in caplog.text

    @pytest.mark.asyncio
    async def test_invalid_configuration_returns_one(self):
        with patch(
            "database.seeds.orchestrator.validate_startup_config",
            side_effect=StartupValidationError("Missing required environment variables: DB_CONNECTION"),
        ), patch("database.seeds.orchestrator.open_store") as open_store:
            status = await orchestrator.run_seed(DEFAULT_PLAN)

        assert status == 1
        open_store.assert_not_called()


class TestMain:
    @pytest.mark.parametrize("status", [0, 1])
    def test_always_exits_with_status(self, status):
        with patch("database.seeds.orchestrator.run_seed", AsyncMock(return_value=status)):
            with pytest.raises(SystemExit) as exc:
                orchestrator.main()

        assert exc.value.code == status
