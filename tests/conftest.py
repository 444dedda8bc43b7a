"""Pytest configuration and fixtures."""

import asyncio
import os
from types import SimpleNamespace

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from cafe_pos.db.base import Base  # noqa: E402
from cafe_pos.db.deps import get_async_session  # noqa: E402
from cafe_pos.main import app  # noqa: E402
from cafe_pos.models import Offer, Order, Product, ProductType, VariationItem  # noqa: E402


def _run(db_url, func):
    async def main():
        engine = create_async_engine(db_url, poolclass=NullPool)
        session_factory = async_sessionmaker(engine, expire_on_commit=False)
        try:
            async with session_factory() as session:
                return await func(session)
        finally:
            await engine.dispose()

    return asyncio.run(main())


@pytest.fixture()
def db_url(tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path / 'cafe_pos.db'}"

    async def create_schema():
        engine = create_async_engine(url, poolclass=NullPool)
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        await engine.dispose()

    asyncio.run(create_schema())
    return url


@pytest.fixture()
def run(db_url):
    """Run ``await func(session)`` against the test database and return its result."""
    return lambda func: _run(db_url, func)


@pytest.fixture()
def catalog(run):
    """Products, variation items and an offer; exposes uuids and internal ids."""

    async def seed(db):
        rows = {
            "pizza": Product(name="Pizza Margherita", price=900, type=ProductType.FOOD),
            "burger": Product(name="Burger", price=1100, type=ProductType.FOOD),
            "cola": Product(name="Cola", price=300, type=ProductType.DRINK),
            "lunch_menu": Product(name="Lunch Menu", price=1500, type=ProductType.MENU),
            "daily_special": Product(name="Daily Special", price=1200, type=ProductType.SPECIAL),
            "large": VariationItem(name="Large", additional_cost=200),
            "small": VariationItem(name="Small"),
            "extra_cheese": VariationItem(name="Extra cheese", additional_cost=100),
            "half_liter": VariationItem(name="0.5L"),
            "happy_hour": Offer(name="Happy hour"),
        }
        db.add_all(rows.values())
        await db.commit()
        return SimpleNamespace(
            **{name: row.uuid for name, row in rows.items()},
            ids=SimpleNamespace(**{name: row.id for name, row in rows.items()}),
        )

    return run(seed)


@pytest.fixture()
def order(run):
    async def create(db):
        order = Order()
        db.add(order)
        await db.commit()
        return order.uuid

    return run(create)


@pytest.fixture()
def client(db_url):
    engine = create_async_engine(db_url, poolclass=NullPool)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    async def override_get_async_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_async_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def snapshot(run):
    """Top-level lines of an order as ``LineNode`` trees."""
    from cafe_pos.crud.order import get_order_by_uuid
    from cafe_pos.crud.order_item import get_top_level_items
    from cafe_pos.order_items import line_from_model

    def take(order_uuid):
        async def load(db):
            found = await get_order_by_uuid(db, order_uuid)
            return [line_from_model(item) for item in await get_top_level_items(db, found.id)]

        return run(load)

    return take
