"""
Product Catalog Backend — Product Repository Tests
====================================================

What:  Tests for ProductRepository against a real SQLite database.
Why:   Field coercion, partial updates and not-found signalling are the
       repository's whole contract; mocks would not exercise them.
"""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from app.database import build_engine, build_session_factory, create_tables
from app.exceptions import DatabaseError, ValidationError
from app.repositories.product_repository import ProductRepository


class TestCreate:

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_coerces_price(self, db_session, sample_product_data):
        repository = ProductRepository(db_session)

        product = await repository.create(sample_product_data)

        assert product.id
        assert product.name == "Pen"
        assert product.price == 1.5
        assert product.description == "Blue ink"
        assert product.image is None

    @pytest.mark.asyncio
    async def test_create_ids_are_unique(self, db_session, sample_product_data):
        repository = ProductRepository(db_session)
        first = await repository.create(sample_product_data)
        second = await repository.create(sample_product_data)
        assert first.id != second.id

    @pytest.mark.asyncio
    async def test_create_keeps_image_path(self, db_session, sample_product_data):
        repository = ProductRepository(db_session)
        product = await repository.create(dict(sample_product_data, image="/uploads/1-pen.jpg"))
        assert product.image == "/uploads/1-pen.jpg"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["name", "price", "description"])
    async def test_create_missing_required_field(self, db_session, sample_product_data, missing):
        repository = ProductRepository(db_session)
        fields = dict(sample_product_data, **{missing: None})

        with pytest.raises(ValidationError) as exc_info:
            await repository.create(fields)

        assert exc_info.value.context["fields"] == [missing]

    @pytest.mark.asyncio
    async def test_create_non_numeric_price(self, db_session, sample_product_data):
        repository = ProductRepository(db_session)
        with pytest.raises(ValidationError, match="price"):
            await repository.create(dict(sample_product_data, price="cheap"))

    @pytest.mark.asyncio
    async def test_create_database_failure(self, sample_product_data):
        session = AsyncMock()
        session.add = lambda obj: None
        session.flush = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("down")))
        repository = ProductRepository(session)

        with pytest.raises(DatabaseError):
            await repository.create(sample_product_data)


class TestList:

    @pytest.mark.asyncio
    async def test_list_empty(self, db_session):
        assert await ProductRepository(db_session).list_all() == []

    @pytest.mark.asyncio
    async def test_list_in_insertion_order(self, db_session):
        repository = ProductRepository(db_session)
        for name in ("Pen", "Pencil", "Eraser"):
            await repository.create({"name": name, "price": 1, "description": "Stationery"})

        products = await repository.list_all()

        assert [p.name for p in products] == ["Pen", "Pencil", "Eraser"]


class TestUpdate:

    @pytest.mark.asyncio
    async def test_update_merges_provided_fields(self, db_session, sample_product_data):
        repository = ProductRepository(db_session)
        product = await repository.create(sample_product_data)

        updated = await repository.update_by_id(
            product.id, {"name": None, "price": "2.25", "description": None}
        )

        assert updated.id == product.id
        assert updated.name == "Pen"
        assert updated.price == 2.25
        assert updated.description == "Blue ink"

    @pytest.mark.asyncio
    async def test_update_unknown_id_returns_none(self, db_session):
        repository = ProductRepository(db_session)

        assert await repository.update_by_id("no-such-id", {"name": "Ghost"}) is None
        assert await repository.list_all() == []

    @pytest.mark.asyncio
    async def test_update_rejects_empty_name(self, db_session, sample_product_data):
        repository = ProductRepository(db_session)
        product = await repository.create(sample_product_data)

        with pytest.raises(ValidationError):
            await repository.update_by_id(product.id, {"name": ""})


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_returns_removed_record(self, db_session, sample_product_data):
        repository = ProductRepository(db_session)
        product = await repository.create(dict(sample_product_data, image="/uploads/1-pen.jpg"))

        deleted = await repository.delete_by_id(product.id)

        assert deleted.id == product.id
        assert deleted.image == "/uploads/1-pen.jpg"
        assert await repository.get_by_id(product.id) is None

    @pytest.mark.asyncio
    async def test_delete_unknown_id_returns_none(self, db_session):
        assert await ProductRepository(db_session).delete_by_id("no-such-id") is None


class TestCommit:

    @pytest.mark.asyncio
    async def test_commit_makes_write_visible_to_other_sessions(self, test_settings, sample_product_data):
        engine = build_engine(test_settings)
        await create_tables(engine)
        session_factory = build_session_factory(engine)
        try:
            async with session_factory() as writer:
                repository = ProductRepository(writer)
                product = await repository.create(sample_product_data)
                await repository.commit()

            async with session_factory() as reader:
                assert await ProductRepository(reader).get_by_id(product.id) is not None
        finally:
            await engine.dispose()

    @pytest.mark.asyncio
    async def test_commit_failure_rolls_back(self):
        session = AsyncMock()
        session.commit = AsyncMock(side_effect=OperationalError("COMMIT", {}, Exception("disk full")))
        repository = ProductRepository(session)

        with pytest.raises(DatabaseError):
            await repository.commit()

        session.rollback.assert_awaited_once()
