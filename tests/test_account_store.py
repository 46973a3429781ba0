"""
Tests for AccountStore against a temporary SQLite database.
"""

import uuid

import pytest
import pytest_asyncio

from database.account_store import AccountStore
from database.models import Account
from database.session import build_engine, build_session_factory, init_models
from utils.errors import ConflictError, NotFoundError


@pytest_asyncio.fixture
async def store(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
    await init_models(engine)
    yield AccountStore(build_session_factory(engine))
    await engine.dispose()


def _client(email="Owner@Shop.io") -> Account:
    return Account(
        name="Owner",
        email=email,
        password_hash="$2b$04$notarealhash",
        role="client",
        business_name="Shop",
        business_type="Retail",
        company_size="11-50",
        address="2 High St",
    )


class TestAccountStore:
    @pytest.mark.asyncio
    async def test_create_assigns_id_and_timestamps(self, store):
        account = await store.create(_client())
        assert isinstance(account.account_id, uuid.UUID)
        assert account.email == "owner@shop.io"
        assert account.created_at is not None
        assert account.updated_at is not None

    @pytest.mark.asyncio
    async def test_duplicate_email_any_case_conflicts(self, store):
        await store.create(_client("owner@shop.io"))
        with pytest.raises(ConflictError):
            await store.create(_client("OWNER@SHOP.IO"))

    @pytest.mark.asyncio
    async def test_find_by_email_case_insensitive(self, store):
        created = await store.create(_client())
        found = await store.find_by_email("  OWNER@shop.IO ")
        assert found.account_id == created.account_id

    @pytest.mark.asyncio
    async def test_find_missing(self, store):
        with pytest.raises(NotFoundError):
            await store.find_by_email("nobody@example.com")
        with pytest.raises(NotFoundError):
            await store.find_by_id(uuid.uuid4())
        with pytest.raises(NotFoundError):
            await store.find_by_id("not-a-uuid")

    @pytest.mark.asyncio
    async def test_update_fields_refreshes_updated_at(self, store):
        created = await store.create(_client())
        updated = await store.update_fields(str(created.account_id), bio="Hello")
        assert updated.bio == "Hello"
        assert updated.updated_at >= created.updated_at
        reloaded = await store.find_by_id(created.account_id)
        assert reloaded.bio == "Hello"
        assert reloaded.role == "client"

    @pytest.mark.asyncio
    async def test_update_fields_rejects_other_columns(self, store):
        created = await store.create(_client())
        with pytest.raises(ValueError):
            await store.update_fields(created.account_id, role="freelancer")

    @pytest.mark.asyncio
    async def test_update_missing_account(self, store):
        with pytest.raises(NotFoundError):
            await store.update_fields(uuid.uuid4(), bio="x")
