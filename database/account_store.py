"""
Account persistence.

Each public method opens its own session and commits before returning,
so a write to one account is atomic on its own.  Emails are stored and
looked up lower-case, which makes the unique constraint case-insensitive.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from database.models import Account
from utils.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

# Only these columns may change after registration.
UPDATABLE_FIELDS = frozenset({"bio", "profile_picture"})


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _to_uuid(value: str | uuid.UUID) -> uuid.UUID:
    return uuid.UUID(value) if isinstance(value, str) else value


class AccountStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create(self, account: Account) -> Account:
        """
        Persist a new account and return it with id and timestamps set.

        Raises ``ConflictError`` when the email is already registered.
        """
        account.email = normalize_email(account.email)
        async with self._session_factory() as session:
            result = await session.execute(
                select(Account.account_id).where(Account.email == account.email)
            )
            if result.scalar_one_or_none() is not None:
                raise ConflictError()

            session.add(account)
            try:
                await session.commit()
            except IntegrityError:
                # lost a race against a concurrent registration
                await session.rollback()
                raise ConflictError()

        logger.debug("Stored account %s (%s)", account.account_id, account.role)
        return account

    async def email_exists(self, email: str) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Account.account_id).where(Account.email == normalize_email(email))
            )
            return result.scalar_one_or_none() is not None

    async def find_by_email(self, email: str) -> Account:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Account).where(Account.email == normalize_email(email))
            )
            account = result.scalar_one_or_none()
        if account is None:
            raise NotFoundError()
        return account

    async def find_by_id(self, account_id: str | uuid.UUID) -> Account:
        try:
            uid = _to_uuid(account_id)
        except ValueError:
            raise NotFoundError()
        async with self._session_factory() as session:
            account = await session.get(Account, uid)
        if account is None:
            raise NotFoundError()
        return account

    async def update_fields(self, account_id: str | uuid.UUID, **fields) -> Account:
        """
        Apply a partial update (``bio`` / ``profile_picture``) and refresh
        ``updated_at``.  Returns the full updated account.
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not updatable: {sorted(unknown)}")
        try:
            uid = _to_uuid(account_id)
        except ValueError:
            raise NotFoundError()

        async with self._session_factory() as session:
            account = await session.get(Account, uid)
            if account is None:
                raise NotFoundError()
            for key, value in fields.items():
                setattr(account, key, value)
            account.updated_at = datetime.now(timezone.utc)
            await session.commit()
        return account
