"""
SQLAlchemy ORM models.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, String, Text, Uuid
from sqlalchemy.orm import DeclarativeBase


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class Account(Base):
    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint("role IN ('client', 'freelancer')", name="ck_accounts_role"),
    )

    account_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(128), nullable=False)
    email = Column(String(255), unique=True, nullable=False)   # always lower-case
    password_hash = Column(String(255), nullable=False)
    role = Column(String(16), nullable=False)

    # client
    business_name = Column(String(255))
    business_type = Column(String(128))
    company_size = Column(String(64))
    address = Column(Text)

    # freelancer
    resume = Column(String(512))
    skills = Column(Text)
    experience = Column(String(128))

    # either role
    profile_picture = Column(String(512))
    bio = Column(Text)

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<Account {self.account_id} {self.role} {self.email}>"
