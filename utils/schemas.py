"""
Pydantic schemas for the accounts service.

Response views are tagged variants keyed on ``Role``; every JSON key is
camelCase to match the frontend.  None of them has a credential field.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from database.models import Account


class Role(str, Enum):
    """Account role, fixed at registration."""

    CLIENT = "client"
    FREELANCER = "freelancer"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


# ═══════════════════════════════════════════════════════════════════════════════
# Requests
# ═══════════════════════════════════════════════════════════════════════════════


class ClientRegisterRequest(_CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    business_name: Optional[str] = None
    business_type: Optional[str] = None
    company_size: Optional[str] = None
    address: Optional[str] = None
    user_type: Optional[str] = None


class LoginRequest(_CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
    user_type: Optional[str] = Field(None, description="Optional role hint")


class BioUpdateRequest(_CamelModel):
    bio: Optional[str] = None


# ═══════════════════════════════════════════════════════════════════════════════
# Auth views (register / login)
# ═══════════════════════════════════════════════════════════════════════════════


class ClientView(_CamelModel):
    id: str
    name: str
    email: str
    user_type: Literal["client"] = "client"
    business_name: Optional[str] = None
    business_type: Optional[str] = None
    company_size: Optional[str] = None
    address: Optional[str] = None


class FreelancerView(_CamelModel):
    id: str
    name: str
    email: str
    user_type: Literal["freelancer"] = "freelancer"
    profile_picture: Optional[str] = None
    resume: Optional[str] = None
    skills: Optional[str] = None
    experience: Optional[str] = None


AccountView = Union[ClientView, FreelancerView]


# ═══════════════════════════════════════════════════════════════════════════════
# Profile views (role-gated reads)
# ═══════════════════════════════════════════════════════════════════════════════


class ClientProfile(_CamelModel):
    name: str
    email: str
    business_name: Optional[str] = None
    business_type: Optional[str] = None
    company_size: Optional[str] = None
    address: Optional[str] = None
    bio: Optional[str] = None
    profile_picture: Optional[str] = None


class FreelancerProfile(_CamelModel):
    name: str
    email: str
    skills: Optional[str] = None
    experience: Optional[str] = None
    bio: Optional[str] = None
    profile_picture: Optional[str] = None
    resume: Optional[str] = None


ProfileView = Union[ClientProfile, FreelancerProfile]


def _client_view(account: "Account") -> ClientView:
    return ClientView(
        id=str(account.account_id),
        name=account.name,
        email=account.email,
        business_name=account.business_name,
        business_type=account.business_type,
        company_size=account.company_size,
        address=account.address,
    )


def _freelancer_view(account: "Account") -> FreelancerView:
    return FreelancerView(
        id=str(account.account_id),
        name=account.name,
        email=account.email,
        profile_picture=account.profile_picture,
        resume=account.resume,
        skills=account.skills,
        experience=account.experience,
    )


def _client_profile(account: "Account") -> ClientProfile:
    return ClientProfile(
        name=account.name,
        email=account.email,
        business_name=account.business_name,
        business_type=account.business_type,
        company_size=account.company_size,
        address=account.address,
        bio=account.bio,
        profile_picture=account.profile_picture,
    )


def _freelancer_profile(account: "Account") -> FreelancerProfile:
    return FreelancerProfile(
        name=account.name,
        email=account.email,
        skills=account.skills,
        experience=account.experience,
        bio=account.bio,
        profile_picture=account.profile_picture,
        resume=account.resume,
    )


# Must hold one entry per Role member.
PUBLIC_VIEWS: Dict[Role, Callable[["Account"], AccountView]] = {
    Role.CLIENT: _client_view,
    Role.FREELANCER: _freelancer_view,
}

PROFILE_VIEWS: Dict[Role, Callable[["Account"], ProfileView]] = {
    Role.CLIENT: _client_profile,
    Role.FREELANCER: _freelancer_profile,
}


def public_view(account: "Account") -> AccountView:
    """Role-shaped view returned by register and login."""
    return PUBLIC_VIEWS[Role(account.role)](account)


def profile_view(account: "Account") -> ProfileView:
    """Role-shaped view returned by the profile endpoints."""
    return PROFILE_VIEWS[Role(account.role)](account)
