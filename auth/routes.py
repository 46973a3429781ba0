"""
Auth API routes — client / freelancer registration, login.

Route prefix: /api
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from api.uploads import PROFILE_PICTURE_FIELD, RESUME_FIELD, UploadStorage
from auth.dependencies import (
    get_account_store,
    get_app_settings,
    get_token_service,
    get_upload_storage,
)
from auth.password import hash_password, verify_password
from auth.tokens import TokenService
from config.settings import Settings
from database.account_store import AccountStore, normalize_email
from database.models import Account
from utils.errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from utils.schemas import ClientRegisterRequest, LoginRequest, Role, public_view

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

_INVALID_CREDENTIALS = "Invalid email or password"


# ── Helpers ────────────────────────────────────────────────────────────


def _require(*values: Optional[str]) -> None:
    if any(value is None or not str(value).strip() for value in values):
        raise ValidationError("All fields are required")


def _check_role_hint(user_type: Optional[str], role: Role) -> None:
    """The endpoint fixes the role; a body ``userType`` may only repeat it."""
    if user_type and user_type != role.value:
        raise ValidationError(f"This endpoint only registers {role.value} accounts")


def _parse_role_hint(user_type: Optional[str]) -> Optional[Role]:
    if not user_type:
        return None
    try:
        return Role(user_type)
    except ValueError:
        raise ValidationError("Invalid user type")


async def _hash(password: str, settings: Settings) -> str:
    try:
        return await run_in_threadpool(hash_password, password, settings.bcrypt_rounds)
    except ValueError as exc:
        raise ValidationError(str(exc))


def _auth_response(message: str, token: str, account: Account) -> Dict[str, Any]:
    return {
        "success": True,
        "message": message,
        "token": token,
        "user": public_view(account).to_json(),
    }


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post("/register/client", status_code=status.HTTP_201_CREATED)
async def register_client(
    req: ClientRegisterRequest,
    store: AccountStore = Depends(get_account_store),
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Register a client account."""
    _require(
        req.name, req.email, req.password,
        req.business_name, req.business_type, req.company_size, req.address,
    )
    _check_role_hint(req.user_type, Role.CLIENT)

    if await store.email_exists(req.email):
        raise ConflictError()

    account = await store.create(
        Account(
            name=req.name.strip(),
            email=normalize_email(req.email),
            password_hash=await _hash(req.password, settings),
            role=Role.CLIENT.value,
            business_name=req.business_name,
            business_type=req.business_type,
            company_size=req.company_size,
            address=req.address,
        )
    )

    token = tokens.issue(str(account.account_id), Role.CLIENT)
    logger.info("Registered client %s (%s)", account.email, account.account_id)
    return _auth_response("Client registered successfully", token, account)


@router.post("/register/freelancer", status_code=status.HTTP_201_CREATED)
async def register_freelancer(
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    skills: Optional[str] = Form(None),
    experience: Optional[str] = Form(None),
    user_type: Optional[str] = Form(None, alias="userType"),
    profile_picture: Optional[UploadFile] = File(None, alias=PROFILE_PICTURE_FIELD),
    resume: Optional[UploadFile] = File(None, alias=RESUME_FIELD),
    store: AccountStore = Depends(get_account_store),
    tokens: TokenService = Depends(get_token_service),
    uploads: UploadStorage = Depends(get_upload_storage),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Register a freelancer account with a profile picture and a resume."""
    _require(name, email, password, skills, experience)
    _check_role_hint(user_type, Role.FREELANCER)

    if not profile_picture or not profile_picture.filename or not resume or not resume.filename:
        raise ValidationError("Profile picture and resume are required")
    picture_bytes = await uploads.validate(PROFILE_PICTURE_FIELD, profile_picture)
    resume_bytes = await uploads.validate(RESUME_FIELD, resume)

    if await store.email_exists(email):
        raise ConflictError()

    password_hash = await _hash(password, settings)

    stored: List[str] = []
    try:
        picture_path = await uploads.save(PROFILE_PICTURE_FIELD, profile_picture, picture_bytes)
        stored.append(picture_path)
        resume_path = await uploads.save(RESUME_FIELD, resume, resume_bytes)
        stored.append(resume_path)

        account = await store.create(
            Account(
                name=name.strip(),
                email=normalize_email(email),
                password_hash=password_hash,
                role=Role.FREELANCER.value,
                profile_picture=picture_path,
                resume=resume_path,
                skills=skills,
                experience=experience,
            )
        )
    except Exception:
        for path in stored:
            uploads.discard(path)
        raise

    token = tokens.issue(str(account.account_id), Role.FREELANCER)
    logger.info("Registered freelancer %s (%s)", account.email, account.account_id)
    return _auth_response("Freelancer registered successfully", token, account)


@router.post("/login")
async def login(
    req: LoginRequest,
    store: AccountStore = Depends(get_account_store),
    tokens: TokenService = Depends(get_token_service),
) -> Dict[str, Any]:
    """Login with email + password, optionally asserting the expected role."""
    if not req.email or not req.password:
        raise ValidationError("Email and password are required")
    hint = _parse_role_hint(req.user_type)

    try:
        account = await store.find_by_email(req.email)
    except NotFoundError:
        raise UnauthorizedError(_INVALID_CREDENTIALS)

    # role mismatch has its own message, unlike an unknown email
    if hint is not None and account.role != hint.value:
        raise UnauthorizedError(f"This account is not registered as a {hint.value}")

    if not await run_in_threadpool(verify_password, req.password, account.password_hash):
        raise UnauthorizedError(_INVALID_CREDENTIALS)

    token = tokens.issue(str(account.account_id), Role(account.role))
    logger.info("Login: %s (%s)", account.email, account.account_id)
    return _auth_response("Login successful", token, account)
