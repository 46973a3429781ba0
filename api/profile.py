"""
Role-gated profile routes — read profile, update bio, update picture.

One router per role, mounted under /api/<role>.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, UploadFile

from api.uploads import PROFILE_PICTURE_FIELD, UploadStorage
from auth.dependencies import get_account_store, get_upload_storage, require_role
from auth.tokens import TokenClaims
from database.account_store import AccountStore
from utils.errors import ValidationError
from utils.schemas import BioUpdateRequest, Role, profile_view

logger = logging.getLogger(__name__)


def build_profile_router(role: Role) -> APIRouter:
    router = APIRouter(prefix=f"/{role.value}", tags=[role.value])
    current = require_role(role)

    @router.get("/profile")
    async def read_profile(
        claims: TokenClaims = Depends(current),
        store: AccountStore = Depends(get_account_store),
    ) -> Dict[str, Any]:
        account = await store.find_by_id(claims.account_id)
        return {"success": True, "user": profile_view(account).to_json()}

    @router.post("/update-bio")
    async def update_bio(
        req: BioUpdateRequest,
        claims: TokenClaims = Depends(current),
        store: AccountStore = Depends(get_account_store),
    ) -> Dict[str, Any]:
        if req.bio is None:
            raise ValidationError("Bio is required")
        account = await store.update_fields(claims.account_id, bio=req.bio)
        logger.info("Updated bio for %s %s", role.value, account.account_id)
        return {"success": True, "message": "Bio updated successfully", "bio": account.bio}

    @router.post("/update-picture")
    async def update_picture(
        profile_picture: Optional[UploadFile] = File(None, alias=PROFILE_PICTURE_FIELD),
        claims: TokenClaims = Depends(current),
        store: AccountStore = Depends(get_account_store),
        uploads: UploadStorage = Depends(get_upload_storage),
    ) -> Dict[str, Any]:
        if profile_picture is None or not profile_picture.filename:
            raise ValidationError("No file uploaded")
        content = await uploads.validate(PROFILE_PICTURE_FIELD, profile_picture)

        stored_path = await uploads.save(PROFILE_PICTURE_FIELD, profile_picture, content)
        try:
            account = await store.update_fields(claims.account_id, profile_picture=stored_path)
        except Exception:
            uploads.discard(stored_path)
            raise

        logger.info("Updated profile picture for %s %s", role.value, account.account_id)
        return {
            "success": True,
            "message": "Profile picture updated successfully",
            "profilePicture": account.profile_picture,
        }

    return router


client_router = build_profile_router(Role.CLIENT)
freelancer_router = build_profile_router(Role.FREELANCER)
