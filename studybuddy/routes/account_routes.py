from typing import Dict, Optional

import httpx
from fastapi import APIRouter, Depends, Request
from pymongo.database import Database

from studybuddy.database.mongodb import get_db
from studybuddy.services import account_service
from studybuddy.services.identity_service import get_identity_transport
from studybuddy.utils.errors import ValidationError
from studybuddy.utils.jwt_handler import require_user

router = APIRouter(prefix="/account", tags=["Account"])


#-- profile of the caller, created on first visit --#
@router.get("/me")
def me(user: Dict[str, str] = Depends(require_user), db: Database = Depends(get_db)):
    return account_service.get_or_create_profile(db, user)


#-- immediate deletion from the account page (user typed DELETE) --#
@router.post("/delete")
def delete_account(
    user: Dict[str, str] = Depends(require_user),
    db: Database = Depends(get_db),
    transport: Optional[httpx.BaseTransport] = Depends(get_identity_transport),
):
    return account_service.delete_account(db, user["user_id"], transport=transport)


@router.post("/deletion-request")
def request_deletion(user: Dict[str, str] = Depends(require_user), db: Database = Depends(get_db)):
    return account_service.request_account_deletion(db, user)


#-- reached from the emailed link, so no bearer token here --#
@router.post("/confirm-deletion")
async def confirm_deletion(
    request: Request,
    db: Database = Depends(get_db),
    transport: Optional[httpx.BaseTransport] = Depends(get_identity_transport),
):
    try:
        body = await request.json()
    except ValueError:
        raise ValidationError("Invalid JSON in request body")

    token = body.get("token") if isinstance(body, dict) else None
    return account_service.confirm_account_deletion(db, token, transport=transport)
