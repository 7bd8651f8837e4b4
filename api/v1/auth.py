from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from services.auth import MIN_PASSWORD_LEN, create_token, hash_password, verify_password
from services.db import User, get_session
from api.v1.schemas import LoginIn, SignupIn, SignupOut, TokenOut

router = APIRouter()
_LOG = logging.getLogger(__name__)


async def _by_email(db: AsyncSession, email: str) -> User | None:
    return (
        await db.execute(select(User).where(User.email == email.lower()))
    ).scalar_one_or_none()


# ───────────────────────── signup ──────────────────────────
@router.post(
    "/signup",
    response_model=SignupOut,
    status_code=status.HTTP_201_CREATED,
)
async def signup(
    body: SignupIn,
    db: AsyncSession = Depends(get_session),
) -> SignupOut:
    if len(body.password) < MIN_PASSWORD_LEN:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {MIN_PASSWORD_LEN} characters",
        )
    if await _by_email(db, body.email):
        raise HTTPException(status_code=409, detail="Email already exists")

    user = User(
        email=body.email.lower(),
        name=body.name,
        password_hash=hash_password(body.password),
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    _LOG.info("created user %s", user.id)
    return SignupOut.model_validate(user, from_attributes=True)


# ───────────────────────── login ───────────────────────────
@router.post("/token", response_model=TokenOut)
async def login(
    body: LoginIn,
    db: AsyncSession = Depends(get_session),
) -> TokenOut:
    user = await _by_email(db, body.email)
    if user is None or not verify_password(body.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return TokenOut(access_token=create_token(user.id))
