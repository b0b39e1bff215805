from __future__ import annotations
from typing import List
from fastapi import APIRouter, Depends, Response
from .contracts import (
    LoginRequest, CreateUserRequest, ChangePasswordRequest,
    LoginResponse, MessageResponse, PublicUser, SessionClaims,
)
from .deps import get_account_service, require_session

auth_router = APIRouter(prefix="/api/auth", tags=["auth"])
users_router = APIRouter(prefix="/api/users", tags=["users"])

# Handlers are sync on purpose: FastAPI runs them in its threadpool, keeping
# bcrypt off the event loop.


@auth_router.post("/login", response_model=LoginResponse)
def login(req: LoginRequest, response: Response, svc = Depends(get_account_service)):
    result = svc.login(req)
    svc.transport.attach(response, result.token)
    return LoginResponse(user=result.user, token=result.token, message="Login successful")


@auth_router.post("/logout", response_model=MessageResponse)
def logout(response: Response, svc = Depends(get_account_service)):
    svc.transport.clear(response)
    return MessageResponse(message="Logout successful")


@users_router.post("", response_model=PublicUser, status_code=201)
def create_user(req: CreateUserRequest, response: Response, svc = Depends(get_account_service)):
    user = svc.register(req)
    response.headers["Location"] = f"{users_router.prefix}/{user.id}"
    return user


@users_router.get("", response_model=List[PublicUser])
def list_users(_: SessionClaims = Depends(require_session), svc = Depends(get_account_service)):
    return svc.list_users()


@users_router.put("/me/password", response_model=MessageResponse)
def change_password(
    req: ChangePasswordRequest,
    claims: SessionClaims = Depends(require_session),
    svc = Depends(get_account_service),
):
    svc.change_password(claims.sub, req)
    return MessageResponse(message="Password changed")


@users_router.get("/{user_id}", response_model=PublicUser)
def get_user(user_id: str, _: SessionClaims = Depends(require_session), svc = Depends(get_account_service)):
    return svc.get_user(user_id)
