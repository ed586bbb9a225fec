"""
User account endpoints: list, fetch, create, update, upsert, authenticate.
"""
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from ..config import settings
from ..dependencies import get_account_service
from ..schemas import ErrorList, MessageError, UserListResult, UserResult
from ..service import AccountService, Result
from ..utils.event_logger import log_account_event

router = APIRouter(prefix=f"{settings.API_PREFIX}/users", tags=["users"])


def render(result: Result) -> JSONResponse:
    return JSONResponse(status_code=result.status_code, content=jsonable_encoder(result.body))


@router.get(
    "",
    responses={200: {"model": UserListResult}, 500: {"model": MessageError}},
    summary="List all users"
)
def list_users(service: AccountService = Depends(get_account_service)):
    return render(service.list_users())


@router.post(
    "",
    status_code=201,
    responses={400: {"model": ErrorList}, 403: {"model": ErrorList}, 500: {"model": ErrorList}},
    summary="Create a user and issue its token"
)
def create_user(
    request: Request,
    payload: Dict[str, Any] = Body(...),
    service: AccountService = Depends(get_account_service)
):
    result = service.create_user(payload)
    log_account_event(
        "user_created" if result.ok else "user_create_failure",
        payload.get("username"),
        request,
        {"status": result.status_code}
    )
    return render(result)


@router.post(
    "/authenticate",
    status_code=201,
    responses={400: {"model": ErrorList}, 403: {"model": ErrorList}, 500: {"model": ErrorList}},
    summary="Exchange a username and password for a token"
)
def authenticate(
    request: Request,
    payload: Dict[str, Any] = Body(...),
    service: AccountService = Depends(get_account_service)
):
    result = service.authenticate(payload)
    log_account_event(
        "login_success" if result.ok else "login_failure",
        payload.get("username"),
        request,
        {"status": result.status_code}
    )
    return render(result)


@router.get(
    "/{username}",
    responses={200: {"model": UserResult}, 500: {"model": MessageError}},
    summary="Fetch a user by username"
)
def get_user(username: str, service: AccountService = Depends(get_account_service)):
    return render(service.get_user(username))


@router.put(
    "/{username}",
    responses={
        200: {"model": UserResult},
        400: {"model": MessageError},
        404: {"model": MessageError},
        500: {"model": MessageError}
    },
    summary="Update an existing user"
)
def update_user(
    username: str,
    request: Request,
    payload: Dict[str, Any] = Body(...),
    service: AccountService = Depends(get_account_service)
):
    result = service.update_user(username, payload)
    if result.ok:
        log_account_event("user_updated", username, request, {"fields": sorted(payload)})
    return render(result)


@router.put(
    "/{username}/upsert",
    responses={200: {"model": UserResult}, 400: {"model": MessageError}, 500: {"model": MessageError}},
    summary="Update a user, creating it when it does not exist"
)
def upsert_user(
    username: str,
    request: Request,
    payload: Dict[str, Any] = Body(...),
    service: AccountService = Depends(get_account_service)
):
    result = service.upsert_user(username, payload)
    if result.ok:
        log_account_event("user_upserted", username, request, {"fields": sorted(payload)})
    return render(result)
