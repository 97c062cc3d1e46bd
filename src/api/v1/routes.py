"""
API v1 routes.

Defines REST endpoints for the Username Registry API. Endpoints are plain
``def`` functions: the registry is synchronous and FastAPI runs them in its
threadpool.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from src.api.dependencies import get_registry
from src.api.models import (
    AccountExistsResponse,
    AvailabilityResponse,
    ErrorResponse,
    UserAccountRequest,
    UserAccountResponse,
    UsernameValidationResponse,
)
from src.domain.exceptions import StorageUnavailable
from src.domain.ports import EMPTY_ACCOUNT_ID, FailureKind
from src.domain.registry import RegistryResult, UsernameRegistry
from src.domain.validation import EMPTY_USERNAME_MESSAGE

router = APIRouter(prefix="/username", tags=["v1"])

_FAILURE_STATUS = {
    FailureKind.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    FailureKind.INVALID_ACCOUNT_ID: status.HTTP_400_BAD_REQUEST,
    FailureKind.USERNAME_TAKEN: status.HTTP_409_CONFLICT,
    FailureKind.DUPLICATE_ACCOUNT: status.HTTP_409_CONFLICT,
    FailureKind.ACCOUNT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    FailureKind.STORAGE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}

_WRITE_RESPONSES = {
    400: {"model": UserAccountResponse, "description": "Invalid username or account id"},
    404: {"model": UserAccountResponse, "description": "Account not found"},
    409: {"model": UserAccountResponse, "description": "Username taken or account already registered"},
    503: {"model": UserAccountResponse, "description": "Storage unavailable"},
}


def _storage_unavailable() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Storage unavailable",
    )


def _account_response(result: RegistryResult, response: Response) -> UserAccountResponse:
    if not result.success:
        response.status_code = _FAILURE_STATUS[result.failure]
        return UserAccountResponse(success=False, message=result.message, errors=result.errors)

    return UserAccountResponse(
        success=True,
        message=result.message,
        account_id=result.binding.account_id,
        username=result.binding.username,
    )


@router.get(
    "/validate",
    response_model=UsernameValidationResponse,
    responses={
        400: {"model": UsernameValidationResponse, "description": "Username parameter missing"},
        503: {"model": ErrorResponse, "description": "Storage unavailable"},
    },
    summary="Validate a username",
    description="Check syntax rules and availability without storing anything.",
)
def validate_username(
    response: Response,
    username: str | None = Query(None, description="Username to validate"),
    registry: UsernameRegistry = Depends(get_registry),
) -> UsernameValidationResponse:
    """
    Validate a username.

    - **username**: 6-30 alphanumeric characters, not already taken
    """
    if username is None or not username.strip():
        response.status_code = status.HTTP_400_BAD_REQUEST
        return UsernameValidationResponse(
            is_valid=False,
            message="Username parameter is required",
            errors=[EMPTY_USERNAME_MESSAGE],
        )

    try:
        result = registry.validate_username(username)
    except StorageUnavailable:
        raise _storage_unavailable() from None

    return UsernameValidationResponse(
        is_valid=result.is_valid, message=result.message, errors=result.errors
    )


@router.post(
    "/store",
    response_model=UserAccountResponse,
    responses={**_WRITE_RESPONSES, 422: {"description": "Malformed request"}},
    summary="Store a username for a new account",
    description="Bind a username to an account id that has no username yet.",
)
def store_user_account(
    request_data: UserAccountRequest,
    response: Response,
    registry: UsernameRegistry = Depends(get_registry),
) -> UserAccountResponse:
    """
    Register an account with its username.

    - **account_id**: UUID, must not be the nil UUID
    - **username**: 6-30 alphanumeric characters, unique case-insensitively
    """
    result = registry.register_account(request_data.account_id, request_data.username)
    return _account_response(result, response)


@router.post(
    "/update",
    response_model=UserAccountResponse,
    responses={**_WRITE_RESPONSES, 422: {"description": "Malformed request"}},
    summary="Update the username of an account",
    description="Replace the username bound to an existing account id.",
)
def update_username(
    request_data: UserAccountRequest,
    response: Response,
    registry: UsernameRegistry = Depends(get_registry),
) -> UserAccountResponse:
    """
    Change an account's username.

    - **account_id**: UUID of a registered account
    - **username**: new username; the account's current one is accepted
    """
    result = registry.update_username(request_data.account_id, request_data.username)
    return _account_response(result, response)


@router.get(
    "/check-availability",
    response_model=AvailabilityResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Username parameter missing"},
        503: {"model": ErrorResponse, "description": "Storage unavailable"},
    },
    summary="Check username availability",
)
def check_username_availability(
    username: str | None = Query(None, description="Username to look up"),
    registry: UsernameRegistry = Depends(get_registry),
) -> AvailabilityResponse:
    """Report whether no account holds the username (case-insensitive)."""
    if username is None or not username.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username parameter is required",
        )

    try:
        available = registry.is_username_available(username)
    except StorageUnavailable:
        raise _storage_unavailable() from None

    return AvailabilityResponse(available=available, username=username)


@router.get(
    "/check-account",
    response_model=AccountExistsResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Nil account id"},
        503: {"model": ErrorResponse, "description": "Storage unavailable"},
    },
    summary="Check whether an account is registered",
)
def check_account_exists(
    account_id: UUID = Query(..., description="Account identifier"),
    registry: UsernameRegistry = Depends(get_registry),
) -> AccountExistsResponse:
    """Report whether the account id has a username binding."""
    if account_id == EMPTY_ACCOUNT_ID:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Valid Account ID is required",
        )

    try:
        exists = registry.is_account_registered(account_id)
    except StorageUnavailable:
        raise _storage_unavailable() from None

    return AccountExistsResponse(exists=exists, account_id=account_id)
