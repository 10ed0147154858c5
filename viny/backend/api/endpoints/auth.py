"""
Auth API Endpoints.

Access tokens are returned in the response body; the refresh token is only
ever sent as the httpOnly ``refreshToken`` cookie.
"""

from fastapi import APIRouter, Body, Depends, Request, Response

from viny.backend.core.config import get_app_config
from viny.backend.core.dependencies import (
    CurrentUser,
    DbSession,
    RequestId,
    enforce_auth_rate_limit,
)
from viny.backend.schemas.auth import (
    AccessTokenResponse,
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    ProfileResponse,
    RefreshTokenRequest,
    RegisterRequest,
    UpdateProfileRequest,
    UserResponse,
)
from viny.backend.schemas.base import ApiResponse, ResponseMetadata
from viny.backend.services.auth import AuthResult, AuthService

router = APIRouter()


def _set_refresh_cookie(response: Response, refresh_token: str) -> None:
    app_config = get_app_config()
    cookie = app_config.security.refresh_cookie
    response.set_cookie(
        key=cookie.name,
        value=refresh_token,
        max_age=cookie.max_age_days * 24 * 60 * 60,
        httponly=True,
        secure=app_config.is_production,
        samesite=cookie.same_site,
        path="/",
    )


def _clear_refresh_cookie(response: Response) -> None:
    app_config = get_app_config()
    cookie = app_config.security.refresh_cookie
    response.delete_cookie(
        key=cookie.name,
        path="/",
        httponly=True,
        secure=app_config.is_production,
        samesite=cookie.same_site,
    )


def _auth_response(result: AuthResult, message: str, request_id: str) -> ApiResponse[AuthResponse]:
    return ApiResponse(
        data=AuthResponse(
            user=UserResponse.model_validate(result.user),
            access_token=result.access_token,
        ),
        message=message,
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "/register",
    response_model=ApiResponse[AuthResponse],
    status_code=201,
    summary="Register a new account",
    dependencies=[Depends(enforce_auth_rate_limit)],
)
async def register(
    data: RegisterRequest,
    response: Response,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[AuthResponse]:
    result = await AuthService(db).register(data)
    _set_refresh_cookie(response, result.refresh_token)
    return _auth_response(result, "User registered successfully", request_id)


@router.post(
    "/login",
    response_model=ApiResponse[AuthResponse],
    summary="Log in",
    dependencies=[Depends(enforce_auth_rate_limit)],
)
async def login(
    data: LoginRequest,
    response: Response,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[AuthResponse]:
    result = await AuthService(db).login(data)
    _set_refresh_cookie(response, result.refresh_token)
    return _auth_response(result, "Login successful", request_id)


@router.post(
    "/refresh-token",
    response_model=ApiResponse[AccessTokenResponse],
    summary="Rotate the refresh token",
    description="Reads the refresh token from the refreshToken cookie, "
    "falling back to the request body.",
)
async def refresh_token(
    request: Request,
    response: Response,
    db: DbSession,
    request_id: RequestId,
    data: RefreshTokenRequest | None = Body(default=None),
) -> ApiResponse[AccessTokenResponse]:
    cookie_name = get_app_config().security.refresh_cookie.name
    token = request.cookies.get(cookie_name) or (data.refresh_token if data else None)

    result = await AuthService(db).refresh(token)
    _set_refresh_cookie(response, result.refresh_token)
    return ApiResponse(
        data=AccessTokenResponse(access_token=result.access_token),
        message="Token refreshed successfully",
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "/logout",
    response_model=ApiResponse[None],
    summary="Log out",
)
async def logout(
    response: Response,
    db: DbSession,
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[None]:
    await AuthService(db).logout(user.id)
    _clear_refresh_cookie(response)
    return ApiResponse(
        message="Logout successful",
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/profile",
    response_model=ApiResponse[ProfileResponse],
    summary="Get the caller's profile",
)
async def get_profile(
    db: DbSession,
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[ProfileResponse]:
    profile = await AuthService(db).get_profile(user.id)
    return ApiResponse(
        data=ProfileResponse(user=UserResponse.model_validate(profile)),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.put(
    "/profile",
    response_model=ApiResponse[ProfileResponse],
    summary="Update the caller's profile",
)
async def update_profile(
    data: UpdateProfileRequest,
    db: DbSession,
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[ProfileResponse]:
    profile = await AuthService(db).update_profile(user.id, data)
    return ApiResponse(
        data=ProfileResponse(user=UserResponse.model_validate(profile)),
        message="Profile updated successfully",
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "/change-password",
    response_model=ApiResponse[None],
    summary="Change password",
    description="Also ends every session: the refresh token is revoked.",
)
async def change_password(
    data: ChangePasswordRequest,
    response: Response,
    db: DbSession,
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[None]:
    await AuthService(db).change_password(user.id, data)
    _clear_refresh_cookie(response)
    return ApiResponse(
        message="Password changed successfully",
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/verify-token",
    response_model=ApiResponse[ProfileResponse],
    summary="Verify the access token",
)
async def verify_token(
    db: DbSession,
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[ProfileResponse]:
    profile = await AuthService(db).get_profile(user.id)
    return ApiResponse(
        data=ProfileResponse(user=UserResponse.model_validate(profile)),
        message="Token is valid",
        metadata=ResponseMetadata(request_id=request_id),
    )
